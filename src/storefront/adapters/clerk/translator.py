"""Translate Clerk user payloads into customer profiles."""

from __future__ import annotations

from typing import TYPE_CHECKING

from storefront.domain.customers import CustomerProfile

if TYPE_CHECKING:
    from .schema import ClerkUserData


class ClerkPayloadError(ValueError):
    """Raised when a Clerk user payload cannot be mapped to a customer."""


def primary_email(data: ClerkUserData) -> str:
    if not data.email_addresses:
        raise ClerkPayloadError(f"Clerk user {data.id} has no email address")
    for address in data.email_addresses:
        if address.id is not None and address.id == data.primary_email_address_id:
            return address.email_address
    return data.email_addresses[0].email_address


def to_customer_profile(data: ClerkUserData) -> CustomerProfile:
    parts = (data.first_name, data.last_name)
    name = " ".join(part.strip() for part in parts if part and part.strip())
    return CustomerProfile(
        user_id=data.id,
        name=name,
        email=primary_email(data),
        image_url=data.image_url,
    )
