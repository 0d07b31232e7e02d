"""Buyer-facing entities persisted by the storefront."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4

from storefront.domain.model.enums import Role


def new_address_id() -> str:
    return uuid4().hex


@dataclass(eq=False, kw_only=True)
class User:
    """A buyer or seller as mirrored from the identity provider.

    ``cart_items`` maps product ids to quantities. It is always present; an
    empty cart is stored as an empty mapping rather than omitted.
    """

    id: str
    name: str
    email: str
    image_url: str
    role: Role = Role.USER
    cart_items: dict[str, int] = field(default_factory=dict[str, int])

    @property
    def cart_is_empty(self) -> bool:
        return not self.cart_items


@dataclass(eq=False, kw_only=True)
class Address:
    id: str = field(default_factory=new_address_id)
    user_id: str
    full_name: str
    phone_number: str
    pincode: str
    area: str
    city: str
    state: str

