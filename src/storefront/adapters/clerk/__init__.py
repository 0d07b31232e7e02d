"""Clerk identity provider payload adapter."""

from __future__ import annotations

from .schema import ClerkDeletedUserData, ClerkEmailAddress, ClerkUserData
from .translator import ClerkPayloadError, primary_email, to_customer_profile

__all__ = [
    "ClerkDeletedUserData",
    "ClerkEmailAddress",
    "ClerkPayloadError",
    "ClerkUserData",
    "primary_email",
    "to_customer_profile",
]
