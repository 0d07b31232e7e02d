"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    USER = "user"
    SELLER = "seller"


class CheckoutState(StrEnum):
    """Steps of the order submission workflow, including its terminal states."""

    VALIDATING = "validating"
    PRICING = "pricing"
    PUBLISHING = "publishing"
    CLEARING_CART = "clearing_cart"
    COMPLETED = "completed"
    REJECTED = "rejected"
    FAILED = "failed"
