"""Domain model for the storefront checkout core."""

from __future__ import annotations

from .catalog import CatalogPrice, Product
from .customer import Address, User
from .enums import CheckoutState, Role
from .order import (
    ORDER_CREATED_EVENT,
    LineItem,
    OrderCreatedEvent,
    OrderDraft,
    OrderPricing,
    PricedOrder,
    PublishReceipt,
    ShippingAddress,
)

__all__ = [
    "ORDER_CREATED_EVENT",
    "Address",
    "CatalogPrice",
    "CheckoutState",
    "LineItem",
    "OrderCreatedEvent",
    "OrderDraft",
    "OrderPricing",
    "PricedOrder",
    "Product",
    "PublishReceipt",
    "Role",
    "ShippingAddress",
    "User",
]
