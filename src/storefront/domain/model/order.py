"""Order value objects: requests, priced orders and the event handed to the bus."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal

ORDER_CREATED_EVENT: Final[str] = "order/created"


@dataclass(frozen=True, slots=True)
class LineItem:
    product_id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class ShippingAddress:
    full_name: str = ""
    phone_number: str = ""
    pincode: str = ""
    area: str = ""
    city: str = ""
    state: str = ""

    @property
    def is_blank(self) -> bool:
        return not any(str(getattr(self, f.name)).strip() for f in fields(self))


@dataclass(frozen=True, slots=True)
class OrderDraft:
    """A validated checkout request: address present and at least one item."""

    buyer_id: str
    shipping_address: ShippingAddress
    items: tuple[LineItem, ...]


@dataclass(frozen=True, slots=True)
class OrderPricing:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


@dataclass(frozen=True, slots=True)
class PricedOrder:
    order_id: str
    draft: OrderDraft
    pricing: OrderPricing
    created_at: datetime


@dataclass(frozen=True, slots=True)
class OrderCreatedEvent:
    """Wire-ready description of an accepted order.

    ``event_id`` doubles as the idempotency key on the bus, so resubmitting the
    same event after an ambiguous failure is deduplicated downstream.
    """

    event_id: str
    buyer_id: str
    address: ShippingAddress
    items: tuple[LineItem, ...]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    created_at: datetime
    name: str = ORDER_CREATED_EVENT

    @classmethod
    def from_order(cls, order: PricedOrder) -> OrderCreatedEvent:
        return cls(
            event_id=order.order_id,
            buyer_id=order.draft.buyer_id,
            address=order.draft.shipping_address,
            items=order.draft.items,
            subtotal=order.pricing.subtotal,
            tax=order.pricing.tax,
            total=order.pricing.total,
            created_at=order.created_at,
        )


@dataclass(frozen=True, slots=True)
class PublishReceipt:
    """Acknowledgement returned by the event bus."""

    event_ids: tuple[str, ...]
