"""Translate domain events into Inngest payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .schema import AddressData, EventPayload, LineItemData, OrderCreatedData

if TYPE_CHECKING:
    from storefront.domain.model import OrderCreatedEvent


def to_event_payload(event: OrderCreatedEvent) -> EventPayload:
    address = event.address
    data = OrderCreatedData(
        order_id=event.event_id,
        buyer_id=event.buyer_id,
        address=AddressData(
            full_name=address.full_name,
            phone_number=address.phone_number,
            pincode=address.pincode,
            area=address.area,
            city=address.city,
            state=address.state,
        ),
        items=[
            LineItemData(product_id=item.product_id, quantity=item.quantity)
            for item in event.items
        ],
        subtotal=event.subtotal,
        tax=event.tax,
        total=event.total,
        created_at=event.created_at.isoformat(),
    )
    return EventPayload(
        name=event.name,
        id=event.event_id,
        data=data,
        ts=int(event.created_at.timestamp() * 1000),
    )
