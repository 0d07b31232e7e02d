"""Ports for handing events to the durable event bus."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from storefront.domain.model import OrderCreatedEvent, PublishReceipt


@runtime_checkable
class EventPublisher(Protocol):
    """Delivers an event to a bus with at-least-once delivery downstream.

    Implementations raise ``PublishError`` when the bus rejects the event or
    the hand-off times out.
    """

    async def publish(self, event: OrderCreatedEvent) -> PublishReceipt: ...


__all__ = ["EventPublisher"]
