"""Inngest event bus adapter."""

from __future__ import annotations

from .client import InngestEventPublisher
from .schema import EventPayload, OrderCreatedData, SendEventResponse
from .translator import to_event_payload

__all__ = [
    "EventPayload",
    "InngestEventPublisher",
    "OrderCreatedData",
    "SendEventResponse",
    "to_event_payload",
]
