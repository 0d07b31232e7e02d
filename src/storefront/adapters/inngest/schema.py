"""Wire models of the Inngest event API."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# whole-unit amounts go out as JSON integers, fractional ones as floats
Amount = Annotated[
    Decimal,
    PlainSerializer(
        lambda value: int(value) if value == value.to_integral_value() else float(value),
        return_type=int | float,
        when_used="json",
    ),
]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class AddressData(CamelModel):
    full_name: str
    phone_number: str
    pincode: str
    area: str
    city: str
    state: str


class LineItemData(CamelModel):
    product_id: str
    quantity: int


class OrderCreatedData(CamelModel):
    order_id: str
    buyer_id: str
    address: AddressData
    items: list[LineItemData]
    subtotal: Amount
    tax: Amount
    total: Amount
    created_at: str


class EventPayload(BaseModel):
    """One event as accepted by ``POST /e/{event_key}``."""

    model_config = ConfigDict(frozen=True)

    name: str
    id: str
    data: OrderCreatedData
    ts: int = Field(description="Event time in milliseconds since the epoch")


class SendEventResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ids: list[str] = Field(default_factory=list[str])
    status: int = 200
    error: str | None = None
