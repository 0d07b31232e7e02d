"""Catalog entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import uuid4


def new_product_id() -> str:
    return uuid4().hex


@dataclass(eq=False, kw_only=True)
class Product:
    id: str = field(default_factory=new_product_id)
    seller_id: str
    name: str
    description: str
    category: str
    price: Decimal
    offer_price: Decimal
    images: list[str] = field(default_factory=list[str])
    created_at_ms: int = 0


@dataclass(frozen=True, slots=True)
class CatalogPrice:
    """Current list and offer price of one product."""

    product_id: str
    price: Decimal
    offer_price: Decimal
