"""Port for price lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from storefront.domain.model import CatalogPrice


@runtime_checkable
class PriceLookup(Protocol):
    async def price_of(self, product_id: str) -> CatalogPrice: ...
