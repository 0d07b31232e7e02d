"""Read-only catalog lookups."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from storefront.domain.errors import ProductNotFoundError
from storefront.domain.model import CatalogPrice

if TYPE_CHECKING:
    from collections.abc import Callable

    from storefront.domain.ports.unit_of_work import StorefrontUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True)
class CatalogReader:
    """Resolve current prices, one short unit of work per lookup.

    Each lookup owns its session, so several lookups may be awaited concurrently.
    """

    unit_of_work_factory: Callable[[], StorefrontUnitOfWork]

    async def price_of(self, product_id: str) -> CatalogPrice:
        async with self.unit_of_work_factory() as uow:
            product = await uow.repositories.products.get(product_id)
        if product is None:
            log.info("Catalog lookup missed product %s", product_id)
            raise ProductNotFoundError(product_id)
        return CatalogPrice(
            product_id=product.id,
            price=product.price,
            offer_price=product.offer_price,
        )
