from __future__ import annotations

from decimal import Decimal
from functools import partial
from typing import TYPE_CHECKING

import pytest

from storefront.adapters.sqlalchemy import SqlAlchemyUnitOfWork
from storefront.domain.catalog import CatalogReader
from storefront.domain.errors import NotFoundError, ProductNotFoundError
from storefront.domain.model import CatalogPrice
from tests.helpers.storefront import run_with_engine, seed_catalog

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from storefront.config import DatabaseConfig


def test_price_of_returns_current_prices(
    database_config: DatabaseConfig, catalog_prices: dict[str, Decimal]
) -> None:
    async def scenario(engine: AsyncEngine) -> CatalogPrice:
        await seed_catalog(engine, catalog_prices, cart={})
        reader = CatalogReader(partial(SqlAlchemyUnitOfWork, engine))
        return await reader.price_of("prod_kettle")

    price = run_with_engine(database_config, scenario)

    assert price == CatalogPrice(
        product_id="prod_kettle", price=Decimal("110.00"), offer_price=Decimal("100.00")
    )


def test_price_of_unknown_product(database_config: DatabaseConfig) -> None:
    async def scenario(engine: AsyncEngine) -> None:
        reader = CatalogReader(partial(SqlAlchemyUnitOfWork, engine))
        with pytest.raises(NotFoundError) as excinfo:
            await reader.price_of("prod_gone")
        assert isinstance(excinfo.value, ProductNotFoundError)

    run_with_engine(database_config, scenario)
