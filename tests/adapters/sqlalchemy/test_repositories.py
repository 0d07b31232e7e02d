from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import TYPE_CHECKING, cast

import pytest
from sqlalchemy.exc import ProgrammingError

from storefront.adapters.sqlalchemy import (
    SqlAlchemyAddressRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyUnitOfWork,
)
from storefront.domain.errors import DatabaseConnectionError
from storefront.domain.model import Role
from tests.helpers.storefront import (
    SELLER_ID,
    make_address,
    make_product,
    make_user,
    run_with_engine,
    seed,
    stored_cart_json,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

    from storefront.config import DatabaseConfig


def test_user_round_trip_keeps_cart_and_role(database_config: DatabaseConfig) -> None:
    async def scenario(engine: AsyncEngine) -> None:
        await seed(engine, make_user(cart={"prod_kettle": 2, "prod_mug": 1}))

        async with SqlAlchemyUnitOfWork(engine) as uow:
            user = await uow.repositories.users.get("user_buyer")

        assert user is not None
        assert user.role is Role.USER
        assert user.cart_items == {"prod_kettle": 2, "prod_mug": 1}

    run_with_engine(database_config, scenario)


def test_empty_cart_is_stored_explicitly(database_config: DatabaseConfig) -> None:
    async def scenario(engine: AsyncEngine) -> None:
        await seed(engine, make_user())
        assert await stored_cart_json(engine, "user_buyer") == "{}"

    run_with_engine(database_config, scenario)


def test_product_prices_are_decimals(database_config: DatabaseConfig) -> None:
    async def scenario(engine: AsyncEngine) -> None:
        await seed(
            engine,
            make_user(SELLER_ID),
            make_product("prod_kettle", Decimal("99.90"), price=Decimal("120.00")),
        )

        async with SqlAlchemyUnitOfWork(engine) as uow:
            product = await uow.repositories.products.get("prod_kettle")
            missing = await uow.repositories.products.get("prod_unknown")

        assert missing is None
        assert product is not None
        assert product.offer_price == Decimal("99.90")
        assert product.price == Decimal("120.00")
        assert isinstance(product.offer_price, Decimal)
        assert product.images == ["https://img.example.com/prod_kettle.png"]

    run_with_engine(database_config, scenario)


def test_addresses_are_listed_per_user(database_config: DatabaseConfig) -> None:
    async def scenario(engine: AsyncEngine) -> None:
        await seed(
            engine,
            make_address(full_name="Ravi Verma"),
            make_address(full_name="Asha Verma"),
            make_address("user_other", full_name="Someone Else"),
        )

        async with SqlAlchemyUnitOfWork(engine) as uow:
            found = await uow.repositories.addresses.list_for_user("user_buyer")
            none = await uow.repositories.addresses.list_for_user("user_nobody")

        assert [address.full_name for address in found] == ["Asha Verma", "Ravi Verma"]
        assert list(none) == []

    run_with_engine(database_config, scenario)


def test_remove_deletes_user(database_config: DatabaseConfig) -> None:
    async def scenario(engine: AsyncEngine) -> None:
        await seed(engine, make_user())

        async with SqlAlchemyUnitOfWork(engine) as uow:
            user = await uow.repositories.users.get("user_buyer")
            assert user is not None
            await uow.repositories.users.remove(user)
            await uow.commit()

        async with SqlAlchemyUnitOfWork(engine) as uow:
            assert await uow.repositories.users.get("user_buyer") is None

    run_with_engine(database_config, scenario)


class BrokenSession:
    """Session whose driver rejects every statement."""

    def __init__(self) -> None:
        self.error = ProgrammingError("SELECT", {}, Exception('relation "product" does not exist'))

    async def get(self, *_: object) -> None:
        raise self.error

    async def execute(self, *_: object) -> None:
        raise self.error


def test_driver_errors_surface_as_database_errors() -> None:
    session = cast("AsyncSession", BrokenSession())

    async def scenario() -> None:
        with pytest.raises(DatabaseConnectionError, match='relation "product" does not exist'):
            await SqlAlchemyProductRepository(session).get("prod_kettle")
        with pytest.raises(DatabaseConnectionError, match="Database error"):
            await SqlAlchemyAddressRepository(session).list_for_user("user_buyer")

    asyncio.run(scenario())
