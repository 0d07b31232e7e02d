"""Repository implementations backed by SQLAlchemy async sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError

from storefront.adapters.sqlalchemy.mappings import address_table
from storefront.domain.errors import DatabaseConnectionError
from storefront.domain.model import Address, Product, User

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


def database_error(exc: DBAPIError) -> DatabaseConnectionError:
    """Map a driver error to the persistence failure checkout callers understand."""

    if exc.connection_invalidated or isinstance(exc, (OperationalError, InterfaceError)):
        return DatabaseConnectionError(f"Database unavailable: {exc.orig}")
    return DatabaseConnectionError(f"Database error: {exc.orig}")


class SqlAlchemyRepository[TEntity]:
    """Shared primary-key access for mapped entities."""

    def __init__(self, session: AsyncSession, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    async def get(self, key: str) -> TEntity | None:
        try:
            return await self.session.get(self._entity_cls, key)
        except DBAPIError as exc:
            raise database_error(exc) from exc

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)

    async def remove(self, entity: TEntity) -> None:
        await self.session.delete(entity)


class SqlAlchemyUserRepository(SqlAlchemyRepository[User]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)


class SqlAlchemyProductRepository(SqlAlchemyRepository[Product]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Product)


class SqlAlchemyAddressRepository(SqlAlchemyRepository[Address]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Address)

    async def list_for_user(self, user_id: str) -> Sequence[Address]:
        stmt = (
            select(Address)
            .where(address_table.c.user_id == user_id)
            .order_by(address_table.c.full_name, address_table.c.id)
        )
        try:
            result = await self.session.execute(stmt)
        except DBAPIError as exc:
            raise database_error(exc) from exc
        return result.scalars().all()
