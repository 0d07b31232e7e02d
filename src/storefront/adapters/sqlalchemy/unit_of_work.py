"""SQLAlchemy-backed unit of work for storefront repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.adapters.sqlalchemy.mappings import start_mappers
from storefront.adapters.sqlalchemy.repositories import (
    SqlAlchemyAddressRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyUserRepository,
)
from storefront.domain.ports.unit_of_work import StorefrontRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.ext.asyncio import AsyncEngine


class UnitOfWorkError(RuntimeError):
    """Raised when a unit of work is used outside its ``async with`` block."""


class SqlAlchemyUnitOfWork:
    """One session (and transaction) over a borrowed engine."""

    def __init__(self, engine: AsyncEngine) -> None:
        start_mappers()
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=engine, expire_on_commit=False
        )
        self._session: AsyncSession | None = None
        self._repositories: StorefrontRepositories | None = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise UnitOfWorkError("Unit of work session already initialised")
        session = self.session_factory()
        self._session = session
        self._repositories = StorefrontRepositories(
            users=SqlAlchemyUserRepository(session),
            products=SqlAlchemyProductRepository(session),
            addresses=SqlAlchemyAddressRepository(session),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                await session.rollback()
        finally:
            await session.close()
            self._session = None
            self._repositories = None
        return False

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    @property
    def repositories(self) -> StorefrontRepositories:
        if self._repositories is None:
            raise UnitOfWorkError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise UnitOfWorkError("Unit of work session not initialised")
        return self._session


if TYPE_CHECKING:
    from storefront.domain.ports.unit_of_work import StorefrontUnitOfWork

    def _uow_check(engine: AsyncEngine) -> StorefrontUnitOfWork:
        return SqlAlchemyUnitOfWork(engine)
