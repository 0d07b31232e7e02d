"""Ports for persisting storefront aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from storefront.domain.model import Address, Product, User

if TYPE_CHECKING:
    from collections.abc import Sequence


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    async def get(self, key: str) -> TEntity | None: ...

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class UserRepository(Repository[User], Protocol):
    """Persistence contract for buyers (and their carts)."""

    async def remove(self, entity: User) -> None: ...


@runtime_checkable
class ProductRepository(Repository[Product], Protocol):
    """Read access to the catalog."""


@runtime_checkable
class AddressRepository(Repository[Address], Protocol):
    """Saved shipping addresses."""

    async def list_for_user(self, user_id: str) -> Sequence[Address]: ...
