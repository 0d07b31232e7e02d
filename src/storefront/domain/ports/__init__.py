"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import PriceLookup
from .connection import ConnectionProvider
from .persistence import AddressRepository, ProductRepository, Repository, UserRepository
from .publishing import EventPublisher
from .unit_of_work import (
    RepositoryCollection,
    StorefrontRepositories,
    StorefrontUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "AddressRepository",
    "ConnectionProvider",
    "EventPublisher",
    "PriceLookup",
    "ProductRepository",
    "Repository",
    "RepositoryCollection",
    "StorefrontRepositories",
    "StorefrontUnitOfWork",
    "UnitOfWork",
    "UserRepository",
]
