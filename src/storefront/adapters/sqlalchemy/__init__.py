"""SQLAlchemy adapter package for the storefront."""

from __future__ import annotations

from .connection import ConnectionCache, acquire, get_connection_cache, open_engine, shutdown
from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyAddressRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyUserRepository,
)
from .unit_of_work import SqlAlchemyUnitOfWork, UnitOfWorkError

__all__ = [
    "ConnectionCache",
    "SqlAlchemyAddressRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyUserRepository",
    "UnitOfWorkError",
    "acquire",
    "get_connection_cache",
    "mapper_registry",
    "open_engine",
    "shutdown",
    "start_mappers",
]
