"""Process-wide, lazily opened database engine.

At most one engine is live and at most one connection attempt is in flight per
process. Callers that arrive while an attempt is running wait for that attempt
instead of starting their own. A failed attempt is reported to every waiter and
then forgotten, so the next caller starts a fresh one; a successful engine is
kept until :func:`shutdown`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from storefront.adapters.sqlalchemy.mappings import start_mappers
from storefront.adapters.sqlalchemy.migrations import upgrade_connection
from storefront.config import ConfigurationError, DatabaseConfig, get_database_config
from storefront.domain.errors import DatabaseConnectionError

if TYPE_CHECKING:
    from storefront.domain.ports.connection import ConnectionProvider

log = getLogger(__name__)

type Connector = Callable[[DatabaseConfig], Awaitable[AsyncEngine]]
type ConfigLoader = Callable[[], DatabaseConfig]


async def open_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create an engine, prove it can reach the database and migrate the schema."""

    start_mappers()
    engine = create_async_engine(config.uri, echo=config.echo, pool_pre_ping=True)
    try:
        async with asyncio.timeout(config.connect_timeout_seconds):
            async with engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
            if config.run_migrations:
                async with engine.begin() as connection:
                    await connection.run_sync(upgrade_connection)
    except BaseException:
        await engine.dispose()
        raise
    return engine


@dataclass(slots=True)
class _CacheState:
    engine: AsyncEngine | None = None
    pending: asyncio.Task[AsyncEngine] | None = None


class ConnectionCache:
    """Hands out the shared :class:`AsyncEngine`, connecting on first use.

    The cache is bound to the event loop that first acquires from it.
    """

    def __init__(
        self,
        *,
        connector: Connector = open_engine,
        config_loader: ConfigLoader = get_database_config,
    ) -> None:
        self._connector = connector
        self._config_loader = config_loader
        self._config: DatabaseConfig | None = None
        self._state = _CacheState()
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._state.engine is not None

    @property
    def is_connecting(self) -> bool:
        return self._state.pending is not None

    async def acquire(self) -> AsyncEngine:
        engine = self._state.engine
        if engine is not None:
            return engine

        async with self._lock:
            if self._state.engine is not None:
                return self._state.engine
            pending = self._state.pending
            if pending is None:
                pending = asyncio.create_task(self._connect(), name="storefront-db-connect")
                self._state.pending = pending

        # a cancelled waiter must not cancel the attempt the others are waiting on
        return await asyncio.shield(pending)

    async def _connect(self) -> AsyncEngine:
        try:
            if self._config is None:
                self._config = self._config_loader()
            config = self._config
            log.info("Connecting to %s", _redact(config.uri))
            engine = await self._connector(config)
        except DatabaseConnectionError:
            raise
        except ConfigurationError as exc:
            log.warning("Database configuration rejected: %s", exc)
            raise DatabaseConnectionError(f"Database configuration invalid: {exc}") from exc
        except TimeoutError as exc:
            timeout = self._config.connect_timeout_seconds if self._config else 0.0
            raise DatabaseConnectionError(
                f"Database connection timed out after {timeout:.1f}s"
            ) from exc
        except Exception as exc:
            log.warning("Database connection attempt failed: %s", exc)
            raise DatabaseConnectionError(f"Database connection failed: {exc}") from exc
        else:
            self._state.engine = engine
            log.info("Database connection established")
            return engine
        finally:
            self._state.pending = None

    async def dispose(self) -> None:
        """Close the engine; the next acquisition reconnects."""

        pending = self._state.pending
        if pending is not None:
            pending.cancel()
            await asyncio.gather(pending, return_exceptions=True)
        engine = self._state.engine
        self._state = _CacheState()
        self._lock = asyncio.Lock()
        if engine is not None:
            await engine.dispose()
            log.info("Database connection closed")


def _redact(uri: str) -> str:
    scheme, sep, rest = uri.partition("://")
    credentials, at, host = rest.rpartition("@")
    if not at:
        return uri
    user = credentials.split(":", 1)[0]
    return f"{scheme}{sep}{user}:***@{host}"


_CACHE = ConnectionCache()


def get_connection_cache() -> ConnectionCache:
    return _CACHE


async def acquire() -> AsyncEngine:
    """Return the process-wide engine, connecting if needed."""

    return await _CACHE.acquire()


async def shutdown() -> None:
    """Dispose the process-wide engine. Only for process exit and tests."""

    global _CACHE  # noqa: PLW0603
    cache = _CACHE
    _CACHE = ConnectionCache()
    await cache.dispose()


if TYPE_CHECKING:

    def _provider_check(cache: ConnectionCache) -> ConnectionProvider[AsyncEngine]:
        return cache
