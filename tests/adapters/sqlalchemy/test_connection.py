from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, cast

import pytest
from sqlalchemy import inspect

from storefront.adapters.sqlalchemy.connection import ConnectionCache, open_engine
from storefront.config import DatabaseConfig, MissingConfigurationError
from storefront.domain.errors import DatabaseConnectionError

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine


class FakeEngine:
    def __init__(self, number: int) -> None:
        self.number = number
        self.disposed = False

    async def dispose(self) -> None:
        self.disposed = True


@dataclass
class CountingConnector:
    delay: float = 0.01
    failures: int = 0
    error: Exception = field(default_factory=lambda: OSError("connection refused"))
    gate: asyncio.Event | None = None
    calls: int = 0
    engines: list[FakeEngine] = field(default_factory=list[FakeEngine])

    async def __call__(self, config: DatabaseConfig) -> AsyncEngine:
        _ = config
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        await asyncio.sleep(self.delay)
        if self.calls <= self.failures:
            raise self.error
        engine = FakeEngine(self.calls)
        self.engines.append(engine)
        return cast("AsyncEngine", engine)


@dataclass
class CountingLoader:
    config: DatabaseConfig
    calls: int = 0

    def __call__(self) -> DatabaseConfig:
        self.calls += 1
        return self.config


def _cache(connector: CountingConnector, loader: CountingLoader) -> ConnectionCache:
    return ConnectionCache(connector=connector, config_loader=loader)


def test_concurrent_callers_share_one_connection_attempt(database_config: DatabaseConfig) -> None:
    connector = CountingConnector()
    loader = CountingLoader(database_config)

    async def scenario() -> None:
        cache = _cache(connector, loader)
        engines = await asyncio.gather(*(cache.acquire() for _ in range(10)))
        assert connector.calls == 1
        assert all(engine is engines[0] for engine in engines)
        assert cache.is_connected
        assert not cache.is_connecting

        again = await cache.acquire()
        assert again is engines[0]
        assert connector.calls == 1
        await cache.dispose()

    asyncio.run(scenario())
    assert loader.calls == 1
    assert connector.engines[0].disposed


def test_failed_attempt_reaches_every_waiter_and_is_not_cached(
    database_config: DatabaseConfig,
) -> None:
    connector = CountingConnector(failures=1)
    loader = CountingLoader(database_config)

    async def scenario() -> None:
        cache = _cache(connector, loader)
        results = await asyncio.gather(
            *(cache.acquire() for _ in range(5)), return_exceptions=True
        )
        assert connector.calls == 1
        assert all(isinstance(result, DatabaseConnectionError) for result in results)
        assert "connection refused" in str(results[0])
        assert not cache.is_connected
        assert not cache.is_connecting

        engine = await cache.acquire()
        assert connector.calls == 2
        assert engine is connector.engines[0]
        await cache.dispose()

    asyncio.run(scenario())
    assert loader.calls == 1


def test_connect_timeout_is_reported_as_connection_error(database_config: DatabaseConfig) -> None:
    connector = CountingConnector(failures=1, error=TimeoutError())

    async def scenario() -> None:
        cache = _cache(connector, CountingLoader(database_config))
        with pytest.raises(DatabaseConnectionError, match="timed out after 5.0s"):
            await cache.acquire()

    asyncio.run(scenario())


def test_configuration_errors_become_connection_errors(database_config: DatabaseConfig) -> None:
    loads: list[int] = []

    def flaky_loader() -> DatabaseConfig:
        loads.append(1)
        if len(loads) == 1:
            raise MissingConfigurationError("Missing configuration for: STOREFRONT_DATABASE_URI")
        return database_config

    async def scenario() -> None:
        cache = ConnectionCache(connector=CountingConnector(), config_loader=flaky_loader)
        with pytest.raises(DatabaseConnectionError, match="configuration invalid") as excinfo:
            await cache.acquire()
        assert isinstance(excinfo.value.__cause__, MissingConfigurationError)
        assert not cache.is_connecting

        await cache.acquire()
        assert cache.is_connected
        await cache.dispose()

    asyncio.run(scenario())
    assert len(loads) == 2


def test_cancelled_waiter_does_not_abort_shared_attempt(database_config: DatabaseConfig) -> None:
    async def scenario() -> None:
        connector = CountingConnector(gate=asyncio.Event())
        cache = _cache(connector, CountingLoader(database_config))

        impatient = asyncio.create_task(cache.acquire())
        patient = asyncio.create_task(cache.acquire())
        await asyncio.sleep(0.01)
        assert cache.is_connecting

        impatient.cancel()
        assert connector.gate is not None
        connector.gate.set()

        engine = await patient
        assert impatient.cancelled()
        assert connector.calls == 1
        assert engine is connector.engines[0]
        await cache.dispose()

    asyncio.run(scenario())


def test_dispose_allows_reconnect(database_config: DatabaseConfig) -> None:
    connector = CountingConnector()

    async def scenario() -> None:
        cache = _cache(connector, CountingLoader(database_config))
        first = await cache.acquire()
        await cache.dispose()
        assert not cache.is_connected
        second = await cache.acquire()
        assert first is not second
        await cache.dispose()

    asyncio.run(scenario())
    assert connector.calls == 2


def test_open_engine_migrates_schema(database_config: DatabaseConfig) -> None:
    async def scenario() -> set[str]:
        engine = await open_engine(database_config)
        try:
            async with engine.connect() as connection:
                return set(await connection.run_sync(lambda sync: inspect(sync).get_table_names()))
        finally:
            await engine.dispose()

    tables = asyncio.run(scenario())
    assert {"user", "product", "address", "alembic_version"} <= tables


def test_open_engine_without_migrations_leaves_schema_alone(database_uri: str) -> None:
    config = DatabaseConfig(uri=database_uri, run_migrations=False)

    async def scenario() -> list[str]:
        engine = await open_engine(config)
        try:
            async with engine.connect() as connection:
                return await connection.run_sync(lambda sync: inspect(sync).get_table_names())
        finally:
            await engine.dispose()

    assert asyncio.run(scenario()) == []


def test_unreachable_database_raises_connection_error(tmp_path: Path) -> None:
    missing = tmp_path / "missing" / "nested" / "storefront.db"
    config = DatabaseConfig(uri=f"sqlite+aiosqlite:///{missing}", connect_timeout_seconds=2.0)

    async def scenario() -> None:
        cache = ConnectionCache(config_loader=lambda: config)
        with pytest.raises(DatabaseConnectionError, match="Database connection failed"):
            await cache.acquire()
        assert not cache.is_connected

    asyncio.run(scenario())
