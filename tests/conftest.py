from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from storefront.config import DatabaseConfig

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def storefront_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("STOREFRONT_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("INNGEST_DEV", "1")
    for name in (
        "STOREFRONT_DATABASE_URI",
        "STOREFRONT_DB_CONNECT_TIMEOUT",
        "STOREFRONT_AUTO_MIGRATE",
        "STOREFRONT_DB_ECHO",
        "INNGEST_EVENT_KEY",
        "INNGEST_BASE_URL",
        "INNGEST_MAX_RETRIES",
        "INNGEST_TIMEOUT_SECONDS",
        "CHECKOUT_LOOKUP_TIMEOUT",
        "CHECKOUT_PUBLISH_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def database_uri(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}"


@pytest.fixture
def database_config(database_uri: str) -> DatabaseConfig:
    return DatabaseConfig(uri=database_uri, connect_timeout_seconds=5.0)


@pytest.fixture
def catalog_prices() -> dict[str, Decimal]:
    return {"prod_kettle": Decimal("100.00"), "prod_mug": Decimal("50.00")}
