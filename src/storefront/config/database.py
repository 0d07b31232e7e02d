"""Persistence configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_flag, env_float, optional_env_var

APP_DIR_NAME: Final[str] = "storefront"
DEFAULT_DB_FILENAME: Final[str] = "storefront.db"
DEFAULT_CONNECT_TIMEOUT_SECONDS: Final[float] = 10.0


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+aiosqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Connection settings read once, when the first connection is requested."""

    uri: str
    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    run_migrations: bool = True
    echo: bool = False


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var("STOREFRONT_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    env_uri = optional_env_var("STOREFRONT_DATABASE_URI")
    uri = env_uri or (storage or get_storage_config()).database_uri()
    return DatabaseConfig(
        uri=uri,
        connect_timeout_seconds=env_float(
            "STOREFRONT_DB_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT_SECONDS
        ),
        run_migrations=env_flag("STOREFRONT_AUTO_MIGRATE", default=True),
        echo=env_flag("STOREFRONT_DB_ECHO", default=False),
    )
