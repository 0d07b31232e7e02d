"""Utilities for managing Alembic migrations within the SQLAlchemy adapter."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config

PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parents[5]
PYPROJECT_PATH: Final[Path] = PROJECT_ROOT / "pyproject.toml"
MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection
    from sqlalchemy.ext.asyncio import AsyncEngine


def _load_pyproject_options() -> dict[str, str]:
    """Load Alembic configuration values from pyproject.toml, when run from a checkout."""

    try:
        with PYPROJECT_PATH.open("rb") as pyproject_file:
            document = tomllib.load(pyproject_file)
    except FileNotFoundError:
        return {}

    alembic_section = document.get("tool", {}).get("alembic", {})
    return {str(key): str(value) for key, value in alembic_section.items()}


def _build_config() -> Config:
    """Return an Alembic Config pointing at the bundled revision scripts."""

    config = Config()
    options = _load_pyproject_options()

    # installed wheels carry the scripts next to this module, not under the project root
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    for key, value in options.items():
        if key in {"script_location", "prepend_sys_path", "sqlalchemy.url"}:
            continue
        config.set_main_option(key, value)

    config.attributes["pyproject_options"] = options
    return config


def upgrade_connection(connection: Connection) -> None:
    """Upgrade the schema on an open synchronous connection.

    Meant for ``AsyncConnection.run_sync``; the caller owns the transaction.
    """

    config = _build_config()
    config.attributes["connection"] = connection
    command.upgrade(config, "head")


async def upgrade_head(engine: AsyncEngine) -> None:
    """Upgrade the database behind ``engine`` to the latest revision."""

    async with engine.begin() as connection:
        await connection.run_sync(upgrade_connection)


__all__ = ["MIGRATIONS_PATH", "upgrade_connection", "upgrade_head"]
