"""Alembic environment configuration for the storefront."""

from __future__ import annotations

import logging

from alembic import context

from storefront.adapters.sqlalchemy.mappings import mapper_registry, start_mappers

config = context.config

log = logging.getLogger("alembic.env")

start_mappers()

target_metadata = mapper_registry.metadata


def run_migrations_online() -> None:
    """Run migrations on the connection handed over by ``upgrade_connection``."""

    connection = config.attributes.get("connection")
    if connection is None:
        raise RuntimeError(
            "Migrations run through storefront.adapters.sqlalchemy.migrations.upgrade_head"
        )
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=True,
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    raise RuntimeError("Offline migrations are not supported")
run_migrations_online()
