"""SQLAlchemy mapping metadata for the storefront domain model."""

from __future__ import annotations

import logging
from functools import cache
from typing import Any, cast

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    Dialect,
    Enum,
    ForeignKey,
    Numeric,
    String,
    Table,
    TypeDecorator,
    orm,
)

from storefront.domain.model import Address, Product, Role, User

log = logging.getLogger(__name__)


class CartItemsType(TypeDecorator[dict[str, int]]):
    """Cart mapping that is never stored as NULL: an empty cart is ``{}``."""

    impl = JSON
    cache_ok = True

    def process_bind_param(
        self, value: dict[str, int] | None, dialect: Dialect
    ) -> dict[str, int]:
        _ = dialect
        if value is None:
            return {}
        return {str(product_id): int(quantity) for product_id, quantity in value.items()}

    def process_result_value(self, value: object, dialect: Dialect) -> dict[str, int]:
        _ = dialect
        if not isinstance(value, dict):
            return {}
        items = cast(dict[str, Any], value)
        return {product_id: int(quantity) for product_id, quantity in items.items()}


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

MONEY = Numeric(12, 2, asdecimal=True)

user_table = Table(
    "user",
    mapper_registry.metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String, nullable=False),
    Column("email", String, nullable=False, unique=True),
    Column("image_url", String, nullable=False),
    Column(
        "role",
        Enum(Role, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.USER,
    ),
    Column("cart_items", CartItemsType, nullable=False, default=lambda: {}),
)

product_table = Table(
    "product",
    mapper_registry.metadata,
    Column("id", String(64), primary_key=True),
    Column("seller_id", String(64), ForeignKey("user.id"), nullable=False, index=True),
    Column("name", String, nullable=False),
    Column("description", String, nullable=False),
    Column("category", String, nullable=False),
    Column("price", MONEY, nullable=False),
    Column("offer_price", MONEY, nullable=False),
    Column("images", JSON, nullable=False, default=lambda: []),
    Column("created_at_ms", BigInteger, nullable=False),
)

address_table = Table(
    "address",
    mapper_registry.metadata,
    Column("id", String(64), primary_key=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("full_name", String, nullable=False),
    Column("phone_number", String, nullable=False),
    Column("pincode", String, nullable=False),
    Column("area", String, nullable=False),
    Column("city", String, nullable=False),
    Column("state", String, nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(User, user_table)
    mapper_registry.map_imperatively(Product, product_table)
    mapper_registry.map_imperatively(Address, address_table)
    orm.configure_mappers()
    return mapper_registry

