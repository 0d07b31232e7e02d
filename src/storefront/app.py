"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Mapping
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING, Final

from storefront.adapters.clerk import ClerkDeletedUserData, ClerkUserData, to_customer_profile
from storefront.adapters.inngest import InngestEventPublisher
from storefront.adapters.sqlalchemy.connection import get_connection_cache
from storefront.adapters.sqlalchemy.migrations import upgrade_head
from storefront.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
from storefront.config import get_checkout_config, get_event_bus_config
from storefront.domain.cart import clear_cart
from storefront.domain.checkout import (
    CheckoutOutcome,
    CheckoutService,
    parse_checkout_request,
)
from storefront.domain.customers import (
    list_addresses,
    sync_customer_created,
    sync_customer_deleted,
    sync_customer_updated,
)
from storefront.domain.errors import InvalidRequestError
from storefront.domain.model import CheckoutState

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncEngine

    from storefront.config import CheckoutConfig
    from storefront.domain.model import Address, User
    from storefront.domain.ports.connection import ConnectionProvider
    from storefront.domain.ports.publishing import EventPublisher

    type Connections = ConnectionProvider[AsyncEngine]

log = getLogger(__name__)

USER_CREATED_EVENT: Final[str] = "clerk/user.created"
USER_UPDATED_EVENT: Final[str] = "clerk/user.updated"
USER_DELETED_EVENT: Final[str] = "clerk/user.deleted"
IDENTITY_EVENTS: Final[tuple[str, ...]] = (
    USER_CREATED_EVENT,
    USER_UPDATED_EVENT,
    USER_DELETED_EVENT,
)


def build_checkout_service(
    *,
    publisher: EventPublisher,
    connections: Connections | None = None,
    config: CheckoutConfig | None = None,
) -> CheckoutService[AsyncEngine]:
    """Wire the checkout workflow to the shared engine.

    The caller owns ``publisher`` and closes it when the service is retired.
    """

    return CheckoutService(
        connections=connections or get_connection_cache(),
        unit_of_work_factory=SqlAlchemyUnitOfWork,
        publisher=publisher,
        config=config or get_checkout_config(),
    )


async def submit_checkout(
    buyer_id: str,
    body: object,
    *,
    service: CheckoutService[AsyncEngine] | None = None,
) -> CheckoutOutcome:
    """Run one checkout for a decoded request body ``{address, items}``."""

    try:
        request = parse_checkout_request(buyer_id, body)
    except InvalidRequestError as exc:
        log.info("Rejected malformed checkout for %s: %s", buyer_id, exc.message)
        return CheckoutOutcome(
            state=CheckoutState.REJECTED,
            message=exc.message,
            failed_step=CheckoutState.VALIDATING,
            error=exc,
        )
    if service is not None:
        return await service.submit(request)

    async with InngestEventPublisher(config=get_event_bus_config()) as publisher:
        return await build_checkout_service(publisher=publisher).submit(request)


async def clear_buyer_cart(buyer_id: str, *, connections: Connections | None = None) -> bool:
    engine = await (connections or get_connection_cache()).acquire()
    return await clear_cart(
        unit_of_work_factory=partial(SqlAlchemyUnitOfWork, engine),
        buyer_id=buyer_id,
    )


async def list_buyer_addresses(
    buyer_id: str, *, connections: Connections | None = None
) -> Sequence[Address]:
    engine = await (connections or get_connection_cache()).acquire()
    return await list_addresses(
        unit_of_work_factory=partial(SqlAlchemyUnitOfWork, engine),
        user_id=buyer_id,
    )


async def migrate(*, connections: Connections | None = None) -> None:
    """Bring the schema to the latest revision, even when auto-migration is off."""

    engine = await (connections or get_connection_cache()).acquire()
    await upgrade_head(engine)
    log.info("Database schema is up to date")


async def handle_identity_event(
    name: str,
    data: Mapping[str, object],
    *,
    connections: Connections | None = None,
) -> User | bool:
    """Mirror a ``clerk/user.*`` event into the user table.

    Returns the stored user for create and update events, and whether a row was
    removed for delete events.
    """

    if name not in IDENTITY_EVENTS:
        raise ValueError(f"Unsupported identity event: {name}")

    engine = await (connections or get_connection_cache()).acquire()
    uow_factory = partial(SqlAlchemyUnitOfWork, engine)

    if name == USER_DELETED_EVENT:
        deleted = ClerkDeletedUserData.model_validate(data)
        return await sync_customer_deleted(unit_of_work_factory=uow_factory, user_id=deleted.id)

    profile = to_customer_profile(ClerkUserData.model_validate(data))
    if name == USER_CREATED_EVENT:
        return await sync_customer_created(unit_of_work_factory=uow_factory, profile=profile)
    return await sync_customer_updated(unit_of_work_factory=uow_factory, profile=profile)
