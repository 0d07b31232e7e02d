"""Mirror identity-provider users into storefront storage and expose saved addresses."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from storefront.domain.errors import BuyerNotFoundError
from storefront.domain.model import User

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from storefront.domain.model import Address
    from storefront.domain.ports.unit_of_work import StorefrontUnitOfWork

log = getLogger(__name__)

type UnitOfWorkFactory = Callable[[], StorefrontUnitOfWork]


@dataclass(frozen=True, slots=True)
class CustomerProfile:
    """Identity fields owned by the identity provider."""

    user_id: str
    name: str
    email: str
    image_url: str


async def sync_customer_created(
    *, unit_of_work_factory: UnitOfWorkFactory, profile: CustomerProfile
) -> User:
    """Create the user record; replaying the same event updates it instead."""

    async with unit_of_work_factory() as uow:
        users = uow.repositories.users
        user = await users.get(profile.user_id)
        if user is None:
            user = User(
                id=profile.user_id,
                name=profile.name,
                email=profile.email,
                image_url=profile.image_url,
            )
            users.add(user)
            log.info("Created user %s", profile.user_id)
        else:
            _apply_profile(user, profile)
            log.info("User %s already existed, profile refreshed", profile.user_id)
        await uow.commit()
    return user


async def sync_customer_updated(
    *, unit_of_work_factory: UnitOfWorkFactory, profile: CustomerProfile
) -> User:
    """Refresh identity fields; role and cart are left as stored."""

    async with unit_of_work_factory() as uow:
        user = await uow.repositories.users.get(profile.user_id)
        if user is None:
            raise BuyerNotFoundError(profile.user_id)
        _apply_profile(user, profile)
        await uow.commit()
    log.info("Updated user %s", profile.user_id)
    return user


async def sync_customer_deleted(*, unit_of_work_factory: UnitOfWorkFactory, user_id: str) -> bool:
    async with unit_of_work_factory() as uow:
        users = uow.repositories.users
        user = await users.get(user_id)
        if user is None:
            log.info("User %s already deleted", user_id)
            return False
        await users.remove(user)
        await uow.commit()
    log.info("Deleted user %s", user_id)
    return True


async def list_addresses(
    *, unit_of_work_factory: UnitOfWorkFactory, user_id: str
) -> Sequence[Address]:
    async with unit_of_work_factory() as uow:
        return await uow.repositories.addresses.list_for_user(user_id)


def _apply_profile(user: User, profile: CustomerProfile) -> None:
    user.name = profile.name
    user.email = profile.email
    user.image_url = profile.image_url
