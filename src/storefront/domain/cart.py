"""Buyer cart mutations."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from storefront.domain.errors import BuyerNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable

    from storefront.domain.ports.unit_of_work import StorefrontUnitOfWork

log = getLogger(__name__)


async def clear_cart(
    *,
    unit_of_work_factory: Callable[[], StorefrontUnitOfWork],
    buyer_id: str,
) -> bool:
    """Replace the buyer's cart with an empty mapping.

    The whole cart is cleared, not only the items of the submitted order, and
    no version check guards the write: concurrent checkouts of the same buyer
    resolve as last-write-wins. Returns whether a write happened; clearing an
    empty cart is a successful no-op.
    """

    async with unit_of_work_factory() as uow:
        user = await uow.repositories.users.get(buyer_id)
        if user is None:
            raise BuyerNotFoundError(buyer_id)
        if user.cart_is_empty:
            log.debug("Cart of %s already empty", buyer_id)
            return False
        user.cart_items = {}
        await uow.commit()

    log.info("Cleared cart of %s", buyer_id)
    return True


async def read_cart(
    *,
    unit_of_work_factory: Callable[[], StorefrontUnitOfWork],
    buyer_id: str,
) -> dict[str, int]:
    async with unit_of_work_factory() as uow:
        user = await uow.repositories.users.get(buyer_id)
        if user is None:
            raise BuyerNotFoundError(buyer_id)
        return dict(user.cart_items)
