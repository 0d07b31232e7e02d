"""Order submission workflow.

A checkout walks ``validating -> pricing -> publishing -> clearing_cart ->
completed``. Validation failures end in ``rejected``; failures while pricing or
publishing end in ``failed`` and leave every persisted record untouched, so the
whole request can be retried. The order event is always published before the
cart is cleared, and a failed clear after a successful publish is reported as a
degraded success rather than retried.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import uuid4

from storefront.config.checkout import CheckoutConfig
from storefront.domain.cart import clear_cart
from storefront.domain.catalog import CatalogReader
from storefront.domain.errors import (
    CartClearError,
    CheckoutError,
    DatabaseConnectionError,
    InvalidRequestError,
    PublishError,
)
from storefront.domain.model import (
    CheckoutState,
    LineItem,
    OrderCreatedEvent,
    OrderDraft,
    PricedOrder,
    ShippingAddress,
)
from storefront.domain.pricing import compute_total

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from storefront.domain.model import OrderPricing, PublishReceipt
    from storefront.domain.ports.connection import ConnectionProvider
    from storefront.domain.ports.publishing import EventPublisher
    from storefront.domain.ports.unit_of_work import StorefrontUnitOfWork

log = getLogger(__name__)

_ADDRESS_FIELDS = {
    "fullName": "full_name",
    "phoneNumber": "phone_number",
    "pincode": "pincode",
    "area": "area",
    "city": "city",
    "state": "state",
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_order_id() -> str:
    return uuid4().hex


@dataclass(frozen=True, slots=True)
class CheckoutRequest:
    """Inbound checkout as received: buyer identity, address and cart lines."""

    buyer_id: str
    address: ShippingAddress | None
    items: tuple[LineItem, ...] = ()


@dataclass(frozen=True, slots=True)
class CheckoutOutcome:
    state: CheckoutState
    message: str | None = None
    failed_step: CheckoutState | None = None
    order: PricedOrder | None = None
    receipt: PublishReceipt | None = None
    cart_cleared: bool = False
    error: CheckoutError | None = None

    @property
    def success(self) -> bool:
        return self.state is CheckoutState.COMPLETED

    @property
    def degraded(self) -> bool:
        """Order accepted but the cart still has to be cleared."""
        return self.success and not self.cart_cleared

    def to_response(self) -> dict[str, object]:
        response: dict[str, object] = {"success": self.success}
        if self.message:
            response["message"] = self.message
        return response


def parse_checkout_request(buyer_id: str, body: object) -> CheckoutRequest:
    """Build a request from a decoded JSON body ``{address, items}``.

    Structural problems (wrong types, non-positive quantities) are rejected
    here; emptiness checks are left to the workflow's validation step.
    """

    if not isinstance(body, Mapping):
        raise InvalidRequestError("Invalid data")

    raw_address = body.get("address")
    address: ShippingAddress | None = None
    if isinstance(raw_address, Mapping):
        address = ShippingAddress(
            **{
                attr: str(raw_address.get(key) or "")
                for key, attr in _ADDRESS_FIELDS.items()
            }
        )
    elif raw_address:
        raise InvalidRequestError("Invalid data: address must be an object")

    raw_items = body.get("items") or []
    if not isinstance(raw_items, list):
        raise InvalidRequestError("Invalid data: items must be a list")

    items: list[LineItem] = []
    for raw_item in raw_items:
        if not isinstance(raw_item, Mapping):
            raise InvalidRequestError("Invalid data: malformed line item")
        product_id = raw_item.get("productId")
        quantity = raw_item.get("quantity")
        if not isinstance(product_id, str) or not product_id.strip():
            raise InvalidRequestError("Invalid data: line item without productId")
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidRequestError(f"Invalid data: quantity of {product_id} is not an integer")
        items.append(LineItem(product_id=product_id, quantity=quantity))

    return CheckoutRequest(buyer_id=buyer_id, address=address, items=tuple(items))


def validate_request(request: CheckoutRequest) -> OrderDraft:
    if request.address is None or request.address.is_blank or not request.items:
        raise InvalidRequestError("Invalid data")
    if not request.buyer_id:
        raise InvalidRequestError("Invalid data: missing buyer")
    for item in request.items:
        if item.quantity <= 0:
            raise InvalidRequestError(f"Invalid data: quantity of {item.product_id} must be positive")
    return OrderDraft(
        buyer_id=request.buyer_id,
        shipping_address=request.address,
        items=request.items,
    )


@dataclass(slots=True)
class CheckoutService[THandle]:
    """Coordinates one checkout per call; safe to share between concurrent tasks."""

    connections: ConnectionProvider[THandle]
    unit_of_work_factory: Callable[[THandle], StorefrontUnitOfWork]
    publisher: EventPublisher
    config: CheckoutConfig = field(default_factory=CheckoutConfig)
    clock: Callable[[], datetime] = _utcnow
    order_id_factory: Callable[[], str] = _new_order_id

    async def submit(self, request: CheckoutRequest) -> CheckoutOutcome:
        state = CheckoutState.VALIDATING
        try:
            draft = validate_request(request)
        except InvalidRequestError as exc:
            log.info("Rejected checkout for %s: %s", request.buyer_id, exc.message)
            return CheckoutOutcome(
                state=CheckoutState.REJECTED,
                message=exc.message,
                failed_step=state,
                error=exc,
            )

        try:
            state = self._advance(state, CheckoutState.PRICING, draft.buyer_id)
            handle = await self.connections.acquire()
            uow_factory = partial(self.unit_of_work_factory, handle)
            pricing = await self._price(draft.items, CatalogReader(uow_factory))
            order = PricedOrder(
                order_id=self.order_id_factory(),
                draft=draft,
                pricing=pricing,
                created_at=self.clock(),
            )

            state = self._advance(state, CheckoutState.PUBLISHING, draft.buyer_id)
            receipt = await self._publish(OrderCreatedEvent.from_order(order))
        except CheckoutError as exc:
            log.warning("Checkout for %s failed while %s: %s", draft.buyer_id, state, exc.message)
            return CheckoutOutcome(
                state=CheckoutState.FAILED,
                message=exc.message,
                failed_step=state,
                error=exc,
            )

        state = self._advance(state, CheckoutState.CLEARING_CART, draft.buyer_id)
        try:
            await clear_cart(unit_of_work_factory=uow_factory, buyer_id=draft.buyer_id)
        except Exception as exc:  # noqa: BLE001
            error = CartClearError(draft.buyer_id, str(exc))
            log.warning("Order %s accepted, cart clear pending: %s", order.order_id, error.reason)
            return CheckoutOutcome(
                state=CheckoutState.COMPLETED,
                message="Order placed; cart will be cleared shortly",
                order=order,
                receipt=receipt,
                cart_cleared=False,
                error=error,
            )

        self._advance(state, CheckoutState.COMPLETED, draft.buyer_id)
        log.info(
            "Order %s placed for %s: total=%s (%d items)",
            order.order_id,
            draft.buyer_id,
            order.pricing.total,
            len(draft.items),
        )
        return CheckoutOutcome(
            state=CheckoutState.COMPLETED,
            order=order,
            receipt=receipt,
            cart_cleared=True,
        )

    async def _price(self, items: Sequence[LineItem], catalog: CatalogReader) -> OrderPricing:
        try:
            async with asyncio.timeout(self.config.lookup_timeout_seconds):
                return await compute_total(items, catalog, tax_rate=self.config.tax_rate)
        except TimeoutError as exc:
            raise DatabaseConnectionError(
                f"Catalog lookup timed out after {self.config.lookup_timeout_seconds:.1f}s"
            ) from exc

    async def _publish(self, event: OrderCreatedEvent) -> PublishReceipt:
        try:
            async with asyncio.timeout(self.config.publish_timeout_seconds):
                return await self.publisher.publish(event)
        except TimeoutError as exc:
            raise PublishError(
                f"Event bus did not acknowledge {event.name} "
                f"within {self.config.publish_timeout_seconds:.1f}s"
            ) from exc

    @staticmethod
    def _advance(current: CheckoutState, target: CheckoutState, buyer_id: str) -> CheckoutState:
        log.debug("Checkout for %s: %s -> %s", buyer_id, current, target)
        return target
