"""Failure taxonomy of the checkout core.

``InvalidRequestError``, ``NotFoundError``, ``DatabaseConnectionError`` and
``PublishError`` abort a checkout before any persisted state changes.
``CartClearError`` happens after the order event was accepted by the bus and is
reported as a partial success.
"""

from __future__ import annotations


class CheckoutError(RuntimeError):
    """Base class for errors surfaced to checkout callers."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(CheckoutError):
    """The inbound request is malformed; nothing was touched."""


class NotFoundError(CheckoutError):
    """A referenced record does not exist."""


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class BuyerNotFoundError(NotFoundError):
    def __init__(self, buyer_id: str) -> None:
        super().__init__(f"Buyer not found: {buyer_id}")
        self.buyer_id = buyer_id


class DatabaseConnectionError(CheckoutError):
    """The persistence layer is unreachable or a connection attempt failed."""


class PublishError(CheckoutError):
    """The event bus rejected the submission or did not answer in time."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CartClearError(CheckoutError):
    """The order was published but the buyer's cart could not be cleared."""

    def __init__(self, buyer_id: str, reason: str) -> None:
        super().__init__(f"Order accepted but cart for {buyer_id} was not cleared: {reason}")
        self.buyer_id = buyer_id
        self.reason = reason
