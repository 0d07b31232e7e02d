"""Checkout workflow defaults."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Final

from .env import env_float

TAX_RATE: Final[Decimal] = Decimal("0.02")
DEFAULT_LOOKUP_TIMEOUT_SECONDS: Final[float] = 5.0
DEFAULT_PUBLISH_TIMEOUT_SECONDS: Final[float] = 15.0


@dataclass(frozen=True, slots=True)
class CheckoutConfig:
    tax_rate: Decimal = TAX_RATE
    lookup_timeout_seconds: float = DEFAULT_LOOKUP_TIMEOUT_SECONDS
    publish_timeout_seconds: float = DEFAULT_PUBLISH_TIMEOUT_SECONDS


def get_checkout_config() -> CheckoutConfig:
    return CheckoutConfig(
        lookup_timeout_seconds=env_float(
            "CHECKOUT_LOOKUP_TIMEOUT", DEFAULT_LOOKUP_TIMEOUT_SECONDS
        ),
        publish_timeout_seconds=env_float(
            "CHECKOUT_PUBLISH_TIMEOUT", DEFAULT_PUBLISH_TIMEOUT_SECONDS
        ),
    )
