"""Order total computation."""

from __future__ import annotations

import asyncio
from decimal import ROUND_FLOOR, Decimal
from typing import TYPE_CHECKING

from storefront.config.checkout import TAX_RATE
from storefront.domain.model import OrderPricing

if TYPE_CHECKING:
    from collections.abc import Sequence

    from storefront.domain.model import CatalogPrice, LineItem
    from storefront.domain.ports.catalog import PriceLookup


def compute_tax(subtotal: Decimal, rate: Decimal = TAX_RATE) -> Decimal:
    """Tax is truncated to whole currency units, never rounded up."""

    return (subtotal * rate).to_integral_value(rounding=ROUND_FLOOR)


async def compute_total(
    items: Sequence[LineItem],
    catalog: PriceLookup,
    *,
    tax_rate: Decimal = TAX_RATE,
) -> OrderPricing:
    """Price ``items`` at their current offer price and apply tax.

    Each distinct product is looked up once and all lookups run concurrently.
    If any lookup fails, the error of the first failing line item is raised and
    no total is produced.
    """

    product_ids = list(dict.fromkeys(item.product_id for item in items))
    results = await asyncio.gather(
        *(catalog.price_of(product_id) for product_id in product_ids),
        return_exceptions=True,
    )

    prices: dict[str, CatalogPrice] = {}
    for product_id, result in zip(product_ids, results, strict=True):
        if isinstance(result, BaseException):
            raise result
        prices[product_id] = result

    subtotal = sum(
        (prices[item.product_id].offer_price * item.quantity for item in items),
        Decimal(0),
    )
    tax = compute_tax(subtotal, tax_rate)
    return OrderPricing(subtotal=subtotal, tax=tax, total=subtotal + tax)
