"""
Shipping eligibility — per-method quotes from line item data.

Pure functions of their inputs; safe to call on every selection change.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tally._types import Money, ZERO
from tally.cart import LineItem
from tally.shipping._types import ShippingMethod, ShippingQuote

logger = logging.getLogger(__name__)

CATALOG: tuple[ShippingMethod, ...] = (ShippingMethod.AIR, ShippingMethod.SEA)


def rate_for(item: LineItem, method: ShippingMethod) -> tuple[Money, int] | None:
    """
    Method-specific (price, duration) of one item, if usable.

    Usable means both are present and strictly positive. Partial data counts
    as no data.
    """
    match method:
        case ShippingMethod.AIR:
            price, days = item.air_shipping_price, item.air_shipping_duration
        case ShippingMethod.SEA:
            price, days = item.sea_shipping_price, item.sea_shipping_duration

    if price is None or days is None or price <= 0 or days <= 0:
        return None
    return price, days


# ═══════════════════════════════════════════════════════════════════════════════
# evaluate() — one method
# ═══════════════════════════════════════════════════════════════════════════════


def evaluate(method: ShippingMethod, items: Sequence[LineItem]) -> ShippingQuote:
    """
    Quote a shipping method for a set of line items.

    Price is the sum of price × quantity over items with usable data;
    duration is the longest of those items. A method no item can use is
    unavailable, with zero price and duration.

    Example:
        quote = evaluate(ShippingMethod.AIR, items)
        if quote.is_available:
            print(quote.unit_price_total, quote.estimated_delivery)
    """
    total = ZERO
    max_days = 0
    contributing: list[str] = []

    for item in items:
        rate = rate_for(item, method)
        if rate is None:
            continue
        price, days = rate
        total += price * item.quantity
        max_days = max(max_days, days)
        contributing.append(item.id)

    if not contributing:
        logger.debug("[shipping] %s unavailable for %d items", method.id, len(items))
        return ShippingQuote.unavailable(method)

    if max_days == 0:
        logger.warning("[shipping] %s has price but no duration, using %d days", method.id, method.fallback_days)
        max_days = method.fallback_days

    return ShippingQuote(
        method=method,
        unit_price_total=total,
        estimated_duration_days=max_days,
        is_available=True,
        contributing_items=tuple(contributing),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog-wide views
# ═══════════════════════════════════════════════════════════════════════════════


def evaluate_all(items: Sequence[LineItem]) -> tuple[ShippingQuote, ...]:
    """Quote every method, in catalog order."""
    return tuple(evaluate(method, items) for method in CATALOG)


def offered_methods(items: Sequence[LineItem]) -> tuple[ShippingQuote, ...]:
    """Quotes the customer may choose from."""
    return tuple(q for q in evaluate_all(items) if q.is_available)


def unshippable_items(items: Sequence[LineItem]) -> tuple[str, ...]:
    """Ids of items no method can ship. Informational, not an error."""
    return tuple(
        item.id
        for item in items
        if all(rate_for(item, method) is None for method in CATALOG)
    )


__all__ = (
    "CATALOG",
    "rate_for",
    "evaluate",
    "evaluate_all",
    "offered_methods",
    "unshippable_items",
)
