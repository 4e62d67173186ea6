"""
Order totals.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import Decimal

from tally._types import Money, ZERO
from tally.cart import LineItem
from tally.coupon import AppliedCoupon
from tally.order._types import PricingSummary, Totals
from tally.shipping import ShippingQuote

logger = logging.getLogger(__name__)


def subtotal_of(items: Sequence[LineItem]) -> Money:
    return sum((item.line_total for item in items), ZERO)


def aggregate(
    subtotal: Money,
    shipping_cost: Money,
    tax_rate: Decimal,
    discount: Money,
) -> Totals:
    """
    Tax and total.

    Tax is charged on the subtotal before discount. A total below zero can
    only come from a discount larger than subtotal + shipping + tax; it is
    clamped to zero.
    """
    tax = subtotal * tax_rate
    total = subtotal + shipping_cost + tax - discount
    if total < ZERO:
        logger.warning("[order] total %s below zero (discount %s), clamped", total, discount)
        total = ZERO
    return Totals(tax=tax, total=total)


def shipping_cost_for(quote: ShippingQuote | None, coupon: AppliedCoupon | None) -> Money:
    """Evaluator price of the selected method, zeroed by a free-shipping coupon."""
    if quote is None or not quote.is_available:
        return ZERO
    if coupon is not None and coupon.frees_shipping:
        return ZERO
    return quote.unit_price_total


def discount_for(coupon: AppliedCoupon | None, subtotal: Money) -> Money:
    """Applied discount, never above the subtotal."""
    if coupon is None:
        return ZERO
    return max(ZERO, min(coupon.discount, subtotal))


def summarize(
    items: Sequence[LineItem],
    quote: ShippingQuote | None,
    tax_rate: Decimal,
    coupon: AppliedCoupon | None = None,
) -> PricingSummary:
    """Everything the order summary panel shows."""
    subtotal = subtotal_of(items)
    shipping = shipping_cost_for(quote, coupon)
    discount = discount_for(coupon, subtotal)
    totals = aggregate(subtotal, shipping, tax_rate, discount)
    return PricingSummary(
        subtotal=subtotal,
        shipping_cost=shipping,
        tax_rate=tax_rate,
        tax=totals.tax,
        discount=discount,
        total=totals.total,
        quote=quote,
        coupon_code=coupon.code if coupon is not None else None,
    )


__all__ = (
    "subtotal_of",
    "aggregate",
    "shipping_cost_for",
    "discount_for",
    "summarize",
)
