"""
Coupon application — discount computation and the free-shipping override.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from combinators import lift as L
from kungfu import Result, Ok, Error

from tally._types import Money, ZERO, display
from tally.coupon._types import (
    AppliedCoupon,
    Coupon,
    CouponError,
    CouponErrorKind,
    CouponValidation,
    DiscountType,
)

logger = logging.getLogger(__name__)

type ValidateFn = Callable[[str, Money], Awaitable[CouponValidation]]

EMPTY_CODE_MESSAGE = "Please enter a coupon code"
INVALID_MESSAGE = "Invalid coupon code"
UNAVAILABLE_MESSAGE = "Error validating coupon. Please try again."
FREE_SHIPPING_MESSAGE = "Free shipping coupon applied successfully!"


# ═══════════════════════════════════════════════════════════════════════════════
# Discount arithmetic
# ═══════════════════════════════════════════════════════════════════════════════


def compute_discount(coupon: Coupon, subtotal: Money) -> Money:
    """
    Discount a coupon grants on a subtotal.

    Percentage coupons take their share of the subtotal, fixed coupons their
    value; either is capped by max_discount_amount when set, and by the
    subtotal itself.
    """
    match coupon.discount_type:
        case DiscountType.PERCENTAGE:
            discount = subtotal * coupon.discount_value / 100
        case DiscountType.FIXED:
            discount = coupon.discount_value

    # A zero ceiling means "no ceiling" in the coupon admin.
    if coupon.max_discount_amount:
        discount = min(discount, coupon.max_discount_amount)

    return max(ZERO, min(discount, subtotal))


def is_free_shipping(coupon: Coupon, free_shipping_code: str) -> bool:
    return coupon.code.strip().upper() == free_shipping_code.strip().upper()


def describe(coupon: Coupon, *, currency_symbol: str) -> str:
    """Success message shown under the coupon field."""
    match coupon.discount_type:
        case DiscountType.PERCENTAGE:
            return f"Coupon applied! {coupon.discount_value.normalize():f}% off"
        case DiscountType.FIXED:
            return f"Coupon applied! {currency_symbol}{display(coupon.discount_value)} off"


# ═══════════════════════════════════════════════════════════════════════════════
# apply_coupon()
# ═══════════════════════════════════════════════════════════════════════════════


async def apply_coupon(
    code: str,
    subtotal: Money,
    validate: ValidateFn,
    *,
    free_shipping_code: str = "FREESHIP",
    currency_symbol: str = "GH₵",
) -> Result[AppliedCoupon, CouponError]:
    """
    Validate a code with the coupon service and compute its discount.

    The service decides whether the coupon is usable; its error message is
    surfaced verbatim. The discount is computed here from the returned
    coupon record.

    Example:
        match await apply_coupon("WELCOME10", subtotal, coupons.validate):
            case Ok(applied):
                print(applied.discount, applied.message)
            case Error(e):
                print(e.message)
    """
    trimmed = code.strip()
    if not trimmed:
        return Error(CouponError(CouponErrorKind.EMPTY_CODE, EMPTY_CODE_MESSAGE))

    answer = await L.catching_async(
        lambda: validate(trimmed, subtotal),
        on_error=lambda e: CouponError(CouponErrorKind.UNAVAILABLE, UNAVAILABLE_MESSAGE),
    )

    match answer:
        case Error(e):
            logger.warning("[coupon] validation of %s failed: %s", trimmed, e.message)
            return Error(e)
        case Ok(validation):
            pass

    if not validation.success or validation.coupon is None:
        message = validation.error_message or INVALID_MESSAGE
        logger.info("[coupon] %s rejected: %s", trimmed, message)
        return Error(CouponError(CouponErrorKind.REJECTED, message))

    coupon = validation.coupon
    discount = compute_discount(coupon, subtotal)
    if validation.discount is not None and validation.discount != discount:
        logger.debug("[coupon] service discount %s differs from computed %s", validation.discount, discount)

    frees_shipping = is_free_shipping(coupon, free_shipping_code)
    message = FREE_SHIPPING_MESSAGE if frees_shipping else describe(coupon, currency_symbol=currency_symbol)

    logger.info("[coupon] applied %s, discount %s", coupon.code, discount)
    return Ok(AppliedCoupon(coupon, discount, frees_shipping, message))


__all__ = (
    "ValidateFn",
    "EMPTY_CODE_MESSAGE",
    "INVALID_MESSAGE",
    "UNAVAILABLE_MESSAGE",
    "FREE_SHIPPING_MESSAGE",
    "compute_discount",
    "is_free_shipping",
    "describe",
    "apply_coupon",
)
