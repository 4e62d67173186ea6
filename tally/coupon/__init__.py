"""
Coupon — validation, discount and the free-shipping sentinel.

    from tally import coupon as CP

    result = await CP.apply_coupon("WELCOME10", subtotal, coupon_service.validate)
"""

from tally.coupon._types import (
    DiscountType,
    Coupon,
    CouponValidation,
    AppliedCoupon,
    CouponErrorKind,
    CouponError,
)
from tally.coupon._apply import (
    ValidateFn,
    EMPTY_CODE_MESSAGE,
    INVALID_MESSAGE,
    UNAVAILABLE_MESSAGE,
    FREE_SHIPPING_MESSAGE,
    compute_discount,
    is_free_shipping,
    describe,
    apply_coupon,
)

__all__ = (
    "DiscountType",
    "Coupon",
    "CouponValidation",
    "AppliedCoupon",
    "CouponErrorKind",
    "CouponError",
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
