"""
Coupon types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum, auto

from tally._types import Money, ZERO


class DiscountType(StrEnum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True, slots=True)
class Coupon:
    """
    A coupon as returned by the coupon service.

    Read-only here: activity, expiry, minimum purchase and usage limits are
    enforced by the service.
    """

    code: str
    discount_type: DiscountType
    discount_value: Money
    min_purchase_amount: Money = ZERO
    max_discount_amount: Money | None = None
    is_active: bool = True
    usage_limit: int | None = None
    usage_count: int = 0
    id: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class CouponValidation:
    """Coupon service answer to validate(code, subtotal)."""

    success: bool
    coupon: Coupon | None = None
    discount: Money | None = None
    error_message: str | None = None


@dataclass(frozen=True, slots=True)
class AppliedCoupon:
    """The one coupon active in a checkout session."""

    coupon: Coupon
    discount: Money
    frees_shipping: bool
    message: str

    @property
    def code(self) -> str:
        return self.coupon.code


class CouponErrorKind(Enum):
    EMPTY_CODE = auto()  # nothing typed, no lookup made
    REJECTED = auto()  # service said no (unknown, expired, limit, minimum)
    UNAVAILABLE = auto()  # service call raised
    BUSY = auto()  # a validation is already in flight
    STALE = auto()  # answer arrived after the code or step changed


@dataclass(frozen=True, slots=True)
class CouponError:
    kind: CouponErrorKind
    message: str


__all__ = (
    "DiscountType",
    "Coupon",
    "CouponValidation",
    "AppliedCoupon",
    "CouponErrorKind",
    "CouponError",
)
