import asyncio
from decimal import Decimal

from tally.coupon import (
    EMPTY_CODE_MESSAGE,
    FREE_SHIPPING_MESSAGE,
    INVALID_MESSAGE,
    UNAVAILABLE_MESSAGE,
    CouponErrorKind,
    CouponValidation,
    apply_coupon,
    compute_discount,
    describe,
)
from tests.fakes import FakeCoupons, fixed, percent, unwrap, unwrap_err

SUBTOTAL = Decimal("100")


def test_percentage_discount():
    assert compute_discount(percent("TEN", "10"), SUBTOTAL) == Decimal("10")


def test_percentage_discount_is_capped_by_max():
    coupon = percent("HALF", "50", max_discount_amount=Decimal("20"))
    assert compute_discount(coupon, SUBTOTAL) == Decimal("20")


def test_zero_max_means_no_cap():
    coupon = percent("HALF", "50", max_discount_amount=Decimal("0"))
    assert compute_discount(coupon, SUBTOTAL) == Decimal("50")


def test_fixed_discount_never_exceeds_subtotal():
    assert compute_discount(fixed("BIG", "150"), SUBTOTAL) == SUBTOTAL
    assert compute_discount(fixed("FIVE", "5"), SUBTOTAL) == Decimal("5")


def test_success_messages():
    assert describe(percent("TEN", "10"), currency_symbol="GH₵") == "Coupon applied! 10% off"
    assert describe(percent("HALF", "12.5"), currency_symbol="GH₵") == "Coupon applied! 12.5% off"
    assert describe(fixed("FIFTEEN", "15"), currency_symbol="GH₵") == "Coupon applied! GH₵15.00 off"


def test_apply_valid_code():
    coupons = FakeCoupons(percent("WELCOME10", "10"))
    applied = unwrap(asyncio.run(apply_coupon("  welcome10 ", SUBTOTAL, coupons.validate)))

    assert applied.code == "WELCOME10"
    assert applied.discount == Decimal("10")
    assert not applied.frees_shipping
    assert coupons.validated == [("welcome10", SUBTOTAL)]


def test_empty_code_is_not_looked_up():
    coupons = FakeCoupons()
    error = unwrap_err(asyncio.run(apply_coupon("   ", SUBTOTAL, coupons.validate)))

    assert error.kind is CouponErrorKind.EMPTY_CODE
    assert error.message == EMPTY_CODE_MESSAGE
    assert coupons.validated == []


def test_service_message_is_surfaced_verbatim():
    coupons = FakeCoupons(fixed("BIGSPEND", "20", min_purchase_amount=Decimal("500")))
    error = unwrap_err(asyncio.run(apply_coupon("BIGSPEND", SUBTOTAL, coupons.validate)))

    assert error.kind is CouponErrorKind.REJECTED
    assert error.message == "Minimum purchase of 500 required"


def test_generic_message_when_service_gives_none():
    async def validate(code: str, subtotal: Decimal) -> CouponValidation:
        return CouponValidation(success=False)

    error = unwrap_err(asyncio.run(apply_coupon("NOPE", SUBTOTAL, validate)))
    assert error.message == INVALID_MESSAGE


def test_service_failure_is_unavailable():
    coupons = FakeCoupons(percent("TEN", "10"))
    coupons.error = ConnectionError("timeout")
    error = unwrap_err(asyncio.run(apply_coupon("TEN", SUBTOTAL, coupons.validate)))

    assert error.kind is CouponErrorKind.UNAVAILABLE
    assert error.message == UNAVAILABLE_MESSAGE


def test_free_shipping_code():
    coupons = FakeCoupons(fixed("FREESHIP", "0"))
    applied = unwrap(asyncio.run(apply_coupon("freeship", SUBTOTAL, coupons.validate)))

    assert applied.frees_shipping
    assert applied.discount == Decimal("0")
    assert applied.message == FREE_SHIPPING_MESSAGE
