"""
In-memory collaborators and builders shared by the tests.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from kungfu import Error, Ok, Result

from tally.cart import LineItem
from tally.checkout import CheckoutServices, GuestRegistration, ServiceError
from tally.coupon import Coupon, CouponValidation, DiscountType, compute_discount
from tally.order import OrderDraft
from tally.tax import TaxRate

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


def unwrap(result: Result[Any, Any]) -> Any:
    match result:
        case Ok(value):
            return value
        case Error(e):
            raise AssertionError(f"expected Ok, got Error({e!r})")


def unwrap_err(result: Result[Any, Any]) -> Any:
    match result:
        case Ok(value):
            raise AssertionError(f"expected Error, got Ok({value!r})")
        case Error(e):
            return e


def item(
    id: str = "p1",
    price: str = "100",
    quantity: int = 1,
    *,
    air: str | None = None,
    air_days: int | None = None,
    sea: str | None = None,
    sea_days: int | None = None,
) -> LineItem:
    return LineItem(
        id=id,
        name=f"Product {id}",
        unit_price=Decimal(price),
        quantity=quantity,
        air_shipping_price=Decimal(air) if air is not None else None,
        air_shipping_duration=air_days,
        sea_shipping_price=Decimal(sea) if sea is not None else None,
        sea_shipping_duration=sea_days,
    )


def percent(code: str, value: str, **kw: object) -> Coupon:
    return Coupon(code, DiscountType.PERCENTAGE, Decimal(value), **kw)  # type: ignore[arg-type]


def fixed(code: str, value: str, **kw: object) -> Coupon:
    return Coupon(code, DiscountType.FIXED, Decimal(value), **kw)  # type: ignore[arg-type]


# ═══════════════════════════════════════════════════════════════════════════════
# Collaborators
# ═══════════════════════════════════════════════════════════════════════════════


class FakeCoupons:
    def __init__(self, *coupons: Coupon) -> None:
        self.coupons = {c.code.upper(): c for c in coupons}
        self.validated: list[tuple[str, Decimal]] = []
        self.recorded: list[str] = []
        self.error: Exception | None = None
        self.usage_error: Exception | None = None
        self.gate: asyncio.Event | None = None

    async def validate(self, code: str, subtotal: Decimal) -> CouponValidation:
        self.validated.append((code, subtotal))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        coupon = self.coupons.get(code.upper())
        if coupon is None:
            return CouponValidation(success=False, error_message="Coupon not found")
        if subtotal < coupon.min_purchase_amount:
            return CouponValidation(
                success=False,
                error_message=f"Minimum purchase of {coupon.min_purchase_amount} required",
            )
        return CouponValidation(success=True, coupon=coupon, discount=compute_discount(coupon, subtotal))

    async def record_usage(self, coupon_id: str) -> None:
        if self.usage_error is not None:
            raise self.usage_error
        self.recorded.append(coupon_id)


class FakeTax:
    def __init__(self, default: Decimal | None = Decimal("0.15"), **rates: TaxRate) -> None:
        self.default = default
        self.rates = rates
        self.asked: list[str] = []
        self.error: Exception | None = None

    async def get_default_tax_rate(self) -> Decimal | None:
        if self.error is not None:
            raise self.error
        return self.default

    async def get_tax_rate(self, country_code: str) -> TaxRate | None:
        self.asked.append(country_code)
        if self.error is not None:
            raise self.error
        return self.rates.get(country_code)


class FakeRegistration:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.attempts: list[GuestRegistration] = []
        self.registered: list[GuestRegistration] = []
        self.gate: asyncio.Event | None = None

    async def register(self, registration: GuestRegistration) -> None:
        self.attempts.append(registration)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        self.registered.append(registration)


class FakeOrders:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.drafts: list[OrderDraft] = []

    async def submit_draft(self, draft: OrderDraft) -> None:
        if self.error is not None:
            raise self.error
        self.drafts.append(draft)


class FakeShippingData:
    """Fills in sea shipping data, optionally slowly or failing."""

    def __init__(self, *, delay: float = 0.0, error: Exception | None = None) -> None:
        self.delay = delay
        self.error = error
        self.calls = 0

    async def refresh(self, items: Sequence[LineItem]) -> Sequence[LineItem]:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return [replace(i, sea_shipping_price=Decimal("9"), sea_shipping_duration=21) for i in items]


class FakeConnectivity:
    def __init__(self, online: bool = True) -> None:
        self.online = online

    def is_online(self) -> bool:
        return self.online


def services(
    *,
    coupons: FakeCoupons | None = None,
    tax: FakeTax | None = None,
    registration: FakeRegistration | None = None,
    orders: FakeOrders | None = None,
    shipping_data: FakeShippingData | None = None,
    connectivity: FakeConnectivity | None = None,
) -> CheckoutServices:
    return CheckoutServices(
        coupons=coupons or FakeCoupons(),
        tax=tax or FakeTax(),
        registration=registration or FakeRegistration(),
        orders=orders or FakeOrders(),
        shipping_data=shipping_data,
        connectivity=connectivity,
    )


__all__ = (
    "FIXED_NOW",
    "fixed_clock",
    "unwrap",
    "unwrap_err",
    "item",
    "percent",
    "fixed",
    "FakeCoupons",
    "FakeTax",
    "FakeRegistration",
    "FakeOrders",
    "FakeShippingData",
    "FakeConnectivity",
    "services",
    "ServiceError",
)
