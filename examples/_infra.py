"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from tally.cart import LineItem
from tally.checkout import CheckoutServices, GuestRegistration, ServiceError
from tally.coupon import Coupon, CouponValidation, DiscountType, compute_discount
from tally.order import OrderDraft
from tally.tax import TaxRate


# Storefront payloads
CART_ROWS = [
    {
        "_id": "kente-scarf",
        "name": "Kente scarf",
        "price": "GH₵120,00",
        "quantity": 2,
        "colorName": "Gold",
        "airShippingPrice": "25",
        "airShippingDuration": "5",
        "seaShippingPrice": "8",
        "seaShippingDuration": "28",
    },
    {
        "_id": "shea-butter",
        "name": "Shea butter",
        "price": "€15.50",
        "quantity": 1,
        "airShippingPrice": "10",
        "airShippingDuration": "4",
    },
    {
        "_id": "gift-card",
        "name": "Gift card",
        "price": "50",
    },
]


# Fake services
@dataclass(slots=True)
class FakeCouponApi:
    coupons: dict[str, Coupon] = field(default_factory=lambda: {
        "WELCOME10": Coupon("WELCOME10", DiscountType.PERCENTAGE, Decimal("10"), id="cp-1"),
        "FREESHIP": Coupon("FREESHIP", DiscountType.FIXED, Decimal("0"), id="cp-2"),
        "BIG100": Coupon("BIG100", DiscountType.FIXED, Decimal("100"), min_purchase_amount=Decimal("1000")),
    })
    used: list[str] = field(default_factory=list)

    async def validate(self, code: str, subtotal: Decimal) -> CouponValidation:
        await asyncio.sleep(0.01)
        coupon = self.coupons.get(code.upper())
        if coupon is None:
            return CouponValidation(success=False, error_message="Coupon not found")
        if subtotal < coupon.min_purchase_amount:
            return CouponValidation(
                success=False,
                error_message=f"Minimum purchase of GH₵{coupon.min_purchase_amount} required",
            )
        return CouponValidation(success=True, coupon=coupon, discount=compute_discount(coupon, subtotal))

    async def record_usage(self, coupon_id: str) -> None:
        self.used.append(coupon_id)


@dataclass(slots=True)
class FakeSettingsApi:
    rates: dict[str, TaxRate] = field(default_factory=lambda: {
        "NG": TaxRate("NG", Decimal("0.075")),
        "KE": TaxRate("KE", Decimal("0.16"), is_active=False),
    })

    async def get_default_tax_rate(self) -> Decimal | None:
        return Decimal("0.15")

    async def get_tax_rate(self, country_code: str) -> TaxRate | None:
        await asyncio.sleep(0.01)
        return self.rates.get(country_code)


@dataclass(slots=True)
class FakeAuthApi:
    emails: set[str] = field(default_factory=lambda: {"taken@example.com"})

    async def register(self, registration: GuestRegistration) -> None:
        if registration.email in self.emails:
            raise ServiceError("An account with this email already exists")
        self.emails.add(registration.email)


@dataclass(slots=True)
class FakeOrderStore:
    drafts: list[OrderDraft] = field(default_factory=list)

    async def submit_draft(self, draft: OrderDraft) -> None:
        self.drafts.append(draft)


@dataclass(slots=True)
class FlakyNetwork:
    online: bool = False

    def is_online(self) -> bool:
        return self.online


@dataclass(slots=True)
class CatalogApi:
    """Returns the items unchanged after a short delay."""

    delay: float = 0.01

    async def refresh(self, items: Sequence[LineItem]) -> Sequence[LineItem]:
        await asyncio.sleep(self.delay)
        return items


def storefront(network: FlakyNetwork | None = None) -> tuple[CheckoutServices, FakeOrderStore, FakeCouponApi]:
    orders = FakeOrderStore()
    coupons = FakeCouponApi()
    services = CheckoutServices(
        coupons=coupons,
        tax=FakeSettingsApi(),
        registration=FakeAuthApi(),
        orders=orders,
        shipping_data=CatalogApi(),
        connectivity=network,
    )
    return services, orders, coupons


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)-7s %(name)s %(message)s")
    asyncio.run(main())
