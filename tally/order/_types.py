"""
Order types — customer details, totals and the immutable draft.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from tally._types import Money
from tally.cart import LineItem, Origin
from tally.coupon import AppliedCoupon
from tally.shipping import ShippingMethod, ShippingQuote

# ═══════════════════════════════════════════════════════════════════════════════
# Customer details
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ContactInfo:
    email: str = ""
    phone: str = ""


@dataclass(frozen=True, slots=True)
class Address:
    first_name: str = ""
    last_name: str = ""
    address1: str = ""
    address2: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# ═══════════════════════════════════════════════════════════════════════════════
# Totals
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Totals:
    tax: Money
    total: Money


@dataclass(frozen=True, slots=True)
class PricingSummary:
    """Live order summary, recomputed on every input change."""

    subtotal: Money
    shipping_cost: Money
    tax_rate: Decimal
    tax: Money
    discount: Money
    total: Money
    quote: ShippingQuote | None = None
    coupon_code: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# OrderDraft
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderDraft:
    """
    Pricing and line-item snapshot handed to the order store.

    total == subtotal + shipping_cost + tax - discount, with tax computed on
    the pre-discount subtotal.
    """

    order_number: str
    line_items: tuple[LineItem, ...]
    subtotal: Money
    shipping_cost: Money
    shipping_method: ShippingMethod
    estimated_delivery_days: int
    tax: Money
    tax_rate: Decimal
    discount: Money
    coupon_code: str | None
    total: Money
    contact_info: ContactInfo
    shipping_address: Address
    billing_address: Address
    created_at: datetime
    is_new_user: bool = False
    origin: Origin = Origin.CART

    @property
    def shipping_method_id(self) -> str:
        return self.shipping_method.id


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class DraftRequest:
    """Everything a draft is composed from."""

    items: tuple[LineItem, ...]
    method: ShippingMethod
    tax_rate: Decimal
    contact: ContactInfo
    address: Address
    coupon: AppliedCoupon | None = None
    is_new_user: bool = False
    origin: Origin = Origin.CART
    order_number_prefix: str = "ORD-"
    clock: Callable[[], datetime] = field(default=utc_now, compare=False)


__all__ = (
    "ContactInfo",
    "Address",
    "Totals",
    "PricingSummary",
    "OrderDraft",
    "DraftRequest",
    "utc_now",
)
