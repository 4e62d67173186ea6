"""
Ports — collaborator contracts the checkout controller is given.

Implementations raise ServiceError to refuse with a message meant for the
customer; any other exception is reported with a generic message.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from tally._types import Money
from tally.cart import LineItem
from tally.checkout._types import GuestRegistration
from tally.coupon import CouponValidation
from tally.order import OrderDraft
from tally.tax import TaxRate


class ServiceError(Exception):
    """A collaborator refused the request; the message is shown as is."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ═══════════════════════════════════════════════════════════════════════════════
# Protocols
# ═══════════════════════════════════════════════════════════════════════════════


class CouponService(Protocol):
    async def validate(self, code: str, subtotal: Money) -> CouponValidation: ...

    async def record_usage(self, coupon_id: str) -> None: ...


class TaxConfigService(Protocol):
    async def get_default_tax_rate(self) -> Decimal | None: ...

    async def get_tax_rate(self, country_code: str) -> TaxRate | None: ...


class RegistrationService(Protocol):
    async def register(self, registration: GuestRegistration) -> None: ...


class OrderSink(Protocol):
    async def submit_draft(self, draft: OrderDraft) -> None: ...


class ShippingDataSource(Protocol):
    """Up-to-date shipping fields for line items."""

    async def refresh(self, items: Sequence[LineItem]) -> Sequence[LineItem]: ...


class Connectivity(Protocol):
    def is_online(self) -> bool: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Wiring
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CheckoutServices:
    """
    Everything the controller talks to.

    Example:
        services = CheckoutServices(
            coupons=coupon_api,
            tax=settings_api,
            registration=auth_api,
            orders=order_store,
        )
    """

    coupons: CouponService
    tax: TaxConfigService
    registration: RegistrationService
    orders: OrderSink
    shipping_data: ShippingDataSource | None = None
    connectivity: Connectivity | None = None


def message_of(e: Exception, fallback: str) -> str:
    """Customer-facing text for a collaborator exception."""
    if isinstance(e, ServiceError) and e.message:
        return e.message
    return fallback


__all__ = (
    "ServiceError",
    "CouponService",
    "TaxConfigService",
    "RegistrationService",
    "OrderSink",
    "ShippingDataSource",
    "Connectivity",
    "CheckoutServices",
    "message_of",
)
