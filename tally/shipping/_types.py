"""
Shipping types — method catalog, quotes, delivery options.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from kungfu import Result, Ok, Error

from tally._types import Money, ZERO
from tally.cart import LineItem

# ═══════════════════════════════════════════════════════════════════════════════
# ShippingMethod — closed catalog
# ═══════════════════════════════════════════════════════════════════════════════


class ShippingMethod(Enum):
    """
    Shipping methods the storefront offers.

    Every member carries all of its display data; a method cannot exist
    without a carrier or a fallback duration.
    """

    AIR = ("air", "Air Shipping", "DHL", "Fast delivery by air", 7)
    SEA = ("sea", "Sea Shipping", "Maersk", "Economic shipping by sea", 30)

    def __init__(
        self,
        id: str,
        display_name: str,
        carrier: str,
        description: str,
        fallback_days: int,
    ) -> None:
        self.id = id
        self.display_name = display_name
        self.carrier = carrier
        self.description = description
        self.fallback_days = fallback_days

    @classmethod
    def parse(cls, raw: str) -> Result[ShippingMethod, str]:
        """Look up a method by its id ("air" / "sea")."""
        wanted = raw.strip().lower()
        for method in cls:
            if method.id == wanted:
                return Ok(method)
        return Error(f"Unknown shipping method: {raw!r}")


# ═══════════════════════════════════════════════════════════════════════════════
# ShippingQuote — derived, never stored
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ShippingQuote:
    """Price, duration and availability of one method for a set of items."""

    method: ShippingMethod
    unit_price_total: Money
    estimated_duration_days: int
    is_available: bool
    contributing_items: tuple[str, ...] = ()

    @property
    def method_id(self) -> str:
        return self.method.id

    @property
    def estimated_delivery(self) -> str:
        if not self.is_available:
            return ""
        return f"{self.estimated_duration_days} days"

    @classmethod
    def unavailable(cls, method: ShippingMethod) -> ShippingQuote:
        return cls(method, ZERO, 0, False)


# ═══════════════════════════════════════════════════════════════════════════════
# Delivery options — result of resolving the Delivery step
# ═══════════════════════════════════════════════════════════════════════════════


class DeliveryStatus(Enum):
    """State of the Delivery step's option list."""

    READY = auto()  # at least one method offered
    NONE_CONFIGURED = auto()  # products carry no usable shipping data
    OFFLINE = auto()  # no connectivity or too slow; retry offered
    FAILED = auto()  # shipping data source raised


@dataclass(frozen=True, slots=True)
class DeliveryOptions:
    """What the Delivery step shows."""

    status: DeliveryStatus
    quotes: tuple[ShippingQuote, ...] = ()
    unshippable_items: tuple[str, ...] = ()
    message: str | None = None
    items: tuple[LineItem, ...] = ()  # line items the quotes were computed from

    @property
    def offered(self) -> tuple[ShippingQuote, ...]:
        return tuple(q for q in self.quotes if q.is_available)

    @property
    def can_retry(self) -> bool:
        return self.status in (DeliveryStatus.OFFLINE, DeliveryStatus.FAILED)


@dataclass(frozen=True, slots=True)
class DeliveryFailure:
    """Why shipping data could not be resolved."""

    status: DeliveryStatus
    message: str
    cause: str | None = field(default=None, compare=False)


__all__ = (
    "ShippingMethod",
    "ShippingQuote",
    "DeliveryStatus",
    "DeliveryOptions",
    "DeliveryFailure",
)
