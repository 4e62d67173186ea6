"""
Checkout types — steps, session state and step errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto

from tally.coupon import AppliedCoupon
from tally.order import Address, ContactInfo
from tally.shipping import DeliveryOptions, ShippingMethod
from tally.tax import DEFAULT_COUNTRY

# ═══════════════════════════════════════════════════════════════════════════════
# Steps
# ═══════════════════════════════════════════════════════════════════════════════


class Step(IntEnum):
    """Wizard steps, in order. Submission is not a step."""

    CONTACT = 1
    ADDRESS = 2
    DELIVERY = 3
    REVIEW = 4

    @property
    def title(self) -> str:
        return _TITLES[self]


_TITLES = {
    Step.CONTACT: "Contact",
    Step.ADDRESS: "Shipping Address",
    Step.DELIVERY: "Delivery",
    Step.REVIEW: "Review",
}


# ═══════════════════════════════════════════════════════════════════════════════
# Accounts
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class UserProfile:
    """The authenticated storefront user, if any."""

    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""


@dataclass(frozen=True, slots=True)
class AccountRequest:
    """Guest opted into "create an account" on the Contact step."""

    password: str
    confirm_password: str
    first_name: str = ""
    last_name: str = ""


@dataclass(frozen=True, slots=True)
class GuestRegistration:
    """Payload for the registration service."""

    first_name: str
    last_name: str
    email: str
    phone: str
    password: str = field(repr=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Session
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class CheckoutSession:
    """
    Mutable state of one checkout attempt.

    Owned by a single CheckoutController; discarded on navigation away or
    after a successful submission (closed).
    """

    step: Step = Step.CONTACT
    contact: ContactInfo = field(default_factory=ContactInfo)
    address: Address = field(default_factory=lambda: Address(country=DEFAULT_COUNTRY))
    method: ShippingMethod | None = None
    coupon: AppliedCoupon | None = None
    coupon_code: str = ""
    account: AccountRequest | None = None
    registered: bool = False
    delivery: DeliveryOptions | None = None
    closed: bool = False


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class StepErrorKind(Enum):
    VALIDATION = auto()  # missing or invalid input, fixed by the user
    COLLABORATOR = auto()  # a service refused or failed
    BUSY = auto()  # same action already in flight
    STALE = auto()  # answer arrived after the user moved on
    UNEXPECTED = auto()  # caught at the controller boundary
    CLOSED = auto()  # checkout was submitted or left


@dataclass(frozen=True, slots=True)
class StepError:
    kind: StepErrorKind
    message: str
    step: Step | None = None


__all__ = (
    "Step",
    "UserProfile",
    "AccountRequest",
    "GuestRegistration",
    "CheckoutSession",
    "StepErrorKind",
    "StepError",
)
