"""
Checkout — the step controller and its collaborator contracts.

    from tally import checkout as CO

    checkout = CO.CheckoutController(items, services, settings=settings)
    match await checkout.advance():
        case Ok(step): ...
        case Error(e): show(e.message)
"""

from tally.checkout._types import (
    Step,
    UserProfile,
    AccountRequest,
    GuestRegistration,
    CheckoutSession,
    StepErrorKind,
    StepError,
)
from tally.checkout._ports import (
    ServiceError,
    CouponService,
    TaxConfigService,
    RegistrationService,
    OrderSink,
    ShippingDataSource,
    Connectivity,
    CheckoutServices,
    message_of,
)
from tally.checkout._guard import Concern, Ticket, InFlight
from tally.checkout._controller import (
    UNEXPECTED_MESSAGE,
    CONTACT_REQUIRED_MESSAGE,
    ADDRESS_REQUIRED_MESSAGE,
    METHOD_REQUIRED_MESSAGE,
    METHOD_UNAVAILABLE_MESSAGE,
    PASSWORD_MISMATCH_MESSAGE,
    REGISTRATION_FAILED_MESSAGE,
    TAX_UNAVAILABLE_MESSAGE,
    EMPTY_ORDER_MESSAGE,
    SUBMIT_FAILED_MESSAGE,
    COUPON_BUSY_MESSAGE,
    COUPON_STALE_MESSAGE,
    CLOSED_MESSAGE,
    STALE_MESSAGE,
    boundary,
    CheckoutController,
)

__all__ = (
    "Step",
    "UserProfile",
    "AccountRequest",
    "GuestRegistration",
    "CheckoutSession",
    "StepErrorKind",
    "StepError",
    "ServiceError",
    "CouponService",
    "TaxConfigService",
    "RegistrationService",
    "OrderSink",
    "ShippingDataSource",
    "Connectivity",
    "CheckoutServices",
    "message_of",
    "Concern",
    "Ticket",
    "InFlight",
    "UNEXPECTED_MESSAGE",
    "CONTACT_REQUIRED_MESSAGE",
    "ADDRESS_REQUIRED_MESSAGE",
    "METHOD_REQUIRED_MESSAGE",
    "METHOD_UNAVAILABLE_MESSAGE",
    "PASSWORD_MISMATCH_MESSAGE",
    "REGISTRATION_FAILED_MESSAGE",
    "TAX_UNAVAILABLE_MESSAGE",
    "EMPTY_ORDER_MESSAGE",
    "SUBMIT_FAILED_MESSAGE",
    "COUPON_BUSY_MESSAGE",
    "COUPON_STALE_MESSAGE",
    "CLOSED_MESSAGE",
    "STALE_MESSAGE",
    "boundary",
    "CheckoutController",
)
