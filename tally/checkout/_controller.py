"""
Checkout controller — the four-step wizard over the pricing core.

    Contact(1) ─> Address(2) ─> Delivery(3) ─> Review(4) ─> submit()

Forward moves are gated by each step's validation; backward moves are always
allowed. Every async operation returns a Result, and no exception escapes an
operation: unexpected ones become StepErrorKind.UNEXPECTED.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from combinators import lift as L
from kungfu import Result, Ok, Error

from tally import coupon as CP
from tally import order as O
from tally import shipping as SH
from tally import tax as T
from tally.cart import LineItem, Origin
from tally.checkout._guard import Concern, InFlight
from tally.checkout._ports import CheckoutServices, message_of
from tally.checkout._types import (
    AccountRequest,
    CheckoutSession,
    GuestRegistration,
    Step,
    StepError,
    StepErrorKind,
    UserProfile,
)
from tally.config import Settings

logger = logging.getLogger(__name__)

UNEXPECTED_MESSAGE = "Something went wrong. Please try again."
CONTACT_REQUIRED_MESSAGE = "Please fill in all required fields"
ADDRESS_REQUIRED_MESSAGE = "Please fill in all required shipping address fields"
METHOD_REQUIRED_MESSAGE = "Please select a shipping method"
METHOD_UNAVAILABLE_MESSAGE = "The selected shipping method is not available for your products"
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"
REGISTRATION_FAILED_MESSAGE = "Registration failed. Please try again."
TAX_UNAVAILABLE_MESSAGE = "Could not load tax settings. The default rate is used."
EMPTY_ORDER_MESSAGE = "Your order has no items"
SUBMIT_FAILED_MESSAGE = "We could not place your order. Please try again."
COUPON_BUSY_MESSAGE = "A coupon is already being validated"
COUPON_STALE_MESSAGE = "The coupon answer arrived too late and was discarded"
CLOSED_MESSAGE = "This checkout is already finished"
STALE_MESSAGE = "The answer arrived after you moved on and was discarded"

_ADDRESS_FIELDS = ("first_name", "last_name", "address1", "city", "state", "zip_code", "country")


# ═══════════════════════════════════════════════════════════════════════════════
# Boundary
# ═══════════════════════════════════════════════════════════════════════════════


def _unexpected(e: Exception) -> StepError:
    logger.error("[checkout] unexpected failure: %s", e, exc_info=e)
    return StepError(StepErrorKind.UNEXPECTED, UNEXPECTED_MESSAGE)


def boundary[**P, V](
    fn: Callable[P, Awaitable[Result[V, StepError]]],
) -> Callable[P, Awaitable[Result[V, StepError]]]:
    """Turn anything an operation raises into an UNEXPECTED step error."""

    @functools.wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[V, StepError]:
        match await L.catching_async(lambda: fn(*args, **kwargs), on_error=_unexpected):
            case Ok(result):
                return result
            case Error(e):
                return Error(e)

    return wrapper


def _invalid(message: str, step: Step) -> Error[StepError]:
    logger.debug("[checkout] %s blocked: %s", step.name, message)
    return Error(StepError(StepErrorKind.VALIDATION, message, step))


def _coupon_unexpected(e: Exception) -> CP.CouponError:
    logger.error("[checkout] unexpected coupon failure: %s", e, exc_info=e)
    return CP.CouponError(CP.CouponErrorKind.UNAVAILABLE, CP.UNAVAILABLE_MESSAGE)


# ═══════════════════════════════════════════════════════════════════════════════
# CheckoutController
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutController:
    """
    One checkout attempt.

    Args:
        items: Line items entering checkout (from the cart or a product page)
        services: Collaborators (coupon, tax, registration, order sink, ...)
        settings: Tax default, free-shipping code, timeouts, password rule
        origin: Where "back" from the first step leads
        user: Authenticated user; prefills contact and names, skips registration
        clock: Source of the draft's creation time

    Example:
        checkout = CheckoutController(items, services, settings=settings)
        await checkout.load_tax_settings()
        checkout.update_contact(email="ama@example.com", phone="0244000000")
        await checkout.advance()
        ...
        match await checkout.submit():
            case Ok(draft): redirect(draft.order_number)
            case Error(e): show(e.message)
    """

    def __init__(
        self,
        items: Iterable[LineItem],
        services: CheckoutServices,
        *,
        settings: Settings,
        origin: Origin = Origin.CART,
        user: UserProfile | None = None,
        clock: Callable[[], datetime] = O.utc_now,
    ) -> None:
        self.items = tuple(items)
        self.services = services
        self.settings = settings
        self.origin = origin
        self.user = user
        self.session = CheckoutSession()
        self._clock = clock
        self._guard = InFlight()
        self._default_rate = settings.default_tax_rate
        self._tax_table: dict[str, T.TaxRate] = {}
        if user is not None:
            self._prefill(user)

    def _prefill(self, user: UserProfile) -> None:
        self.session.contact = O.ContactInfo(email=user.email, phone=user.phone)
        self.session.address = replace(
            self.session.address,
            first_name=user.first_name,
            last_name=user.last_name,
        )

    # ───────────────────────────────────────────────────────────────────────────
    # Pricing
    # ───────────────────────────────────────────────────────────────────────────

    @property
    def step(self) -> Step:
        return self.session.step

    @property
    def tax_rate(self) -> Decimal:
        """Effective rate for the current address country."""
        code = T.country_code_for(self.session.address.country)
        return T.resolve_tax_rate(code, self._tax_table, self._default_rate)

    def quote(self) -> SH.ShippingQuote | None:
        if self.session.method is None:
            return None
        return SH.evaluate(self.session.method, self.items)

    def pricing(self) -> O.PricingSummary:
        """Live summary; recomputed from current inputs on every call."""
        return O.summarize(self.items, self.quote(), self.tax_rate, self.session.coupon)

    # ───────────────────────────────────────────────────────────────────────────
    # Tax settings
    # ───────────────────────────────────────────────────────────────────────────

    @boundary
    async def load_tax_settings(self) -> Result[Decimal, StepError]:
        """Fetch the default rate and the rate of the current country."""
        answer = await L.catching_async(
            self.services.tax.get_default_tax_rate,
            on_error=lambda e: StepError(StepErrorKind.COLLABORATOR, TAX_UNAVAILABLE_MESSAGE),
        )
        match answer:
            case Ok(rate) if rate is not None:
                self._default_rate = Decimal(rate)
            case Ok(_):
                pass
            case Error(e):
                logger.warning("[checkout] default tax rate unavailable, using %s", self._default_rate)
                return Error(e)

        return await self._fetch_country_rate(self.session.address.country)

    async def _fetch_country_rate(self, country: str) -> Result[Decimal, StepError]:
        code = T.country_code_for(country)
        if code is None or code in self._tax_table:
            return Ok(self.tax_rate)

        match self._guard.begin((Concern.TAX, code)):
            case Error(_):
                return Error(StepError(StepErrorKind.BUSY, "Tax settings are loading"))
            case Ok(ticket):
                pass

        try:
            answer = await L.catching_async(
                lambda: self.services.tax.get_tax_rate(code),
                on_error=lambda e: StepError(StepErrorKind.COLLABORATOR, TAX_UNAVAILABLE_MESSAGE),
            )
        finally:
            self._guard.end(ticket)

        match answer:
            case Ok(entry) if entry is not None:
                self._tax_table[code] = entry
            case Ok(_):
                logger.debug("[checkout] no tax rate configured for %s", code)
            case Error(e):
                logger.warning("[checkout] tax rate for %s unavailable", code)
                return Error(e)
        return Ok(self.tax_rate)

    # ───────────────────────────────────────────────────────────────────────────
    # Step inputs
    # ───────────────────────────────────────────────────────────────────────────

    def update_contact(self, **changes: str) -> Result[O.ContactInfo, StepError]:
        if self.session.closed:
            return self._closed()
        self.session.contact = replace(self.session.contact, **changes)
        return Ok(self.session.contact)

    def request_account(
        self,
        password: str,
        confirm_password: str,
        *,
        first_name: str = "",
        last_name: str = "",
    ) -> None:
        """Guest opts into account creation."""
        self.session.account = AccountRequest(password, confirm_password, first_name, last_name)

    def decline_account(self) -> None:
        self.session.account = None

    @boundary
    async def update_address(self, **changes: str) -> Result[Decimal, StepError]:
        """
        Update address fields; a country change reloads the effective tax rate.

        On a tax service failure the address is still updated and the default
        rate applies.
        """
        if self.session.closed:
            return self._closed()
        previous = self.session.address.country
        self.session.address = replace(self.session.address, **changes)
        if self.session.address.country == previous:
            return Ok(self.tax_rate)
        logger.info("[checkout] country changed to %s", self.session.address.country)
        return await self._fetch_country_rate(self.session.address.country)

    # ───────────────────────────────────────────────────────────────────────────
    # Navigation
    # ───────────────────────────────────────────────────────────────────────────

    def _closed(self) -> Error[StepError]:
        logger.debug("[checkout] rejected, session is closed")
        return Error(StepError(StepErrorKind.CLOSED, CLOSED_MESSAGE, self.session.step))

    def _invalidate_pending(self) -> None:
        for concern in (Concern.COUPON, Concern.REGISTRATION, Concern.DELIVERY):
            self._guard.invalidate(concern)

    def _move_to(self, step: Step) -> Step:
        if step != self.session.step:
            logger.info("[checkout] %s -> %s", self.session.step.name, step.name)
            self._invalidate_pending()
            self.session.step = step
        return step

    @boundary
    async def advance(self) -> Result[Step, StepError]:
        """Validate the current step and move to the next one."""
        if self.session.closed:
            return self._closed()
        match self.session.step:
            case Step.CONTACT:
                contact = self.session.contact
                if not contact.email.strip() or not contact.phone.strip():
                    return _invalid(CONTACT_REQUIRED_MESSAGE, Step.CONTACT)
                if self.session.account is not None and self.user is None and not self.session.registered:
                    match await self._register(self.session.account):
                        case Error(e):
                            return Error(e)
                        case Ok(_):
                            pass
                return Ok(self._move_to(Step.ADDRESS))

            case Step.ADDRESS:
                address = self.session.address
                if any(not getattr(address, name).strip() for name in _ADDRESS_FIELDS):
                    return _invalid(ADDRESS_REQUIRED_MESSAGE, Step.ADDRESS)
                step = self._move_to(Step.DELIVERY)
                match await self.load_delivery_options():
                    case Error(e) if e.kind in (StepErrorKind.STALE, StepErrorKind.CLOSED):
                        return Error(e)
                    case _:
                        return Ok(step)

            case Step.DELIVERY:
                quote = self.quote()
                if quote is None:
                    return _invalid(METHOD_REQUIRED_MESSAGE, Step.DELIVERY)
                if not quote.is_available:
                    return _invalid(METHOD_UNAVAILABLE_MESSAGE, Step.DELIVERY)
                return Ok(self._move_to(Step.REVIEW))

            case Step.REVIEW:
                return _invalid("Review is the last step; submit the order", Step.REVIEW)

    def back(self) -> Step | Origin:
        """Previous step, or the originating page when leaving the first step."""
        if self.session.closed:
            return self.origin
        if self.session.step == Step.CONTACT:
            logger.info("[checkout] leaving checkout for %s", self.origin)
            self._invalidate_pending()
            self.session.closed = True
            return self.origin
        return self._move_to(Step(self.session.step - 1))

    def go_to(self, step: Step) -> Result[Step, StepError]:
        """Jump back to an earlier step."""
        if self.session.closed:
            return self._closed()
        if step >= self.session.step:
            return _invalid("You can only go back to an earlier step", self.session.step)
        return Ok(self._move_to(step))

    # ───────────────────────────────────────────────────────────────────────────
    # Registration
    # ───────────────────────────────────────────────────────────────────────────

    async def _register(self, account: AccountRequest) -> Result[None, StepError]:
        if account.password != account.confirm_password:
            return _invalid(PASSWORD_MISMATCH_MESSAGE, Step.CONTACT)
        minimum = self.settings.min_password_length
        if len(account.password) < minimum:
            return _invalid(f"Password must be at least {minimum} characters", Step.CONTACT)

        match self._guard.begin(Concern.REGISTRATION):
            case Error(_):
                return Error(StepError(StepErrorKind.BUSY, "Registration is in progress", Step.CONTACT))
            case Ok(ticket):
                pass

        address = self.session.address
        registration = GuestRegistration(
            first_name=account.first_name or address.first_name,
            last_name=account.last_name or address.last_name,
            email=self.session.contact.email.strip(),
            phone=self.session.contact.phone.strip(),
            password=account.password,
        )
        try:
            answer = await L.catching_async(
                lambda: self.services.registration.register(registration),
                on_error=lambda e: StepError(
                    StepErrorKind.COLLABORATOR,
                    message_of(e, REGISTRATION_FAILED_MESSAGE),
                    Step.CONTACT,
                ),
            )
        finally:
            self._guard.end(ticket)

        match answer:
            case Error(e):
                logger.warning("[checkout] registration of %s failed: %s", registration.email, e.message)
                return Error(e)
            case Ok(_):
                pass

        if not self._guard.is_current(ticket) or self.session.closed:
            logger.debug("[checkout] registration answer for %s discarded", registration.email)
            return Error(StepError(StepErrorKind.STALE, STALE_MESSAGE, Step.CONTACT))

        self.session.registered = True
        self.session.address = replace(
            address,
            first_name=address.first_name or registration.first_name,
            last_name=address.last_name or registration.last_name,
        )
        logger.info("[checkout] registered %s", registration.email)
        return Ok(None)

    # ───────────────────────────────────────────────────────────────────────────
    # Delivery
    # ───────────────────────────────────────────────────────────────────────────

    @boundary
    async def load_delivery_options(self) -> Result[SH.DeliveryOptions, StepError]:
        """Resolve which methods the Delivery step offers."""
        if self.session.closed:
            return self._closed()
        match self._guard.begin(Concern.DELIVERY):
            case Error(_):
                return Error(StepError(StepErrorKind.BUSY, "Shipping options are loading", Step.DELIVERY))
            case Ok(ticket):
                pass

        connectivity = self.services.connectivity
        source = self.services.shipping_data
        try:
            options = await SH.resolve_delivery_options(
                self.items,
                refresh=source.refresh if source is not None else None,
                online=connectivity.is_online() if connectivity is not None else True,
                timeout_seconds=self.settings.shipping_timeout_seconds,
            )
        finally:
            self._guard.end(ticket)

        if not self._guard.is_current(ticket) or self.session.closed:
            logger.debug("[checkout] delivery options arrived after leaving the step, discarded")
            return Error(StepError(StepErrorKind.STALE, STALE_MESSAGE, Step.DELIVERY))

        if options.items:
            self.items = options.items
        method = self.session.method
        resolved = options.status in (SH.DeliveryStatus.READY, SH.DeliveryStatus.NONE_CONFIGURED)
        if resolved and method is not None and method not in {q.method for q in options.offered}:
            logger.info("[checkout] %s no longer offered, selection cleared", method.id)
            self.session.method = None
        self.session.delivery = options
        return Ok(options)

    async def retry_delivery_options(self) -> Result[SH.DeliveryOptions, StepError]:
        """The "Try Again" affordance of the slow/offline state."""
        logger.info("[checkout] retrying delivery options")
        return await self.load_delivery_options()

    def select_method(self, method: SH.ShippingMethod | str) -> Result[SH.ShippingQuote, StepError]:
        """
        Select a shipping method.

        Switching away from a method while a free-shipping coupon is active
        clears the coupon; shipping is then priced by the evaluator again.
        """
        if self.session.closed:
            return self._closed()
        if isinstance(method, str):
            match SH.ShippingMethod.parse(method):
                case Ok(parsed):
                    method = parsed
                case Error(message):
                    return _invalid(message, Step.DELIVERY)

        quote = SH.evaluate(method, self.items)
        if not quote.is_available:
            return _invalid(METHOD_UNAVAILABLE_MESSAGE, Step.DELIVERY)

        coupon = self.session.coupon
        if method != self.session.method and coupon is not None and coupon.frees_shipping:
            logger.info("[checkout] method changed, free-shipping coupon %s cleared", coupon.code)
            self.clear_coupon()
        self.session.method = method
        return Ok(quote)

    # ───────────────────────────────────────────────────────────────────────────
    # Coupons
    # ───────────────────────────────────────────────────────────────────────────

    def set_coupon_code(self, code: str) -> None:
        """Typing in the coupon field; any pending answer becomes stale."""
        if code != self.session.coupon_code:
            self._guard.invalidate(Concern.COUPON)
        self.session.coupon_code = code

    def clear_coupon(self) -> None:
        self._guard.invalidate(Concern.COUPON)
        self.session.coupon = None
        self.session.coupon_code = ""

    async def apply_coupon(self, code: str | None = None) -> Result[CP.AppliedCoupon, CP.CouponError]:
        """
        Validate the coupon field and make it the active coupon.

        Replaces any previously applied coupon. Only one validation may be in
        flight; an answer arriving after the code or the step changed is
        discarded.
        """
        if self.session.closed:
            return Error(CP.CouponError(CP.CouponErrorKind.STALE, CLOSED_MESSAGE))
        if code is not None:
            self.set_coupon_code(code)

        match self._guard.begin(Concern.COUPON):
            case Error(_):
                return Error(CP.CouponError(CP.CouponErrorKind.BUSY, COUPON_BUSY_MESSAGE))
            case Ok(ticket):
                pass

        try:
            outcome = await L.catching_async(
                lambda: CP.apply_coupon(
                    self.session.coupon_code,
                    O.subtotal_of(self.items),
                    self.services.coupons.validate,
                    free_shipping_code=self.settings.free_shipping_code,
                    currency_symbol=self.settings.currency_symbol,
                ),
                on_error=_coupon_unexpected,
            )
        finally:
            self._guard.end(ticket)

        if not self._guard.is_current(ticket) or self.session.closed:
            logger.debug("[checkout] stale coupon answer discarded")
            return Error(CP.CouponError(CP.CouponErrorKind.STALE, COUPON_STALE_MESSAGE))

        match outcome:
            case Ok(Ok(applied)):
                self.session.coupon = applied
                return Ok(applied)
            case Ok(Error(e)) | Error(e):
                return Error(e)

    # ───────────────────────────────────────────────────────────────────────────
    # Submission
    # ───────────────────────────────────────────────────────────────────────────

    @boundary
    async def submit(self) -> Result[O.OrderDraft, StepError]:
        """
        Build the order draft and hand it to the order sink.

        Terminal: on success the session is closed. Coupon usage is recorded
        after the sink accepts the draft; a failure there is only logged.
        """
        if self.session.closed:
            return self._closed()
        if self.session.step != Step.REVIEW:
            return _invalid("Complete the previous steps first", self.session.step)
        if not self.items:
            return _invalid(EMPTY_ORDER_MESSAGE, Step.REVIEW)
        method = self.session.method
        if method is None:
            return _invalid(METHOD_REQUIRED_MESSAGE, Step.REVIEW)
        if not SH.evaluate(method, self.items).is_available:
            return _invalid(METHOD_UNAVAILABLE_MESSAGE, Step.REVIEW)

        match self._guard.begin(Concern.SUBMIT):
            case Error(_):
                return Error(StepError(StepErrorKind.BUSY, "Your order is being placed", Step.REVIEW))
            case Ok(ticket):
                pass

        try:
            draft = await O.compose_draft(
                O.DraftRequest(
                    items=self.items,
                    method=method,
                    tax_rate=self.tax_rate,
                    contact=self.session.contact,
                    address=self.session.address,
                    coupon=self.session.coupon,
                    is_new_user=self.session.registered,
                    origin=self.origin,
                    order_number_prefix=self.settings.order_number_prefix,
                    clock=self._clock,
                )
            )
            sent = await L.catching_async(
                lambda: self.services.orders.submit_draft(draft),
                on_error=lambda e: StepError(
                    StepErrorKind.COLLABORATOR,
                    message_of(e, SUBMIT_FAILED_MESSAGE),
                    Step.REVIEW,
                ),
            )
        finally:
            self._guard.end(ticket)

        match sent:
            case Error(e):
                logger.warning("[checkout] order %s not accepted: %s", draft.order_number, e.message)
                return Error(e)
            case Ok(_):
                pass

        await self._record_coupon_usage()
        self.session.closed = True
        logger.info("[checkout] order %s submitted, total %s", draft.order_number, draft.total)
        return Ok(draft)

    async def _record_coupon_usage(self) -> None:
        coupon = self.session.coupon
        if coupon is None or coupon.coupon.id is None:
            return
        coupon_id = coupon.coupon.id
        recorded = await L.catching_async(
            lambda: self.services.coupons.record_usage(coupon_id),
            on_error=str,
        )
        match recorded:
            case Error(reason):
                logger.warning("[checkout] usage of coupon %s not recorded: %s", coupon.code, reason)
            case Ok(_):
                logger.debug("[checkout] usage of coupon %s recorded", coupon.code)


__all__ = (
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
