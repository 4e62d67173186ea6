"""
Delivery option resolution — the async edge of the Delivery step.

Separates "slow or offline, try again" from "no method fits these products".
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from combinators import lift as L
from kungfu import Ok, Error

from tally.cart import LineItem
from tally.shipping._evaluate import evaluate_all, unshippable_items
from tally.shipping._types import DeliveryFailure, DeliveryOptions, DeliveryStatus

logger = logging.getLogger(__name__)

type RefreshFn = Callable[[Sequence[LineItem]], Awaitable[Sequence[LineItem]]]

OFFLINE_MESSAGE = "Your connection seems slow or offline. Check it and try again."
FAILED_MESSAGE = "We could not load shipping options. Please try again."
NONE_CONFIGURED_MESSAGE = "No shipping methods are available for the products in your order."


def _to_failure(e: Exception) -> DeliveryFailure:
    if isinstance(e, TimeoutError):
        return DeliveryFailure(DeliveryStatus.OFFLINE, OFFLINE_MESSAGE, cause="timeout")
    return DeliveryFailure(DeliveryStatus.FAILED, FAILED_MESSAGE, cause=str(e) or type(e).__name__)


async def resolve_delivery_options(
    items: Sequence[LineItem],
    *,
    refresh: RefreshFn | None = None,
    online: bool = True,
    timeout_seconds: float = 5.0,
) -> DeliveryOptions:
    """
    Resolve what the Delivery step can offer.

    Args:
        items: Current line items
        refresh: Optional source of up-to-date shipping fields for the items
        online: Connectivity check result; False short-circuits to OFFLINE
        timeout_seconds: Threshold after which a pending refresh is "slow"

    Example:
        options = await resolve_delivery_options(items, refresh=catalog.refresh)
        match options.status:
            case DeliveryStatus.READY: ...
            case DeliveryStatus.OFFLINE: ...  # show "Try Again"
    """
    if not online:
        logger.info("[shipping] offline, delivery options deferred")
        return DeliveryOptions(DeliveryStatus.OFFLINE, message=OFFLINE_MESSAGE)

    if refresh is not None:
        fetch = L.catching_async(
            lambda: asyncio.wait_for(refresh(items), timeout_seconds),
            on_error=_to_failure,
        )
        match await fetch:
            case Ok(fresh):
                items = tuple(fresh)
            case Error(failure):
                logger.warning("[shipping] delivery options %s: %s", failure.status.name, failure.cause)
                return DeliveryOptions(failure.status, message=failure.message)

    quotes = evaluate_all(items)
    missing = unshippable_items(items)
    if missing:
        logger.info("[shipping] items without shipping data: %s", ", ".join(missing))

    if not any(q.is_available for q in quotes):
        return DeliveryOptions(
            DeliveryStatus.NONE_CONFIGURED,
            quotes=quotes,
            unshippable_items=missing,
            message=NONE_CONFIGURED_MESSAGE,
            items=tuple(items),
        )
    return DeliveryOptions(
        DeliveryStatus.READY,
        quotes=quotes,
        unshippable_items=missing,
        items=tuple(items),
    )


__all__ = (
    "RefreshFn",
    "OFFLINE_MESSAGE",
    "FAILED_MESSAGE",
    "NONE_CONFIGURED_MESSAGE",
    "resolve_delivery_options",
)
