"""
Shipping — eligibility, quotes and delivery options.

    from tally import shipping as SH

    quote = SH.evaluate(SH.ShippingMethod.AIR, items)
    offered = SH.offered_methods(items)
    options = await SH.resolve_delivery_options(items, online=True)
"""

from tally.shipping._types import (
    ShippingMethod,
    ShippingQuote,
    DeliveryStatus,
    DeliveryOptions,
    DeliveryFailure,
)
from tally.shipping._evaluate import (
    CATALOG,
    rate_for,
    evaluate,
    evaluate_all,
    offered_methods,
    unshippable_items,
)
from tally.shipping._resolve import (
    RefreshFn,
    OFFLINE_MESSAGE,
    FAILED_MESSAGE,
    NONE_CONFIGURED_MESSAGE,
    resolve_delivery_options,
)

__all__ = (
    "ShippingMethod",
    "ShippingQuote",
    "DeliveryStatus",
    "DeliveryOptions",
    "DeliveryFailure",
    "CATALOG",
    "rate_for",
    "evaluate",
    "evaluate_all",
    "offered_methods",
    "unshippable_items",
    "RefreshFn",
    "OFFLINE_MESSAGE",
    "FAILED_MESSAGE",
    "NONE_CONFIGURED_MESSAGE",
    "resolve_delivery_options",
)
