"""
Order — totals, live summary and the order draft.

    from tally import order as O

    summary = O.summarize(items, quote, tax_rate, applied_coupon)
    draft = await O.compose_draft(O.DraftRequest(items, method, tax_rate, contact, address))
"""

from tally.order._types import (
    ContactInfo,
    Address,
    Totals,
    PricingSummary,
    OrderDraft,
    DraftRequest,
    utc_now,
)
from tally.order._aggregate import (
    subtotal_of,
    aggregate,
    shipping_cost_for,
    discount_for,
    summarize,
)
from tally.order._graph import (
    RequestNode,
    SubtotalNode,
    ShippingNode,
    DiscountNode,
    TotalsNode,
    DraftNode,
    compose_draft,
)

__all__ = (
    "ContactInfo",
    "Address",
    "Totals",
    "PricingSummary",
    "OrderDraft",
    "DraftRequest",
    "utc_now",
    "subtotal_of",
    "aggregate",
    "shipping_cost_for",
    "discount_for",
    "summarize",
    "RequestNode",
    "SubtotalNode",
    "ShippingNode",
    "DiscountNode",
    "TotalsNode",
    "DraftNode",
    "compose_draft",
)
