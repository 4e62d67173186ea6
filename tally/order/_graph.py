"""
Draft graph — the order draft as a nodnod computation.

    RequestNode ─┬─> SubtotalNode ─┬─> DiscountNode ─┐
                 ├─> ShippingNode ─┼─────────────────┼─> TotalsNode ─> DraftNode
                 └─────────────────┴─────────────────┘

Every node is a pure function of the request, so the draft always agrees with
the live pricing summary built from the same inputs.
"""

import functools
import logging
from collections.abc import Callable, Coroutine
from decimal import Decimal
from typing import Any, cast

from nodnod import EventLoopAgent, Node, Scope, Value
from nodnod import scalar_node as node

from tally._types import Money
from tally.order._aggregate import aggregate, discount_for, shipping_cost_for, subtotal_of
from tally.order._types import DraftRequest, OrderDraft, Totals
from tally.shipping import ShippingQuote, evaluate

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Nodes
# ═══════════════════════════════════════════════════════════════════════════════


@node
class RequestNode:
    """Entry point: wraps the DraftRequest input."""

    def __init__(self, data: DraftRequest) -> None:
        self.data = data

    @classmethod
    def __compose__(cls, request: DraftRequest) -> "RequestNode":
        return cls(request)


@node
class SubtotalNode:
    def __init__(self, amount: Money) -> None:
        self.amount = amount

    @classmethod
    def __compose__(cls, request: RequestNode) -> "SubtotalNode":
        return cls(subtotal_of(request.data.items))


@node
class ShippingNode:
    """Quote of the selected method and what it costs after coupons."""

    def __init__(self, quote: ShippingQuote, cost: Money) -> None:
        self.quote = quote
        self.cost = cost

    @classmethod
    def __compose__(cls, request: RequestNode) -> "ShippingNode":
        data = request.data
        quote = evaluate(data.method, data.items)
        return cls(quote, shipping_cost_for(quote, data.coupon))


@node
class DiscountNode:
    def __init__(self, amount: Money) -> None:
        self.amount = amount

    @classmethod
    def __compose__(cls, request: RequestNode, subtotal: SubtotalNode) -> "DiscountNode":
        return cls(discount_for(request.data.coupon, subtotal.amount))


@node
class TotalsNode:
    def __init__(self, data: Totals, tax_rate: Decimal) -> None:
        self.data = data
        self.tax_rate = tax_rate

    @classmethod
    def __compose__(
        cls,
        request: RequestNode,
        subtotal: SubtotalNode,
        shipping: ShippingNode,
        discount: DiscountNode,
    ) -> "TotalsNode":
        rate = request.data.tax_rate
        totals = aggregate(subtotal.amount, shipping.cost, rate, discount.amount)
        return cls(totals, rate)


@node
class DraftNode:
    """Stamped, immutable draft."""

    def __init__(self, data: OrderDraft) -> None:
        self.data = data

    @classmethod
    def __compose__(
        cls,
        request: RequestNode,
        subtotal: SubtotalNode,
        shipping: ShippingNode,
        discount: DiscountNode,
        totals: TotalsNode,
    ) -> "DraftNode":
        data = request.data
        created_at = data.clock()
        order_number = f"{data.order_number_prefix}{int(created_at.timestamp() * 1000)}"
        draft = OrderDraft(
            order_number=order_number,
            line_items=data.items,
            subtotal=subtotal.amount,
            shipping_cost=shipping.cost,
            shipping_method=data.method,
            estimated_delivery_days=shipping.quote.estimated_duration_days,
            tax=totals.data.tax,
            tax_rate=totals.tax_rate,
            discount=discount.amount,
            coupon_code=data.coupon.code if data.coupon is not None else None,
            total=totals.data.total,
            contact_info=data.contact,
            shipping_address=data.address,
            billing_address=data.address,
            created_at=created_at,
            is_new_user=data.is_new_user,
            origin=data.origin,
        )
        return cls(draft)


# ═══════════════════════════════════════════════════════════════════════════════
# compose_draft()
# ═══════════════════════════════════════════════════════════════════════════════


@functools.cache
def _agent() -> EventLoopAgent:
    nodes: set[type[Node[Any, Any]]] = {cast(type[Node[Any, Any]], DraftNode)}
    return EventLoopAgent.build(nodes)


async def compose_draft(request: DraftRequest) -> OrderDraft:
    """
    Build the order draft for a request.

    Raises ValueError for an empty request or when the selected method cannot
    ship the items.

    Example:
        draft = await compose_draft(DraftRequest(items, ShippingMethod.AIR, rate, contact, address))
        assert draft.total == draft.subtotal + draft.shipping_cost + draft.tax - draft.discount
    """
    if not request.items:
        raise ValueError("An order needs at least one item")
    if not evaluate(request.method, request.items).is_available:
        raise ValueError(f"{request.method.display_name} is not available for these items")

    async with Scope(detail="draft") as scope:
        scope.push(Value(DraftRequest, request))
        run_method = cast(
            Callable[[Scope, dict[type[Any], Scope]], Coroutine[Any, Any, None]],
            getattr(_agent(), "run"),
        )
        await run_method(scope, {})

        result = scope.get(DraftNode)
        if result is None:
            raise KeyError("DraftNode not found in scope")
        draft = cast(DraftNode, result.value).data

    logger.info("[order] draft %s composed, total %s", draft.order_number, draft.total)
    return draft


__all__ = (
    "RequestNode",
    "SubtotalNode",
    "ShippingNode",
    "DiscountNode",
    "TotalsNode",
    "DraftNode",
    "compose_draft",
)
