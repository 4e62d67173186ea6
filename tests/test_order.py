import asyncio
from decimal import Decimal

import pytest

from tally.cart import Origin
from tally.coupon import AppliedCoupon, compute_discount
from tally.order import (
    Address,
    ContactInfo,
    DraftRequest,
    aggregate,
    compose_draft,
    shipping_cost_for,
    subtotal_of,
    summarize,
)
from tally.shipping import ShippingMethod, evaluate
from tests.fakes import FIXED_NOW, fixed, fixed_clock, item, percent

RATE = Decimal("0.15")
CONTACT = ContactInfo("ama@example.com", "0244000000")
ADDRESS = Address("Ama", "Mensah", "1 Oxford St", "", "Accra", "Greater Accra", "00233", "Ghana")


def applied(coupon, subtotal, *, frees_shipping=False) -> AppliedCoupon:
    return AppliedCoupon(coupon, compute_discount(coupon, subtotal), frees_shipping, "ok")


def test_tax_is_charged_before_discount():
    items = [item(price="100", air="12", air_days=5)]
    quote = evaluate(ShippingMethod.AIR, items)
    summary = summarize(items, quote, RATE, applied(percent("TEN", "10"), Decimal("100")))

    assert summary.subtotal == Decimal("100")
    assert summary.discount == Decimal("10")
    assert summary.tax == Decimal("15.00")
    assert summary.shipping_cost == Decimal("12")
    assert summary.total == Decimal("117.00")


def test_subtotal_sums_line_totals():
    items = [item("a", price="10", quantity=3), item("b", price="2.50", quantity=2)]
    assert subtotal_of(items) == Decimal("35.00")
    assert subtotal_of([]) == Decimal("0")


def test_negative_total_is_clamped():
    totals = aggregate(Decimal("10"), Decimal("0"), Decimal("0"), Decimal("50"))
    assert totals.total == Decimal("0")
    assert totals.tax == Decimal("0")


def test_free_shipping_coupon_zeroes_shipping():
    items = [item(sea="42", sea_days=30)]
    quote = evaluate(ShippingMethod.SEA, items)
    freeship = applied(fixed("FREESHIP", "0"), Decimal("100"), frees_shipping=True)

    assert shipping_cost_for(quote, None) == Decimal("42")
    assert shipping_cost_for(quote, freeship) == Decimal("0")
    assert shipping_cost_for(None, None) == Decimal("0")


def test_summary_without_method_has_no_shipping():
    summary = summarize([item(price="50")], None, RATE)
    assert summary.shipping_cost == Decimal("0")
    assert summary.total == Decimal("57.50")


# ═══════════════════════════════════════════════════════════════════════════════
# Draft
# ═══════════════════════════════════════════════════════════════════════════════


def request(**overrides) -> DraftRequest:
    values = dict(
        items=(item("p1", price="100", air="20", air_days=5), item("p2", price="40", quantity=2)),
        method=ShippingMethod.AIR,
        tax_rate=RATE,
        contact=CONTACT,
        address=ADDRESS,
        clock=fixed_clock,
    )
    values.update(overrides)
    return DraftRequest(**values)


def test_draft_totals_add_up():
    coupon = applied(percent("TEN", "10"), Decimal("180"))
    draft = asyncio.run(compose_draft(request(coupon=coupon, origin=Origin.PRODUCT)))

    assert draft.subtotal == Decimal("180")
    assert draft.shipping_cost == Decimal("20")
    assert draft.tax == Decimal("27.00")
    assert draft.discount == Decimal("18")
    assert draft.total == draft.subtotal + draft.shipping_cost + draft.tax - draft.discount
    assert draft.coupon_code == "TEN"
    assert draft.shipping_method_id == "air"
    assert draft.estimated_delivery_days == 5
    assert draft.origin is Origin.PRODUCT


def test_draft_is_stamped_once():
    draft = asyncio.run(compose_draft(request()))

    assert draft.created_at == FIXED_NOW
    assert draft.order_number == f"ORD-{int(FIXED_NOW.timestamp() * 1000)}"
    assert draft.billing_address == draft.shipping_address == ADDRESS
    assert draft.contact_info == CONTACT
    assert draft.coupon_code is None


def test_draft_matches_live_summary():
    req = request(coupon=applied(fixed("FIVE", "5"), Decimal("180")))
    draft = asyncio.run(compose_draft(req))
    summary = summarize(req.items, evaluate(req.method, req.items), req.tax_rate, req.coupon)

    assert (draft.subtotal, draft.shipping_cost, draft.tax, draft.discount, draft.total) == (
        summary.subtotal,
        summary.shipping_cost,
        summary.tax,
        summary.discount,
        summary.total,
    )


def test_draft_requires_an_available_method():
    with pytest.raises(ValueError):
        asyncio.run(compose_draft(request(method=ShippingMethod.SEA)))
    with pytest.raises(ValueError):
        asyncio.run(compose_draft(request(items=())))
