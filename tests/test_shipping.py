import asyncio
from decimal import Decimal

from tally.shipping import (
    DeliveryStatus,
    ShippingMethod,
    evaluate,
    evaluate_all,
    offered_methods,
    resolve_delivery_options,
    unshippable_items,
)
from tests.fakes import FakeShippingData, item, unwrap, unwrap_err


def test_air_counts_only_items_with_complete_data():
    items = [
        item("p1", air="20", air_days=5),
        item("p2", air="0"),
    ]
    quote = evaluate(ShippingMethod.AIR, items)

    assert quote.is_available
    assert quote.unit_price_total == Decimal("20")
    assert quote.estimated_duration_days == 5
    assert quote.contributing_items == ("p1",)
    assert quote.estimated_delivery == "5 days"


def test_sea_without_duration_is_unavailable():
    quote = evaluate(ShippingMethod.SEA, [item("p1", sea="15")])

    assert not quote.is_available
    assert quote.unit_price_total == Decimal("0")
    assert quote.estimated_duration_days == 0
    assert quote.estimated_delivery == ""


def test_price_scales_with_quantity_and_duration_is_the_longest():
    items = [
        item("p1", quantity=3, air="10", air_days=4),
        item("p2", quantity=1, air="5", air_days=9),
        item("p3", quantity=2, air="-1", air_days=2),
        item("p4", quantity=2, air="8"),
    ]
    quote = evaluate(ShippingMethod.AIR, items)

    assert quote.unit_price_total == Decimal("35")
    assert quote.estimated_duration_days == 9
    assert quote.contributing_items == ("p1", "p2")


def test_catalog_views():
    items = [item("p1", sea="12", sea_days=30), item("p2")]

    assert [q.method for q in evaluate_all(items)] == [ShippingMethod.AIR, ShippingMethod.SEA]
    assert [q.method for q in offered_methods(items)] == [ShippingMethod.SEA]
    assert unshippable_items(items) == ("p2",)


def test_method_catalog_is_closed():
    assert unwrap(ShippingMethod.parse("AIR")) is ShippingMethod.AIR
    assert unwrap(ShippingMethod.parse("sea")).carrier == "Maersk"
    assert "drone" in unwrap_err(ShippingMethod.parse("drone"))
    assert ShippingMethod.AIR.fallback_days == 7
    assert ShippingMethod.SEA.fallback_days == 30


# ═══════════════════════════════════════════════════════════════════════════════
# Delivery options
# ═══════════════════════════════════════════════════════════════════════════════


def test_ready_when_a_method_is_offered():
    options = asyncio.run(resolve_delivery_options([item(air="20", air_days=5)]))

    assert options.status is DeliveryStatus.READY
    assert [q.method for q in options.offered] == [ShippingMethod.AIR]
    assert not options.can_retry


def test_none_configured_is_not_a_connectivity_problem():
    options = asyncio.run(resolve_delivery_options([item()]))

    assert options.status is DeliveryStatus.NONE_CONFIGURED
    assert options.unshippable_items == ("p1",)
    assert not options.can_retry


def test_offline_short_circuits():
    source = FakeShippingData()
    options = asyncio.run(resolve_delivery_options([item()], refresh=source.refresh, online=False))

    assert options.status is DeliveryStatus.OFFLINE
    assert options.can_retry
    assert source.calls == 0


def test_slow_source_is_reported_offline():
    source = FakeShippingData(delay=1.0)
    options = asyncio.run(
        resolve_delivery_options([item()], refresh=source.refresh, timeout_seconds=0.01)
    )

    assert options.status is DeliveryStatus.OFFLINE
    assert options.can_retry


def test_failing_source_is_reported_failed():
    source = FakeShippingData(error=RuntimeError("catalog down"))
    options = asyncio.run(resolve_delivery_options([item()], refresh=source.refresh))

    assert options.status is DeliveryStatus.FAILED
    assert options.can_retry


def test_refreshed_data_is_used():
    source = FakeShippingData()
    options = asyncio.run(resolve_delivery_options([item()], refresh=source.refresh))

    assert options.status is DeliveryStatus.READY
    assert [q.method for q in options.offered] == [ShippingMethod.SEA]
    assert options.items[0].sea_shipping_duration == 21
