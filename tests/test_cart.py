from decimal import Decimal

import pytest

from tally.cart import LineItem, line_item_from_payload, line_item_from_product, line_items_from_cart


def test_cart_row_is_normalized():
    row = {
        "_id": "abc",
        "name": "Kente scarf",
        "price": "GH₵120,50",
        "quantity": 2,
        "colorName": "Gold",
        "size": "M",
        "airShippingPrice": "20",
        "airShippingDuration": "5",
        "seaShippingPrice": "",
        "seaShippingDuration": None,
    }
    (item,) = line_items_from_cart([row])

    assert item.id == "abc"
    assert item.unit_price == Decimal("120.50")
    assert item.quantity == 2
    assert item.color_name == "Gold"
    assert item.air_shipping_price == Decimal("20")
    assert item.air_shipping_duration == 5
    assert item.sea_shipping_price is None
    assert item.sea_shipping_duration is None
    assert item.line_total == Decimal("241.00")


def test_product_selection_defaults():
    (item,) = line_item_from_product({"id": 7, "name": "Mug", "price": 15})

    assert item.id == "7"
    assert item.quantity == 1
    assert item.color_name == "Default"
    assert item.size == "One Size"


def test_unparseable_price_becomes_zero():
    item = line_item_from_payload({"id": "x", "price": "call us"})
    assert item.unit_price == Decimal("0")


def test_malformed_items_raise():
    with pytest.raises(ValueError):
        line_item_from_payload({"name": "no id"})
    with pytest.raises(ValueError):
        line_item_from_payload({"id": "x", "price": "1", "quantity": 0})
    with pytest.raises(ValueError):
        line_item_from_payload({"id": "x", "price": "1", "quantity": "many"})
    with pytest.raises(ValueError):
        LineItem("x", "x", Decimal("1"), 1.5)  # type: ignore[arg-type]
