"""
Payload readers — storefront cart rows and product selections to LineItems.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from kungfu import Ok, Error

from tally._types import Money
from tally.cart._types import LineItem
from tally.money import normalize_amount, parse_amount, parse_days

logger = logging.getLogger(__name__)


def _optional_amount(raw: Any) -> Money | None:
    match parse_amount(raw):
        case Ok(amount):
            return amount
        case Error(_):
            return None


def _optional_days(raw: Any) -> int | None:
    match parse_days(raw):
        case Ok(days):
            return days
        case Error(_):
            return None


def _quantity(raw: Any) -> int:
    if raw is None or raw == "":
        return 1
    match parse_days(raw):
        case Ok(quantity):
            return quantity
        case Error(e):
            raise ValueError(f"invalid quantity: {e.message}")


def line_item_from_payload(
    payload: Mapping[str, Any],
    *,
    default_color: str = "Default",
    default_size: str = "One Size",
) -> LineItem:
    """
    Build a LineItem from a camelCase storefront record.

    Accepts `id` or `_id`. Raises ValueError for a record without an id or
    with a quantity below one.
    """
    item_id = payload.get("id") or payload.get("_id")
    if not item_id:
        raise ValueError("line item has no id")

    return LineItem(
        id=str(item_id),
        name=str(payload.get("name") or ""),
        unit_price=normalize_amount(payload.get("price")),
        quantity=_quantity(payload.get("quantity")),
        color_name=str(payload.get("colorName") or default_color),
        size=str(payload.get("size") or default_size),
        air_shipping_price=_optional_amount(payload.get("airShippingPrice")),
        air_shipping_duration=_optional_days(payload.get("airShippingDuration")),
        sea_shipping_price=_optional_amount(payload.get("seaShippingPrice")),
        sea_shipping_duration=_optional_days(payload.get("seaShippingDuration")),
        image=payload.get("image"),
    )


def line_items_from_cart(rows: Iterable[Mapping[str, Any]]) -> tuple[LineItem, ...]:
    """Read every cart row."""
    items = tuple(line_item_from_payload(row) for row in rows)
    logger.debug("[cart] read %d cart rows", len(items))
    return items


def line_item_from_product(product: Mapping[str, Any]) -> tuple[LineItem, ...]:
    """Read a single product + variant + quantity selection."""
    return (line_item_from_payload(product),)


__all__ = ("line_item_from_payload", "line_items_from_cart", "line_item_from_product")
