"""
Cart — line items entering checkout.

    from tally import cart as CT

    items = CT.line_items_from_cart(rows)          # from the cart page
    items = CT.line_item_from_product(selection)   # from a product page
"""

from tally.cart._types import Origin, LineItem
from tally.cart._payload import (
    line_item_from_payload,
    line_items_from_cart,
    line_item_from_product,
)

__all__ = (
    "Origin",
    "LineItem",
    "line_item_from_payload",
    "line_items_from_cart",
    "line_item_from_product",
)
