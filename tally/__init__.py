"""
tally — checkout pricing and shipping eligibility.

    from tally import shipping as SH   # Which methods can ship a cart, and at what price
    from tally import coupon as CP     # Coupon validation and discounts
    from tally import order as O       # Totals, live summary, order draft
    from tally import checkout as CO   # The four-step checkout controller
"""

from tally import money
from tally import cart
from tally import shipping
from tally import tax
from tally import coupon
from tally import order
from tally import checkout
from tally.config import Settings
from tally._types import (
    Money,
    ZERO,
    CENT,
    Lazy,
    money as to_money,
    display,
)

__version__ = "0.1.0"

__all__ = (
    "money",
    "cart",
    "shipping",
    "tax",
    "coupon",
    "order",
    "checkout",
    "Settings",
    "Money",
    "ZERO",
    "CENT",
    "Lazy",
    "to_money",
    "display",
)
