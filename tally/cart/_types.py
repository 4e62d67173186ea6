"""
Cart types — line items handed to checkout.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from tally._types import Money


class Origin(StrEnum):
    """Where checkout was entered from; stepping back from Contact returns here."""

    CART = "cart"
    PRODUCT = "product"


@dataclass(frozen=True, slots=True)
class LineItem:
    """
    One product + variant + quantity.

    Shipping fields hold None when the catalog has no usable value.
    """

    id: str
    name: str
    unit_price: Money
    quantity: int
    color_name: str = "Default"
    size: str = "One Size"
    air_shipping_price: Money | None = None
    air_shipping_duration: int | None = None
    sea_shipping_price: Money | None = None
    sea_shipping_duration: int | None = None
    image: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError(f"line item {self.id!r}: quantity must be an integer >= 1, got {self.quantity!r}")

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


__all__ = ("Origin", "LineItem")
