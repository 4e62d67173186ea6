"""
Tax types.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class TaxRate:
    """A configured country rate. `rate` is a fraction in [0, 1]."""

    country_code: str
    rate: Decimal
    is_active: bool = True

    def __post_init__(self) -> None:
        if not Decimal(0) <= self.rate <= Decimal(1):
            raise ValueError(f"tax rate for {self.country_code} must be within 0..1, got {self.rate}")


type TaxTable = Mapping[str, TaxRate]
"""Country code → configured rate."""


__all__ = ("TaxRate", "TaxTable")
