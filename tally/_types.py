"""
Core types for tally.

Re-exports from kungfu/combinators + money aliases.
"""

from __future__ import annotations

from decimal import Decimal

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Money = Decimal
"""Canonical decimal amount. Never a float."""

ZERO: Money = Decimal("0")
CENT: Money = Decimal("0.01")

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async computation that may fail."""


def money(value: int | str | Decimal) -> Money:
    """Build a Money amount from an exact literal."""
    return value if isinstance(value, Decimal) else Decimal(value)


def display(amount: Money) -> str:
    """Two-place rendering for human-readable messages."""
    return f"{amount.quantize(CENT):.2f}"


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Money
    "Money",
    "ZERO",
    "CENT",
    "Lazy",
    "money",
    "display",
)
