"""
Money — currency-string normalization.

    from tally import money as M

    M.parse_amount("GH₵12,50")      # Ok(Decimal("12.50"))
    M.normalize_amount("n/a")       # Decimal("0"), logged
"""

from tally.money._types import ParseError, ParseErrorKind
from tally.money._normalize import (
    RawAmount,
    parse_amount,
    parse_days,
    normalize_amount,
)

__all__ = (
    "ParseError",
    "ParseErrorKind",
    "RawAmount",
    "parse_amount",
    "parse_days",
    "normalize_amount",
)
