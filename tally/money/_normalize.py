"""
Amount normalization.

Storefront prices arrive as numbers or as display strings such as
"GH₵1 250,00" or "€ 19.99". Both currency markers are equivalent here.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation

from kungfu import Result, Ok, Error

from tally._types import Money, ZERO
from tally.money._types import ParseError, ParseErrorKind

logger = logging.getLogger(__name__)

# Characters dropped before parsing: both currency markers and whitespace.
_GLYPHS = re.compile(r"(?:GH₵|€|\s)")
_LEADING_INT = re.compile(r"^[+-]?\d+")

type RawAmount = str | int | float | Decimal | None


def _strip(text: str) -> str:
    return _GLYPHS.sub("", text).replace(",", ".")


# ═══════════════════════════════════════════════════════════════════════════════
# parse_amount() — strict
# ═══════════════════════════════════════════════════════════════════════════════


def parse_amount(value: RawAmount) -> Result[Money, ParseError]:
    """
    Parse a heterogeneous price into a Decimal.

    Example:
        parse_amount("GH₵12,50")  # Ok(Decimal("12.50"))
        parse_amount("€ 7")       # Ok(Decimal("7"))
        parse_amount("free")      # Error(ParseError(INVALID, "free"))
    """
    if value is None or isinstance(value, bool):
        return Error(ParseError(ParseErrorKind.EMPTY if value is None else ParseErrorKind.INVALID, value))

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(str(value))
    else:
        text = _strip(str(value))
        if not text:
            return Error(ParseError(ParseErrorKind.EMPTY, value))
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return Error(ParseError(ParseErrorKind.INVALID, value))

    if not amount.is_finite():
        return Error(ParseError(ParseErrorKind.NON_FINITE, value))
    return Ok(amount)


def parse_days(value: RawAmount) -> Result[int, ParseError]:
    """
    Parse a duration in whole days.

    Integer semantics: fractional values truncate, trailing text is ignored
    ("5 days" → 5).
    """
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return Error(ParseError(ParseErrorKind.EMPTY, value))
        match = _LEADING_INT.match(text)
        if match is None:
            return Error(ParseError(ParseErrorKind.INVALID, value))
        return Ok(int(match.group()))

    match parse_amount(value):
        case Ok(amount):
            return Ok(int(amount))
        case Error(e):
            return Error(e)


# ═══════════════════════════════════════════════════════════════════════════════
# normalize_amount() — forgiving
# ═══════════════════════════════════════════════════════════════════════════════


def normalize_amount(value: RawAmount) -> Money:
    """
    Parse a price, falling back to zero.

    Prefer parse_amount() in new code: a silent zero hides bad catalog data.
    """
    match parse_amount(value):
        case Ok(amount):
            return amount
        case Error(e):
            logger.warning("[money] %s, using 0", e.message)
            return ZERO


__all__ = ("RawAmount", "parse_amount", "parse_days", "normalize_amount")
