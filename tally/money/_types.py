"""
Money parsing types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class ParseErrorKind(Enum):
    """Why a raw amount could not be read."""

    EMPTY = auto()  # None, "" or only glyphs/whitespace
    INVALID = auto()  # not a number after stripping
    NON_FINITE = auto()  # NaN / Infinity


@dataclass(frozen=True, slots=True)
class ParseError:
    """Raw value that failed to parse into an amount."""

    kind: ParseErrorKind
    raw: object

    @property
    def message(self) -> str:
        match self.kind:
            case ParseErrorKind.EMPTY:
                return "amount is empty"
            case ParseErrorKind.INVALID:
                return f"not an amount: {self.raw!r}"
            case ParseErrorKind.NON_FINITE:
                return f"amount is not finite: {self.raw!r}"

    def __str__(self) -> str:
        return self.message


__all__ = ("ParseErrorKind", "ParseError")
