"""
In-flight guard — one pending call per concern, late answers detected.

A concern is PENDING from begin() until end(). invalidate() bumps the
concern's generation: answers for tickets issued before it are stale.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum, auto

from kungfu import Result, Ok, Error


class Concern(Enum):
    COUPON = auto()
    REGISTRATION = auto()
    DELIVERY = auto()
    TAX = auto()
    SUBMIT = auto()


@dataclass(frozen=True, slots=True)
class Ticket:
    key: Hashable
    generation: int


class InFlight:
    """
    Example:
        match guard.begin(Concern.COUPON):
            case Error(_):
                return busy()
            case Ok(ticket):
                pass
        try:
            answer = await call()
        finally:
            guard.end(ticket)
        if not guard.is_current(ticket):
            return stale()
    """

    __slots__ = ("_pending", "_generations")

    def __init__(self) -> None:
        self._pending: set[Hashable] = set()
        self._generations: dict[Hashable, int] = {}

    def is_pending(self, key: Hashable) -> bool:
        return key in self._pending

    def begin(self, key: Hashable) -> Result[Ticket, Hashable]:
        if key in self._pending:
            return Error(key)
        self._pending.add(key)
        return Ok(Ticket(key, self._generations.get(key, 0)))

    def end(self, ticket: Ticket) -> None:
        self._pending.discard(ticket.key)

    def invalidate(self, key: Hashable) -> None:
        self._generations[key] = self._generations.get(key, 0) + 1

    def is_current(self, ticket: Ticket) -> bool:
        return self._generations.get(ticket.key, 0) == ticket.generation


__all__ = ("Concern", "Ticket", "InFlight")
