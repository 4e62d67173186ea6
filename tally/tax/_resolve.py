"""
Tax resolution.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from tally.tax._types import TaxTable

logger = logging.getLogger(__name__)


def resolve_tax_rate(
    country_code: str | None,
    table: TaxTable,
    default_rate: Decimal,
) -> Decimal:
    """
    Effective tax rate for a destination.

    The country's entry if present and active, otherwise the default.
    No country (address not entered yet) always yields the default.
    """
    if not country_code:
        return default_rate

    entry = table.get(country_code)
    if entry is None or not entry.is_active:
        logger.debug("[tax] no active rate for %s, using default %s", country_code, default_rate)
        return default_rate
    return entry.rate


__all__ = ("resolve_tax_rate",)
