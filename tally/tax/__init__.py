"""
Tax — effective rate per destination country.

    from tally import tax as T

    rate = T.resolve_tax_rate(T.country_code_for("Ghana"), table, Decimal("0.15"))
"""

from tally.tax._types import TaxRate, TaxTable
from tally.tax._countries import COUNTRIES, DEFAULT_COUNTRY, country_code_for
from tally.tax._resolve import resolve_tax_rate

__all__ = (
    "TaxRate",
    "TaxTable",
    "COUNTRIES",
    "DEFAULT_COUNTRY",
    "country_code_for",
    "resolve_tax_rate",
)
