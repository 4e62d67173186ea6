"""
Country directory — names the address form offers, and their codes.
"""

from __future__ import annotations

COUNTRIES: dict[str, str] = {
    "GH": "Ghana",
    "NG": "Nigeria",
    "KE": "Kenya",
    "ZA": "South Africa",
    "CI": "Côte d'Ivoire",
    "UK": "United Kingdom",
    "US": "United States",
}

DEFAULT_COUNTRY = "Ghana"

_BY_NAME = {name.casefold(): code for code, name in COUNTRIES.items()}


def country_code_for(country: str | None) -> str | None:
    """Map a country name (or an already-known code) to its code."""
    if not country:
        return None
    text = country.strip()
    if text.upper() in COUNTRIES:
        return text.upper()
    return _BY_NAME.get(text.casefold())


__all__ = ("COUNTRIES", "DEFAULT_COUNTRY", "country_code_for")
