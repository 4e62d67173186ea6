"""
Settings — environment-driven configuration.

Values are read from `TALLY_*` environment variables. The checkout controller
receives a Settings instance explicitly; there is no module-level instance.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TALLY_")

    default_tax_rate: Decimal = Field(default=Decimal("0.15"), ge=0, le=1)
    free_shipping_code: str = "FREESHIP"
    shipping_timeout_seconds: float = Field(default=5.0, gt=0)
    min_password_length: int = Field(default=6, ge=1)
    order_number_prefix: str = "ORD-"
    currency_symbol: str = "GH₵"


__all__ = ("Settings",)
