"""
Configuration management using pydantic-settings.

Values can be overridden with COLLATERAL_* environment variables or a .env
file, e.g. COLLATERAL_MAX_COLLATERAL_INPUTS=1.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from collateral.constants import (
    DEFAULT_COINS_PER_UTXO_BYTE,
    DEFAULT_MAX_COLLATERAL_INPUTS,
    MAX_COIN,
    MIN_REQUIRED_COLLATERAL,
)


class CollateralSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="COLLATERAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Protocol parameters
    coins_per_utxo_byte: int = Field(
        default=DEFAULT_COINS_PER_UTXO_BYTE,
        ge=0,
        description="Lovelace charged per serialized output byte (coinsPerUTxOByte)",
    )
    max_collateral_inputs: int = Field(
        default=DEFAULT_MAX_COLLATERAL_INPUTS,
        ge=0,
        description="Maximum number of collateral inputs (maxCollateralInputs)",
    )

    # Wallet policy
    min_required_collateral: int = Field(
        default=MIN_REQUIRED_COLLATERAL,
        ge=0,
        le=MAX_COIN,
        description="Minimum lovelace the selected collateral must hold (default: 5 ada)",
    )


def get_settings() -> CollateralSettings:
    return CollateralSettings()
