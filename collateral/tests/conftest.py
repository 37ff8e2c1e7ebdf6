"""
Pytest configuration and fixtures for collateral tests.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable

import pytest

from collateral.models import (
    MultiAsset,
    TransactionInput,
    TransactionOutput,
    TransactionUnspentOutput,
    Value,
)

# Enterprise key address (header type 6) on mainnet
KEY_ADDRESS = "61" + "11" * 28

# coinsPerUTxOByte on mainnet
COINS_PER_UTXO_BYTE = 4310


@pytest.fixture
def make_utxo() -> Callable[..., TransactionUnspentOutput]:
    """Factory for UTXOs with unique references."""
    counter = itertools.count()

    def _make(
        coin: int,
        assets: dict[str, dict[str, int]] | None = None,
        address: str = KEY_ADDRESS,
    ) -> TransactionUnspentOutput:
        n = next(counter)
        return TransactionUnspentOutput(
            input=TransactionInput(transaction_id=f"{n:064x}", index=n % 4),
            output=TransactionOutput(
                address=address,
                amount=Value(coin=coin, multi_asset=MultiAsset(assets=assets or {})),
            ),
        )

    return _make


@pytest.fixture
def coins_per_utxo_byte() -> int:
    return COINS_PER_UTXO_BYTE


@pytest.fixture(autouse=True)
def isolated_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep the caller's COLLATERAL_* variables and .env file out of tests."""
    for name in (
        "COLLATERAL_COINS_PER_UTXO_BYTE",
        "COLLATERAL_MAX_COLLATERAL_INPUTS",
        "COLLATERAL_MIN_REQUIRED_COLLATERAL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
