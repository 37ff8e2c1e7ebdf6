"""
Minimum ada estimation for transaction outputs.

The ledger requires every output to hold at least
(UTXO_ENTRY_OVERHEAD + serialized size) * coinsPerUTxOByte lovelace. To
estimate the requirement for an output that does not exist yet, a fake output
of the same shape is built and measured.
"""

from __future__ import annotations

from collections.abc import Iterable

from collateral.constants import FAKE_OUTPUT_ADDRESS, MAX_COIN, UTXO_ENTRY_OVERHEAD
from collateral.models import (
    MultiAsset,
    TransactionOutput,
    TransactionUnspentOutput,
    Value,
)
from collateral.serialization import output_size


def utxo_min_ada_value(coins_per_utxo_byte: int, output: TransactionOutput) -> int:
    """
    Minimum lovelace the given output must hold to be valid.

    Args:
        coins_per_utxo_byte: Protocol parameter, lovelace per serialized byte
        output: Output to measure

    Returns:
        Minimum coin in lovelace
    """
    return (UTXO_ENTRY_OVERHEAD + output_size(output)) * coins_per_utxo_byte


def fake_output_with_value(value: Value) -> TransactionOutput:
    """Build a placeholder output carrying value, used only for measuring."""
    return TransactionOutput(address=FAKE_OUTPUT_ADDRESS, amount=value)


def fake_output_with_multi_assets(multi_asset: MultiAsset) -> TransactionOutput:
    """
    Build a placeholder output carrying multi_asset.

    The coin is set to MAX_COIN so the estimate covers the widest coin
    encoding the real output could end up with.
    """
    return fake_output_with_value(Value(coin=MAX_COIN, multi_asset=multi_asset))


def min_required_value(coins_per_utxo_byte: int, multi_asset: MultiAsset | None) -> int | None:
    """
    Minimum lovelace an output carrying multi_asset must hold.

    Accepts the result of MultiAsset.checked_sum directly: a None bundle means
    the tokens could not be combined, and yields None.
    """
    if multi_asset is None:
        return None
    return utxo_min_ada_value(coins_per_utxo_byte, fake_output_with_multi_assets(multi_asset))


def ada_only_min_required_value(coins_per_utxo_byte: int) -> int:
    """Minimum lovelace of an output holding only ada."""
    return utxo_min_ada_value(coins_per_utxo_byte, fake_output_with_multi_assets(MultiAsset()))


def collateral_return_min_ada_value(
    coins_per_utxo_byte: int, utxos: Iterable[TransactionUnspentOutput]
) -> int | None:
    """
    Minimum lovelace of the collateral return output for the given collateral.

    The return output has to carry every token held by the collateral UTXOs.
    Returns None when those tokens cannot be represented in a single output.
    """
    multi_asset = MultiAsset.checked_sum(utxo.multi_asset for utxo in utxos)
    return min_required_value(coins_per_utxo_byte, multi_asset)
