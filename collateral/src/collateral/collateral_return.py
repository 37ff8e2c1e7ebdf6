"""
Collateral return and total collateral for a selected collateral set.

Since Babbage a transaction can name a collateral return output and a total
collateral amount, so that a failing script only forfeits the declared total
instead of every collateral input. The return output carries all tokens held
by the collateral plus whatever ada exceeds the required collateral, and never
less than its own minimum ada. The declared total may then fall below the
required collateral.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from collateral.errors import CollateralReturnError, expect
from collateral.min_ada import utxo_min_ada_value
from collateral.models import (
    MultiAsset,
    TransactionOutput,
    TransactionUnspentOutput,
    Value,
    sum_coins,
)


@dataclass(frozen=True)
class CollateralReturn:
    """Collateral fields to set on a transaction body."""

    total_collateral: int
    return_output: TransactionOutput | None


def build_collateral_return(
    collateral: Sequence[TransactionUnspentOutput],
    return_address: str,
    coins_per_utxo_byte: int,
    min_required_collateral: int,
) -> CollateralReturn:
    """
    Compute the collateral return output for the given collateral.

    Args:
        collateral: Selected collateral UTXOs
        return_address: Address (hex) receiving the collateral return
        coins_per_utxo_byte: Protocol parameter pricing output bytes
        min_required_collateral: Lovelace put at stake by the collateral

    Returns:
        CollateralReturn with the total collateral and an optional return
        output (None when there is nothing to give back)

    Raises:
        CollateralReturnError: If the tokens cannot be combined into one
            output or the collateral does not hold more ada than the return
            output needs
    """
    collateral_coin = expect(
        sum_coins(utxo.coin for utxo in collateral),
        "collateral_return.build_collateral_return",
        "collateral coin total overflowed",
    )
    multi_asset = MultiAsset.checked_sum(utxo.multi_asset for utxo in collateral)
    if multi_asset is None:
        raise CollateralReturnError("Collateral tokens cannot be combined into a single output")

    if multi_asset.is_empty() and collateral_coin <= min_required_collateral:
        return CollateralReturn(total_collateral=collateral_coin, return_output=None)

    # The return output keeps the excess over the required collateral, topped
    # up to its own minimum ada. Topping up can widen the coin encoding, so
    # repeat until the coin covers the minimum of the output that carries it.
    return_coin = max(collateral_coin - min_required_collateral, 0)
    while True:
        return_output = TransactionOutput(
            address=return_address,
            amount=Value(coin=return_coin, multi_asset=multi_asset),
        )
        min_ada = utxo_min_ada_value(coins_per_utxo_byte, return_output)
        if return_coin >= min_ada:
            break
        return_coin = min_ada

    total_collateral = collateral_coin - return_coin
    if total_collateral <= 0:
        raise CollateralReturnError(
            f"Collateral holds {collateral_coin} lovelace, "
            f"not more than its return output minimum of {return_coin}"
        )

    logger.debug(
        f"Collateral return: {return_coin} lovelace and {multi_asset.count()} assets, "
        f"total collateral {total_collateral}"
    )
    return CollateralReturn(total_collateral=total_collateral, return_output=return_output)
