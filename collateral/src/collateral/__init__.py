"""
collateral - Collateral selection for Cardano script transactions

Picks the wallet UTXOs to put up as collateral, minimizing the ada locked in
the collateral return output.
"""

__version__ = "0.1.0"

from collateral.collateral_return import CollateralReturn, build_collateral_return
from collateral.config import CollateralSettings, get_settings
from collateral.constants import (
    MAX_CANDIDATE_UTXOS,
    MAX_COIN,
    MIN_REQUIRED_COLLATERAL,
)
from collateral.errors import (
    CollateralError,
    CollateralReturnError,
    ImpossibleError,
    InsufficientCollateralError,
)
from collateral.min_ada import (
    ada_only_min_required_value,
    collateral_return_min_ada_value,
    min_required_value,
    utxo_min_ada_value,
)
from collateral.models import (
    MultiAsset,
    TransactionInput,
    TransactionOutput,
    TransactionUnspentOutput,
    UtxoMap,
    Value,
    to_utxo_map,
    utxo_from_dict,
)
from collateral.select import (
    Candidate,
    get_wallet_collateral,
    select_collateral,
    select_collateral_with_settings,
)

__all__ = [
    "Candidate",
    "CollateralError",
    "CollateralReturn",
    "CollateralReturnError",
    "CollateralSettings",
    "ImpossibleError",
    "InsufficientCollateralError",
    "MAX_CANDIDATE_UTXOS",
    "MAX_COIN",
    "MIN_REQUIRED_COLLATERAL",
    "MultiAsset",
    "TransactionInput",
    "TransactionOutput",
    "TransactionUnspentOutput",
    "UtxoMap",
    "Value",
    "ada_only_min_required_value",
    "build_collateral_return",
    "collateral_return_min_ada_value",
    "get_settings",
    "get_wallet_collateral",
    "min_required_value",
    "select_collateral",
    "select_collateral_with_settings",
    "to_utxo_map",
    "utxo_from_dict",
    "utxo_min_ada_value",
]
