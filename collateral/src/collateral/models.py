"""
Ledger value types using Pydantic for validation.

Coin arithmetic is checked: helpers return None instead of producing a value
outside the range the ledger can represent.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from collateral.constants import (
    MAX_ASSET_NAME_SIZE,
    MAX_COIN,
    MAX_TOKEN_QUANTITY,
    POLICY_ID_SIZE,
)


def checked_add(a: int, b: int) -> int | None:
    """Add two coin amounts, returning None if the result leaves [0, MAX_COIN]."""
    result = a + b
    if result < 0 or result > MAX_COIN:
        return None
    return result


def sum_coins(amounts: Iterable[int]) -> int | None:
    """Checked sum of coin amounts. The empty sum is zero."""
    total: int | None = 0
    for amount in amounts:
        total = checked_add(total, amount)
        if total is None:
            return None
    return total


def _is_hex(value: str) -> bool:
    try:
        bytes.fromhex(value)
    except ValueError:
        return False
    return True


class TransactionInput(BaseModel):
    """Reference to a previous transaction output."""

    transaction_id: str = Field(..., pattern=r"^[0-9a-f]{64}$")
    # Output indices are encoded as uint .size 2
    index: int = Field(..., ge=0, le=65535)

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.transaction_id}#{self.index}"


class MultiAsset(BaseModel):
    """
    Native tokens carried by an output.

    Maps policy id (hex) to asset name (hex) to a positive quantity. Zero
    quantities and empty policies are dropped on construction.
    """

    assets: dict[str, dict[str, int]] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @field_validator("assets")
    @classmethod
    def validate_assets(cls, v: dict[str, dict[str, int]]) -> dict[str, dict[str, int]]:
        normalized: dict[str, dict[str, int]] = {}
        for policy_id, tokens in v.items():
            if len(policy_id) != 2 * POLICY_ID_SIZE or not _is_hex(policy_id):
                raise ValueError(f"Invalid policy id: {policy_id}")
            kept: dict[str, int] = {}
            for asset_name, quantity in tokens.items():
                if len(asset_name) > 2 * MAX_ASSET_NAME_SIZE or not _is_hex(asset_name):
                    raise ValueError(f"Invalid asset name: {asset_name!r}")
                if quantity < 0 or quantity > MAX_TOKEN_QUANTITY:
                    raise ValueError(
                        f"Asset quantity out of range for {policy_id}.{asset_name}: {quantity}"
                    )
                if quantity > 0:
                    kept[asset_name] = quantity
            if kept:
                normalized[policy_id] = kept
        return normalized

    @classmethod
    def checked_sum(cls, bundles: Iterable[MultiAsset]) -> MultiAsset | None:
        """
        Sum several bundles into one.

        Returns None if any resulting quantity exceeds what a single output can
        hold, meaning the combined tokens cannot be represented in one output.
        """
        combined: dict[str, dict[str, int]] = {}
        for bundle in bundles:
            for policy_id, tokens in bundle.assets.items():
                policy = combined.setdefault(policy_id, {})
                for asset_name, quantity in tokens.items():
                    total = policy.get(asset_name, 0) + quantity
                    if total > MAX_TOKEN_QUANTITY:
                        return None
                    policy[asset_name] = total
        return cls(assets=combined)

    def is_empty(self) -> bool:
        return not self.assets

    def count(self) -> int:
        """Number of distinct assets in the bundle."""
        return sum(len(tokens) for tokens in self.assets.values())

    def quantity(self, policy_id: str, asset_name: str = "") -> int:
        return self.assets.get(policy_id, {}).get(asset_name, 0)


class Value(BaseModel):
    """Coin plus native tokens."""

    coin: int = Field(..., ge=0, le=MAX_COIN)
    multi_asset: MultiAsset = Field(default_factory=MultiAsset)

    model_config = {"frozen": True}

    def is_ada_only(self) -> bool:
        return self.multi_asset.is_empty()


def address_has_key_payment(address: str) -> bool:
    """
    Check whether an address (hex) is locked by a verification key.

    Shelley address headers carry the address type in the high nibble; odd
    types 1, 3, 5 and 7 use a script payment credential. Byron bootstrap
    addresses (type 8) are key-locked. Reward addresses cannot hold UTXOs.
    """
    header = bytes.fromhex(address[:2])[0]
    address_type = header >> 4
    if address_type == 8:
        return True
    if address_type > 7:
        return False
    return address_type % 2 == 0


class TransactionOutput(BaseModel):
    """
    Contents of a transaction output.

    Address and datum fields are opaque to collateral selection; they only
    affect the serialized size of the output.
    """

    address: str = Field(..., min_length=2)
    amount: Value
    datum_hash: str | None = Field(default=None, pattern=r"^[0-9a-f]{64}$")
    inline_datum: str | None = None

    model_config = {"frozen": True}

    @field_validator("address", "inline_datum")
    @classmethod
    def validate_hex(cls, v: str | None) -> str | None:
        if v is not None and not _is_hex(v):
            raise ValueError(f"Expected hex-encoded bytes, got {v!r}")
        return v

    @model_validator(mode="after")
    def validate_datum(self) -> TransactionOutput:
        if self.datum_hash is not None and self.inline_datum is not None:
            raise ValueError("Output cannot carry both a datum hash and an inline datum")
        return self


class TransactionUnspentOutput(BaseModel):
    """A UTXO: an input reference together with the output it points to."""

    input: TransactionInput
    output: TransactionOutput

    model_config = {"frozen": True}

    @property
    def coin(self) -> int:
        return self.output.amount.coin

    @property
    def multi_asset(self) -> MultiAsset:
        return self.output.amount.multi_asset

    def __str__(self) -> str:
        return f"{self.input} ({self.coin} lovelace, {self.multi_asset.count()} assets)"


UtxoMap = dict[TransactionInput, TransactionOutput]


def to_utxo_map(utxos: Iterable[TransactionUnspentOutput]) -> UtxoMap:
    """Index UTXOs by their input reference."""
    result: UtxoMap = {}
    for utxo in utxos:
        if utxo.input in result:
            raise ValueError(f"Duplicate UTXO reference: {utxo.input}")
        result[utxo.input] = utxo.output
    return result


def utxo_from_dict(data: dict[str, Any]) -> TransactionUnspentOutput:
    """
    Build a UTXO from a chain indexer response (Blockfrost address UTXO shape).

    Expected keys: tx_hash, output_index, address (hex), amount as a list of
    {"unit", "quantity"} where unit is "lovelace" or policy id + asset name,
    and optionally data_hash and inline_datum.
    """
    coin = 0
    assets: dict[str, dict[str, int]] = {}
    for entry in data["amount"]:
        unit = entry["unit"]
        quantity = int(entry["quantity"])
        if unit == "lovelace":
            coin += quantity
        else:
            policy_id = unit[: 2 * POLICY_ID_SIZE]
            asset_name = unit[2 * POLICY_ID_SIZE :]
            tokens = assets.setdefault(policy_id, {})
            tokens[asset_name] = tokens.get(asset_name, 0) + quantity

    return TransactionUnspentOutput(
        input=TransactionInput(
            transaction_id=data["tx_hash"],
            index=data["output_index"],
        ),
        output=TransactionOutput(
            address=data["address"],
            amount=Value(coin=coin, multi_asset=MultiAsset(assets=assets)),
            datum_hash=data.get("data_hash"),
            inline_datum=data.get("inline_datum"),
        ),
    )
