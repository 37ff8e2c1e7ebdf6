"""
CBOR encoding of transaction outputs.

Only used to measure the serialized size of an output, which is what the
ledger prices when computing minimum ada. Outputs are encoded in the
post-Alonzo map format:

    {0: address, 1: value, ? 2: datum_option}

where value is a bare coin for ada-only outputs and [coin, multiasset]
otherwise.
"""

from __future__ import annotations

from typing import Any

import cbor2

from collateral.models import MultiAsset, TransactionOutput, Value

DATUM_OPTION_HASH = 0
DATUM_OPTION_INLINE = 1

# Tag 24 marks embedded CBOR data items
CBOR_TAG_EMBEDDED = 24


def multi_asset_to_primitive(multi_asset: MultiAsset) -> dict[bytes, dict[bytes, int]]:
    return {
        bytes.fromhex(policy_id): {
            bytes.fromhex(asset_name): quantity for asset_name, quantity in tokens.items()
        }
        for policy_id, tokens in multi_asset.assets.items()
    }


def value_to_primitive(value: Value) -> int | list[Any]:
    if value.is_ada_only():
        return value.coin
    return [value.coin, multi_asset_to_primitive(value.multi_asset)]


def output_to_primitive(output: TransactionOutput) -> dict[int, Any]:
    primitive: dict[int, Any] = {
        0: bytes.fromhex(output.address),
        1: value_to_primitive(output.amount),
    }
    if output.datum_hash is not None:
        primitive[2] = [DATUM_OPTION_HASH, bytes.fromhex(output.datum_hash)]
    elif output.inline_datum is not None:
        primitive[2] = [
            DATUM_OPTION_INLINE,
            cbor2.CBORTag(CBOR_TAG_EMBEDDED, bytes.fromhex(output.inline_datum)),
        ]
    return primitive


def serialize_output(output: TransactionOutput) -> bytes:
    """Encode an output to canonical CBOR."""
    return cbor2.dumps(output_to_primitive(output), canonical=True)


def output_size(output: TransactionOutput) -> int:
    """Serialized size of an output in bytes."""
    return len(serialize_output(output))
