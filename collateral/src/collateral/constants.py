"""
Cardano ledger and collateral policy constants.

Following the Babbage-era ledger rules:
- Coin amounts in outputs are unsigned 64-bit integers
- The minimum ada of an output is priced per serialized byte
"""

from __future__ import annotations

# Ledger value bounds
# Coin is encoded as uint64 in transaction outputs
MAX_COIN = 2**64 - 1  # lovelace

# Multi-asset quantities in outputs are positive uint64 as well
MAX_TOKEN_QUANTITY = 2**64 - 1

# Policy ids are Blake2b-224 script hashes
POLICY_ID_SIZE = 28  # bytes
MAX_ASSET_NAME_SIZE = 32  # bytes

# Constant overhead added to the serialized size of an output when
# computing its minimum ada (Babbage "utxoEntrySizeWithoutVal" successor)
UTXO_ENTRY_OVERHEAD = 160  # bytes

# Mainnet protocol parameter defaults
DEFAULT_COINS_PER_UTXO_BYTE = 4310  # lovelace
DEFAULT_MAX_COLLATERAL_INPUTS = 3

# Minimum collateral we reserve for a script transaction.
# This is a wallet policy, not a ledger rule: it covers the collateral
# percentage of any realistic fee.
MIN_REQUIRED_COLLATERAL = 5_000_000  # 5 ada

# Pruning bound for the collateral search.
# Only the MAX_CANDIDATE_UTXOS most valuable UTXOs are considered, keeping
# the search at 2**10 - 1 subsets in the worst case.
MAX_CANDIDATE_UTXOS = 10

# Fake base address used to size hypothetical outputs.
# Header 0x01 (base address, script payment, key stake) followed by two
# 28-byte credentials: 57 bytes, the largest Shelley address shape.
FAKE_OUTPUT_ADDRESS = "01" + "00" * POLICY_ID_SIZE + "00" * POLICY_ID_SIZE
