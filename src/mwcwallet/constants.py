"""
Protocol and wallet policy constants.

Weight units follow BIP-141 accounting for the script types the wallet
can spend and pay to. These are protocol-derived, not tuning knobs.
"""

from __future__ import annotations

# Standard P2PKH dust limit in Bitcoin Core
STANDARD_DUST_LIMIT = 546  # satoshis

# Output values are serialized as u64
MAX_OUTPUT_VALUE = 0xFFFFFFFFFFFFFFFF

TX_VERSION = 1
SEQUENCE_FINAL = 0xFFFFFFFF
LOCKTIME = 0
SIGHASH_ALL = 0x01

SEGWIT_MARKER = 0x00
SEGWIT_FLAG = 0x01

# Input weights (outpoint, scriptSig, sequence, witness)
P2PKH_INPUT_WEIGHT = 592
P2SH_P2WPKH_INPUT_WEIGHT = 363
P2WPKH_INPUT_WEIGHT = 271

# Output weights (value, script length, scriptPubKey) * 4
P2PKH_OUTPUT_WEIGHT = 136
P2SH_OUTPUT_WEIGHT = 128
P2WPKH_OUTPUT_WEIGHT = 124

# version + locktime + input/output count varints
TX_OVERHEAD_WEIGHT = 40

WITNESS_SCALE_FACTOR = 4

PSBT_MAGIC = b"psbt\xff"
