"""
Minimal PSBT-shaped skeleton.

This is NOT a BIP-174 PSBT: it carries the magic, the transaction version,
a placeholder byte per input and, per output, a placeholder byte followed
by its scriptPubKey. An external signer fills in the real maps.
"""

from __future__ import annotations

from collections.abc import Sequence

from mwcwallet.constants import PSBT_MAGIC, TX_VERSION
from mwcwallet.wallet.models import UTXO, Output
from mwcwallet.wallet.serialization import u32_le

PLACEHOLDER = b"\x00"


def create_psbt_skeleton(utxos: Sequence[UTXO], outputs: Sequence[Output]) -> bytes:
    psbt = PSBT_MAGIC + u32_le(TX_VERSION)
    psbt += PLACEHOLDER * len(utxos)
    for out in outputs:
        psbt += PLACEHOLDER + out.script
    return psbt
