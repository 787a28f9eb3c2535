"""
Signature hash computation for legacy and BIP143 (segwit v0) inputs.

Both algorithms hard-code version 1, sequence 0xffffffff, locktime 0 and
SIGHASH_ALL. Other sighash flags are not supported.

Legacy: each input reveals only its own scriptPubKey, so signing n legacy
inputs is O(n^2) hashing.

BIP143: hashPrevouts, hashSequence and hashOutputs are computed once per
transaction, making each additional input O(1).
"""

from __future__ import annotations

from collections.abc import Sequence

from mwcwallet.constants import LOCKTIME, SEQUENCE_FINAL, SIGHASH_ALL, TX_VERSION
from mwcwallet.crypto import hash160, hash256
from mwcwallet.errors import MalformedInputError, UnsupportedFeatureError
from mwcwallet.wallet.models import UTXO, Output
from mwcwallet.wallet.script import ScriptType, classify, p2pkh_script
from mwcwallet.wallet.serialization import (
    encode_varint,
    serialize_outputs,
    serialize_script,
    u32_le,
    u64_le,
)


def _check_sighash_type(sighash_type: int) -> None:
    if sighash_type != SIGHASH_ALL:
        raise UnsupportedFeatureError(f"Unsupported sighash type: {sighash_type}")


def _check_index(utxos: Sequence[UTXO], input_index: int) -> None:
    if not 0 <= input_index < len(utxos):
        raise MalformedInputError(
            f"Input index {input_index} out of range for {len(utxos)} inputs"
        )


def legacy_preimage(
    utxos: Sequence[UTXO],
    input_index: int,
    outputs: Sequence[Output],
    sighash_type: int = SIGHASH_ALL,
) -> bytes:
    _check_sighash_type(sighash_type)
    _check_index(utxos, input_index)

    preimage = u32_le(TX_VERSION)
    preimage += encode_varint(len(utxos))
    for j, utxo in enumerate(utxos):
        preimage += utxo.txid_le + u32_le(utxo.vout)
        if j == input_index:
            preimage += serialize_script(utxo.script)
        else:
            preimage += b"\x00"
        preimage += u32_le(SEQUENCE_FINAL)

    preimage += serialize_outputs(outputs)
    preimage += u32_le(LOCKTIME)
    preimage += u32_le(sighash_type)
    return preimage


def legacy_sighash(
    utxos: Sequence[UTXO],
    input_index: int,
    outputs: Sequence[Output],
    sighash_type: int = SIGHASH_ALL,
) -> bytes:
    """
    Compute the pre-segwit signature hash for one input.

    Args:
        utxos: All inputs of the transaction, in order
        input_index: Index of the input being signed
        outputs: The full output set
        sighash_type: Only SIGHASH_ALL is supported

    Returns:
        32-byte digest to sign
    """
    return hash256(legacy_preimage(utxos, input_index, outputs, sighash_type))


class Bip143Hasher:
    """
    BIP143 sighash computation with cached transaction-wide hashes.

    Create one per transaction and call sighash() for each witness input.
    """

    def __init__(self, utxos: Sequence[UTXO], outputs: Sequence[Output]):
        self.utxos = list(utxos)
        self.outputs = list(outputs)

        self.hash_prevouts = hash256(
            b"".join(u.txid_le + u32_le(u.vout) for u in self.utxos)
        )
        self.hash_sequence = hash256(b"".join(u32_le(SEQUENCE_FINAL) for _ in self.utxos))
        # Standard BIP143 hashOutputs, not the raw output set
        self.hash_outputs = hash256(b"".join(out.serialize() for out in self.outputs))

    def preimage(
        self,
        input_index: int,
        script_code: bytes,
        amount: int,
        sighash_type: int = SIGHASH_ALL,
    ) -> bytes:
        _check_sighash_type(sighash_type)
        _check_index(self.utxos, input_index)

        utxo = self.utxos[input_index]
        return (
            u32_le(TX_VERSION)
            + self.hash_prevouts
            + self.hash_sequence
            + utxo.txid_le
            + u32_le(utxo.vout)
            + serialize_script(script_code)
            + u64_le(amount)
            + u32_le(SEQUENCE_FINAL)
            + self.hash_outputs
            + u32_le(LOCKTIME)
            + u32_le(sighash_type)
        )

    def sighash(
        self,
        input_index: int,
        script_code: bytes,
        amount: int,
        sighash_type: int = SIGHASH_ALL,
    ) -> bytes:
        return hash256(self.preimage(input_index, script_code, amount, sighash_type))


def bip143_sighash(
    utxos: Sequence[UTXO],
    input_index: int,
    script_code: bytes,
    amount: int,
    outputs: Sequence[Output],
    sighash_type: int = SIGHASH_ALL,
) -> bytes:
    """One-shot BIP143 sighash. Prefer Bip143Hasher when signing several inputs."""
    return Bip143Hasher(utxos, outputs).sighash(input_index, script_code, amount, sighash_type)


def script_code_for(script_pubkey: bytes, pubkey: bytes) -> bytes:
    """
    BIP143 scriptCode for a witness input.

    P2WPKH: the P2PKH script over the 20-byte witness program.
    P2SH (wrapping P2WPKH): the P2PKH script over hash160(pubkey), since the
    P2SH hash commits to the redeem script rather than the key.
    """
    script_type = classify(script_pubkey)
    if script_type == ScriptType.P2WPKH:
        return p2pkh_script(script_pubkey[2:22])
    if script_type == ScriptType.P2SH:
        return p2pkh_script(hash160(pubkey))
    raise UnsupportedFeatureError("Legacy P2PKH inputs have no BIP143 scriptCode")
