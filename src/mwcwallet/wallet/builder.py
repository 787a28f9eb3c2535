"""
Transaction builder: turns UTXOs, a destination and a key into a signed transaction.

Every supplied UTXO is spent. The transaction structure:
- Inputs: UTXOs in the order given
- Outputs: payment, then change to the signer (unless folded into the fee)
- Witness section: present only if at least one input is P2WPKH or
  P2SH-P2WPKH, in which case every input gets a (possibly empty) list
"""

from __future__ import annotations

from collections.abc import Sequence

from coincurve import PrivateKey
from loguru import logger

from mwcwallet.constants import (
    LOCKTIME,
    MAX_OUTPUT_VALUE,
    SEGWIT_FLAG,
    SEGWIT_MARKER,
    SEQUENCE_FINAL,
    STANDARD_DUST_LIMIT,
    TX_VERSION,
    WITNESS_SCALE_FACTOR,
)
from mwcwallet.crypto import hash160, hash256
from mwcwallet.errors import KeyMismatchError, MalformedInputError
from mwcwallet.network import NetworkParams, NetworkType, get_network_params
from mwcwallet.wallet.address import address_to_scriptpubkey, pubkey_to_scriptpubkey
from mwcwallet.wallet.fees import decide_change, weight_to_vsize
from mwcwallet.wallet.keys import decode_wif, privkey_to_pubkey
from mwcwallet.wallet.models import UTXO, Output, SignedInput, TxResult, parse_utxos
from mwcwallet.wallet.psbt import create_psbt_skeleton
from mwcwallet.wallet.script import (
    ScriptType,
    classify,
    p2wpkh_script,
    push_data,
    script_hash160,
)
from mwcwallet.wallet.serialization import (
    encode_varint,
    serialize_outputs,
    serialize_script,
    serialize_witness,
    u32_le,
)
from mwcwallet.wallet.sighash import Bip143Hasher, legacy_sighash, script_code_for
from mwcwallet.wallet.signing import (
    build_script_sig,
    create_witness_stack,
    sign_digest,
)


def check_key_controls_utxo(utxo: UTXO, script_type: ScriptType, pubkey: bytes) -> None:
    """Raise KeyMismatchError unless the pubkey can spend the UTXO's script."""
    pubkey_hash = hash160(pubkey)
    if script_type == ScriptType.P2SH:
        expected = hash160(p2wpkh_script(pubkey_hash))
    else:
        expected = pubkey_hash

    if script_hash160(utxo.script) != expected:
        raise KeyMismatchError(
            f"Key {pubkey.hex()} cannot spend {script_type.value} output {utxo.outpoint}"
        )


class TxBuilder:
    """
    Builds and signs transactions spending all supplied UTXOs.

    Holds only immutable configuration; every build() call owns its own
    output buffer and witness table.
    """

    def __init__(
        self,
        network: NetworkType | str | NetworkParams = NetworkType.MAINNET,
        dust_threshold: int = STANDARD_DUST_LIMIT,
        change_script_type: ScriptType = ScriptType.P2PKH,
        fee_rate: int | None = None,
    ):
        self.params = get_network_params(network)
        self.dust_threshold = dust_threshold
        self.change_script_type = ScriptType(change_script_type)
        self.fee_rate = fee_rate

    def build(
        self,
        utxos: Sequence[UTXO],
        to_address: str,
        amount: int,
        fee: int,
        private_key: PrivateKey,
    ) -> TxResult:
        """
        Build a fully signed transaction.

        Args:
            utxos: UTXOs to spend (all of them, in order)
            to_address: Destination address
            amount: Amount to send in satoshis
            fee: Requested fee in satoshis
            private_key: Key controlling every UTXO

        Returns:
            TxResult with raw hex, vsize and effective fee

        Raises:
            InsufficientFundsError: Before any signing if inputs don't cover amount + fee
            MalformedInputError: Bad address, hex, key/UTXO mismatch or a value above u64
            UnsupportedFeatureError: Unsupported script or witness version
        """
        if not utxos:
            raise MalformedInputError("No UTXOs supplied")
        if amount < 0 or fee < 0:
            raise MalformedInputError(f"Amount and fee must be non-negative ({amount}, {fee})")
        if amount + fee > MAX_OUTPUT_VALUE:
            raise MalformedInputError(f"Amount plus fee does not fit in u64 ({amount}, {fee})")

        total_in = sum(u.amount for u in utxos)
        pubkey = privkey_to_pubkey(private_key)
        change_script = pubkey_to_scriptpubkey(pubkey, self.change_script_type)

        # Raises InsufficientFundsError before anything is signed
        decision = decide_change(
            total_in,
            amount,
            fee,
            change_script,
            dust_threshold=self.dust_threshold,
            fee_rate=self.fee_rate,
        )
        if decision.change > MAX_OUTPUT_VALUE:
            raise MalformedInputError(f"Change of {decision.change} sats does not fit in an output")

        outputs = [Output(amount, address_to_scriptpubkey(to_address, self.params))]
        if decision.keep:
            outputs.append(Output(decision.change, change_script))

        script_types = [classify(u.script) for u in utxos]
        has_segwit = any(t.is_witness for t in script_types)

        signed_inputs = self._sign_inputs(utxos, script_types, outputs, private_key, pubkey)

        raw = self._serialize_tx(signed_inputs, outputs, has_segwit)
        stripped = self._serialize_tx(signed_inputs, outputs, include_witness=False)
        weight = len(stripped) * (WITNESS_SCALE_FACTOR - 1) + len(raw)
        vsize = weight_to_vsize(weight)
        txid = hash256(stripped)[::-1].hex()

        logger.info(
            f"Built tx {txid}: {len(utxos)} inputs, {len(outputs)} outputs, "
            f"vsize={vsize}, fee={decision.effective_fee}, segwit={has_segwit}"
        )

        return TxResult(
            raw_tx=raw.hex(),
            vsize=vsize,
            effective_fee=decision.effective_fee,
            txid=txid,
            change=decision.change,
            has_segwit=has_segwit,
            psbt=create_psbt_skeleton(utxos, outputs).hex(),
        )

    def _sign_inputs(
        self,
        utxos: Sequence[UTXO],
        script_types: list[ScriptType],
        outputs: list[Output],
        private_key: PrivateKey,
        pubkey: bytes,
    ) -> list[SignedInput]:
        bip143: Bip143Hasher | None = None
        signed: list[SignedInput] = []

        for i, (utxo, script_type) in enumerate(zip(utxos, script_types)):
            check_key_controls_utxo(utxo, script_type, pubkey)

            if script_type.is_witness:
                if bip143 is None:
                    bip143 = Bip143Hasher(utxos, outputs)
                script_code = script_code_for(utxo.script, pubkey)
                sighash = bip143.sighash(i, script_code, utxo.amount)
                signature = sign_digest(sighash, private_key)

                if script_type == ScriptType.P2SH:
                    script_sig = push_data(p2wpkh_script(hash160(pubkey)))
                else:
                    script_sig = b""
                signed.append(
                    SignedInput(utxo, script_sig, create_witness_stack(signature, pubkey))
                )
            else:
                sighash = legacy_sighash(utxos, i, outputs)
                signature = sign_digest(sighash, private_key)
                signed.append(SignedInput(utxo, build_script_sig(signature, pubkey)))

            logger.debug(f"Signed input {i} ({script_type.value}) {utxo.outpoint}")

        return signed

    def _serialize_tx(
        self,
        inputs: list[SignedInput],
        outputs: list[Output],
        include_witness: bool,
    ) -> bytes:
        """Serialize transaction to bytes."""
        result = u32_le(TX_VERSION)

        if include_witness:
            result += bytes([SEGWIT_MARKER, SEGWIT_FLAG])

        result += encode_varint(len(inputs))
        for inp in inputs:
            result += inp.utxo.txid_le + u32_le(inp.utxo.vout)
            result += serialize_script(inp.script_sig)
            result += u32_le(SEQUENCE_FINAL)

        result += serialize_outputs(outputs)

        if include_witness:
            # One list per input; legacy inputs contribute an empty list
            for inp in inputs:
                result += serialize_witness(inp.witness)

        result += u32_le(LOCKTIME)
        return result


def create_signed_transaction(
    utxos_json: str,
    to_address: str,
    amount: int,
    fee: int,
    wif: str,
    network: NetworkType | str = NetworkType.MAINNET,
    dust_threshold: int = STANDARD_DUST_LIMIT,
    change_script_type: ScriptType = ScriptType.P2PKH,
    fee_rate: int | None = None,
) -> TxResult:
    """
    Build a signed transaction from the request shape.

    Args:
        utxos_json: JSON list of {txid, vout, scriptPubKey, amount}
        to_address: Destination address
        amount: Amount in satoshis
        fee: Fee in satoshis
        wif: WIF private key controlling the UTXOs
        network: mainnet or testnet

    Returns:
        TxResult
    """
    params = get_network_params(network)
    utxos = parse_utxos(utxos_json)
    private_key = decode_wif(wif, params)

    builder = TxBuilder(
        params,
        dust_threshold=dust_threshold,
        change_script_type=change_script_type,
        fee_rate=fee_rate,
    )
    return builder.build(utxos, to_address, amount, fee, private_key)
