"""
Fee estimation and change policy.

Weights follow BIP-141: vsize = ceil(weight / 4).
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from loguru import logger

from mwcwallet.constants import (
    P2PKH_INPUT_WEIGHT,
    P2PKH_OUTPUT_WEIGHT,
    P2SH_OUTPUT_WEIGHT,
    P2SH_P2WPKH_INPUT_WEIGHT,
    P2WPKH_INPUT_WEIGHT,
    P2WPKH_OUTPUT_WEIGHT,
    STANDARD_DUST_LIMIT,
    TX_OVERHEAD_WEIGHT,
    WITNESS_SCALE_FACTOR,
)
from mwcwallet.errors import InsufficientFundsError, MalformedInputError
from mwcwallet.wallet.models import UTXO
from mwcwallet.wallet.script import ScriptType, classify
from mwcwallet.wallet.serialization import decode_hex, deserialize_transaction, serialize_stripped

INPUT_WEIGHTS = {
    ScriptType.P2PKH: P2PKH_INPUT_WEIGHT,
    ScriptType.P2SH: P2SH_P2WPKH_INPUT_WEIGHT,
    ScriptType.P2WPKH: P2WPKH_INPUT_WEIGHT,
}

OUTPUT_WEIGHTS = {
    ScriptType.P2PKH: P2PKH_OUTPUT_WEIGHT,
    ScriptType.P2SH: P2SH_OUTPUT_WEIGHT,
    ScriptType.P2WPKH: P2WPKH_OUTPUT_WEIGHT,
}


def _as_bytes(script: bytes | str) -> bytes:
    if isinstance(script, str):
        return decode_hex(script, "script")
    return script


def input_weight(script_type: ScriptType) -> int:
    return INPUT_WEIGHTS[script_type]


def output_weight(script_type: ScriptType) -> int:
    return OUTPUT_WEIGHTS[script_type]


def weight_to_vsize(weight: int) -> int:
    return math.ceil(weight / WITNESS_SCALE_FACTOR)


def estimate_weight(
    input_scripts: Iterable[bytes | str], output_scripts: Iterable[bytes | str]
) -> int:
    """Total transaction weight for the given input and output scriptPubKeys."""
    weight = TX_OVERHEAD_WEIGHT
    for script in input_scripts:
        weight += input_weight(classify(_as_bytes(script)))
    for script in output_scripts:
        weight += output_weight(classify(_as_bytes(script)))
    return weight


def estimate_fee(
    input_scripts: Iterable[bytes | str],
    output_scripts: Iterable[bytes | str],
    sat_per_vbyte: int,
) -> int:
    """
    Estimate the fee for a transaction spending and creating the given scripts.

    Args:
        input_scripts: scriptPubKeys of the UTXOs being spent (bytes or hex)
        output_scripts: scriptPubKeys of the outputs being created (bytes or hex)
        sat_per_vbyte: Fee rate

    Returns:
        Fee in satoshis
    """
    if sat_per_vbyte < 0:
        raise MalformedInputError(f"Fee rate must be non-negative, got {sat_per_vbyte}")
    vsize = weight_to_vsize(estimate_weight(input_scripts, output_scripts))
    return vsize * sat_per_vbyte


def estimate_fee_from_utxos(
    utxos: Sequence[UTXO], output_scripts: Iterable[bytes | str], sat_per_vbyte: int
) -> int:
    return estimate_fee([u.script for u in utxos], output_scripts, sat_per_vbyte)


@dataclass(frozen=True)
class ChangeDecision:
    change: int
    effective_fee: int
    keep: bool


def decide_change(
    total_in: int,
    amount: int,
    fee: int,
    change_script: bytes,
    dust_threshold: int = STANDARD_DUST_LIMIT,
    fee_rate: int | None = None,
) -> ChangeDecision:
    """
    Decide whether leftover value becomes a change output or goes to fees.

    Change is folded into the fee when it is below the dust threshold or,
    if a fee rate is given, when it does not exceed the cost of adding its
    own output.

    Raises:
        InsufficientFundsError: If total_in < amount + fee
    """
    required = amount + fee
    if total_in < required:
        raise InsufficientFundsError(total_in, required)

    change = total_in - required
    if change == 0:
        return ChangeDecision(change=0, effective_fee=fee, keep=False)

    uneconomic = False
    if fee_rate is not None:
        output_cost = weight_to_vsize(output_weight(classify(change_script))) * fee_rate
        uneconomic = change <= output_cost

    if change < dust_threshold or uneconomic:
        logger.debug(f"Folding {change} sats of change into fee (dust threshold {dust_threshold})")
        return ChangeDecision(change=0, effective_fee=fee + change, keep=False)

    return ChangeDecision(change=change, effective_fee=fee, keep=True)


def compute_vsize(tx_bytes: bytes) -> int:
    """BIP-141 virtual size of a serialized transaction."""
    stripped_size = len(serialize_stripped(deserialize_transaction(tx_bytes)))
    weight = stripped_size * (WITNESS_SCALE_FACTOR - 1) + len(tx_bytes)
    return weight_to_vsize(weight)
