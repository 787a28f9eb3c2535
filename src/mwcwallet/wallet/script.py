"""
Script model: classification of scriptPubKeys and canonical script builders.
"""

from __future__ import annotations

from enum import Enum

from loguru import logger

from mwcwallet.errors import InvalidLengthError, UnsupportedScriptError

OP_0 = 0x00
OP_PUSHDATA1 = 0x4C
OP_DUP = 0x76
OP_EQUAL = 0x87
OP_EQUALVERIFY = 0x88
OP_HASH160 = 0xA9
OP_CHECKSIG = 0xAC

HASH160_SIZE = 20


class ScriptType(str, Enum):
    P2PKH = "p2pkh"
    # Spent as P2SH-wrapped P2WPKH
    P2SH = "p2sh"
    P2WPKH = "p2wpkh"

    @property
    def is_witness(self) -> bool:
        return self in (ScriptType.P2SH, ScriptType.P2WPKH)


def _is_p2wpkh(script: bytes) -> bool:
    return len(script) == 22 and script[0] == OP_0 and script[1] == HASH160_SIZE


def _is_p2sh(script: bytes) -> bool:
    return (
        len(script) == 23
        and script[0] == OP_HASH160
        and script[1] == HASH160_SIZE
        and script[-1] == OP_EQUAL
    )


def _is_p2pkh(script: bytes) -> bool:
    return (
        len(script) == 25
        and script[0] == OP_DUP
        and script[1] == OP_HASH160
        and script[2] == HASH160_SIZE
        and script[-2] == OP_EQUALVERIFY
        and script[-1] == OP_CHECKSIG
    )


def classify(script: bytes, strict: bool = True) -> ScriptType:
    """
    Classify a scriptPubKey by its byte pattern.

    Args:
        script: Raw scriptPubKey bytes
        strict: Raise on unrecognized scripts. When False, unrecognized
            scripts fall back to P2PKH (never use this for signing).

    Returns:
        The script type

    Raises:
        UnsupportedScriptError: If strict and the script matches no known pattern
    """
    if _is_p2wpkh(script):
        return ScriptType.P2WPKH
    if _is_p2sh(script):
        return ScriptType.P2SH
    if _is_p2pkh(script):
        return ScriptType.P2PKH

    if strict:
        raise UnsupportedScriptError(f"Unsupported scriptPubKey: {script.hex()}")

    logger.warning(f"Unrecognized scriptPubKey {script.hex()}, treating as P2PKH")
    return ScriptType.P2PKH


def _check_hash160(hash160: bytes) -> None:
    if len(hash160) != HASH160_SIZE:
        raise InvalidLengthError(f"Expected 20-byte hash, got {len(hash160)} bytes")


def p2pkh_script(hash160: bytes) -> bytes:
    """OP_DUP OP_HASH160 <20-byte-hash> OP_EQUALVERIFY OP_CHECKSIG (25 bytes)

    Also the BIP143 scriptCode for P2WPKH spends.
    """
    _check_hash160(hash160)
    prefix = bytes([OP_DUP, OP_HASH160, HASH160_SIZE])
    return prefix + hash160 + bytes([OP_EQUALVERIFY, OP_CHECKSIG])


def p2sh_script(hash160: bytes) -> bytes:
    """OP_HASH160 <20-byte-hash> OP_EQUAL (23 bytes)"""
    _check_hash160(hash160)
    return bytes([OP_HASH160, HASH160_SIZE]) + hash160 + bytes([OP_EQUAL])


def p2wpkh_script(hash160: bytes) -> bytes:
    """OP_0 <20-byte-hash> (22 bytes)"""
    _check_hash160(hash160)
    return bytes([OP_0, HASH160_SIZE]) + hash160


def script_hash160(script: bytes) -> bytes:
    """Extract the 20-byte hash committed to by a supported scriptPubKey."""
    script_type = classify(script)
    if script_type == ScriptType.P2PKH:
        return script[3:23]
    # P2SH and P2WPKH both put the hash right after a two-byte prefix
    return script[2:22]


def push_data(data: bytes) -> bytes:
    """Minimal push of data for use in a scriptSig."""
    if len(data) < OP_PUSHDATA1:
        return bytes([len(data)]) + data
    if len(data) <= 0xFF:
        return bytes([OP_PUSHDATA1, len(data)]) + data
    raise InvalidLengthError(f"Push of {len(data)} bytes not supported")
