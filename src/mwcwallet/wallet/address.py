"""
Address encoding, validation and decoding to scriptPubKey.

Supports:
- P2PKH and P2SH (Base58Check with the network's version bytes)
- P2WPKH (bech32, witness version 0, network HRP)
"""

from __future__ import annotations

import base58
import bech32

from mwcwallet.crypto import hash160
from mwcwallet.errors import (
    InvalidAddressError,
    InvalidLengthError,
    MalformedInputError,
    UnsupportedWitnessVersionError,
)
from mwcwallet.network import NetworkParams, NetworkType, get_network_params
from mwcwallet.wallet.keys import decode_wif, privkey_to_pubkey
from mwcwallet.wallet.script import (
    HASH160_SIZE,
    ScriptType,
    p2pkh_script,
    p2sh_script,
    p2wpkh_script,
)

Network = NetworkType | str | NetworkParams


def _check_pubkey(pubkey: bytes) -> None:
    if len(pubkey) != 33:
        raise InvalidLengthError(f"Invalid compressed pubkey length: {len(pubkey)}")


def is_bech32_address(address: str, network: Network) -> bool:
    params = get_network_params(network)
    return address.lower().startswith(params.bech32_hrp + "1")


def pubkey_to_address(pubkey: bytes, network: Network) -> str:
    """Legacy Base58Check P2PKH address for a compressed public key."""
    _check_pubkey(pubkey)
    params = get_network_params(network)
    payload = bytes([params.p2pkh_prefix]) + hash160(pubkey)
    return base58.b58encode_check(payload).decode("ascii")


def pubkey_to_bech32(pubkey: bytes, network: Network) -> str:
    """Native segwit (P2WPKH) address for a compressed public key."""
    _check_pubkey(pubkey)
    params = get_network_params(network)
    address = bech32.encode(params.bech32_hrp, 0, hash160(pubkey))
    if address is None:
        raise InvalidAddressError(f"Failed to encode P2WPKH address for {pubkey.hex()}")
    return address


def pubkey_to_p2sh_p2wpkh_address(pubkey: bytes, network: Network) -> str:
    """Nested segwit address: P2SH of the P2WPKH redeem script."""
    _check_pubkey(pubkey)
    params = get_network_params(network)
    redeem_script = p2wpkh_script(hash160(pubkey))
    payload = bytes([params.p2sh_prefix]) + hash160(redeem_script)
    return base58.b58encode_check(payload).decode("ascii")


def pubkey_to_scriptpubkey(pubkey: bytes, script_type: ScriptType = ScriptType.P2PKH) -> bytes:
    """scriptPubKey paying to a public key with the given script type."""
    _check_pubkey(pubkey)
    pubkey_hash = hash160(pubkey)
    if script_type == ScriptType.P2PKH:
        return p2pkh_script(pubkey_hash)
    if script_type == ScriptType.P2SH:
        return p2sh_script(hash160(p2wpkh_script(pubkey_hash)))
    return p2wpkh_script(pubkey_hash)


def wif_to_address(wif: str, network: Network, script_type: ScriptType = ScriptType.P2PKH) -> str:
    """Address owned by a WIF key."""
    pubkey = privkey_to_pubkey(decode_wif(wif, network))
    if script_type == ScriptType.P2PKH:
        return pubkey_to_address(pubkey, network)
    if script_type == ScriptType.P2SH:
        return pubkey_to_p2sh_p2wpkh_address(pubkey, network)
    return pubkey_to_bech32(pubkey, network)


def _decode_bech32(address: str, params: NetworkParams) -> bytes:
    witver, witprog = bech32.decode(params.bech32_hrp, address)
    if witver is None or witprog is None:
        raise InvalidAddressError(f"Invalid bech32 address: {address}")
    if witver != 0:
        raise UnsupportedWitnessVersionError(f"Unsupported witness version: {witver}")

    program = bytes(witprog)
    if len(program) != HASH160_SIZE:
        raise InvalidLengthError(f"Invalid P2WPKH program length: {len(program)}")
    return p2wpkh_script(program)


def _decode_base58(address: str, params: NetworkParams) -> bytes:
    try:
        decoded = base58.b58decode_check(address)
    except ValueError as e:
        raise InvalidAddressError(f"Invalid base58 address {address}: {e}") from e

    # version (1) + hash160 (20)
    if len(decoded) != 1 + HASH160_SIZE:
        raise InvalidLengthError(f"Invalid address payload length: {len(decoded)}")

    version = decoded[0]
    payload = decoded[1:]
    if version == params.p2pkh_prefix:
        return p2pkh_script(payload)
    if version == params.p2sh_prefix:
        return p2sh_script(payload)
    raise InvalidAddressError(f"Unknown address version: 0x{version:02x}")


def address_to_scriptpubkey(address: str, network: Network) -> bytes:
    """
    Convert an address to its scriptPubKey.

    Raises:
        InvalidAddressError: Bad checksum, encoding or version byte
        InvalidLengthError: Payload or witness program of the wrong size
        UnsupportedWitnessVersionError: Witness version other than 0
    """
    params = get_network_params(network)
    if is_bech32_address(address, params):
        return _decode_bech32(address, params)
    return _decode_base58(address, params)


def validate_address(address: str, network: Network) -> bool:
    """True if the address decodes to a supported scriptPubKey on this network."""
    try:
        address_to_scriptpubkey(address, network)
    except (MalformedInputError, UnsupportedWitnessVersionError):
        return False
    return True
