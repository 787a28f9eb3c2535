"""
WIF private key handling.

WIF layout: version(1) + secret(32) + compressed marker 0x01 (1) + checksum(4).
Only compressed keys are supported.
"""

from __future__ import annotations

import base58
from coincurve import PrivateKey

from mwcwallet.errors import InvalidKeyError
from mwcwallet.network import NetworkParams, NetworkType, get_network_params

WIF_COMPRESSED_MARKER = 0x01


def encode_wif(private_key: PrivateKey | bytes, network: NetworkType | str | NetworkParams) -> str:
    """Encode a private key as compressed WIF for the given network."""
    params = get_network_params(network)
    secret = private_key.secret if isinstance(private_key, PrivateKey) else private_key
    if len(secret) != 32:
        raise InvalidKeyError(f"Private key must be 32 bytes, got {len(secret)}")

    payload = bytes([params.wif_prefix]) + secret + bytes([WIF_COMPRESSED_MARKER])
    return base58.b58encode_check(payload).decode("ascii")


def decode_wif(wif: str, network: NetworkType | str | NetworkParams) -> PrivateKey:
    """
    Decode a compressed WIF private key.

    Raises:
        InvalidKeyError: On bad encoding, checksum, length, network or compression flag
    """
    params = get_network_params(network)
    try:
        data = base58.b58decode_check(wif)
    except ValueError as e:
        raise InvalidKeyError(f"Invalid WIF: {e}") from e

    if len(data) != 34:
        raise InvalidKeyError(f"Invalid WIF length: {len(data)}")
    if data[0] != params.wif_prefix:
        raise InvalidKeyError(
            f"WIF prefix 0x{data[0]:02x} does not match {params.network.value} "
            f"(0x{params.wif_prefix:02x})"
        )
    if data[33] != WIF_COMPRESSED_MARKER:
        raise InvalidKeyError("WIF key is not compressed")

    try:
        return PrivateKey(data[1:33])
    except ValueError as e:
        raise InvalidKeyError(f"Invalid private key: {e}") from e


def generate_wif(network: NetworkType | str | NetworkParams) -> str:
    """Generate a new random compressed WIF private key."""
    return encode_wif(PrivateKey(), network)


def privkey_to_pubkey(private_key: PrivateKey) -> bytes:
    """Compressed 33-byte public key."""
    return private_key.public_key.format(compressed=True)
