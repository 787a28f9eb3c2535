"""
Hash primitives used across the wallet.
"""

from __future__ import annotations

import hashlib


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def hash256(data: bytes) -> bytes:
    """SHA256(SHA256(data))"""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


double_sha256 = hash256


def ripemd160(data: bytes) -> bytes:
    try:
        h = hashlib.new("ripemd160")
    except ValueError:
        # OpenSSL 3 moved ripemd160 to the legacy provider, which is often not loaded
        from Cryptodome.Hash import RIPEMD160

        return RIPEMD160.new(data).digest()
    h.update(data)
    return h.digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))"""
    return ripemd160(hashlib.sha256(data).digest())


def checksum(data: bytes) -> bytes:
    """First 4 bytes of hash256, as used by Base58Check."""
    return hash256(data)[:4]
