"""
ECDSA signing and verification of sighash digests.
"""

from __future__ import annotations

from coincurve import PrivateKey, PublicKey

from mwcwallet.constants import SIGHASH_ALL
from mwcwallet.errors import InvalidLengthError, UnsupportedFeatureError
from mwcwallet.wallet.script import push_data


def sign_digest(digest: bytes, private_key: PrivateKey, sighash_type: int = SIGHASH_ALL) -> bytes:
    """Sign a sighash digest using coincurve.

    libsecp256k1 uses RFC6979 nonces and always produces low-S signatures,
    so the result is deterministic and canonical.

    Args:
        digest: 32-byte sighash (already double-SHA256)
        private_key: coincurve PrivateKey instance
        sighash_type: Only SIGHASH_ALL is supported

    Returns:
        DER-encoded signature with sighash type byte appended
    """
    if sighash_type != SIGHASH_ALL:
        raise UnsupportedFeatureError(f"Unsupported sighash type: {sighash_type}")
    if len(digest) != 32:
        raise InvalidLengthError(f"Sighash must be 32 bytes, got {len(digest)}")

    # coincurve's sign() with hasher=None skips hashing
    signature = private_key.sign(digest, hasher=None)
    return signature + bytes([sighash_type])


def verify_digest(digest: bytes, signature: bytes, pubkey: bytes) -> bool:
    """Verify a signature (with trailing sighash byte) against a sighash digest."""
    if not signature or signature[-1] != SIGHASH_ALL:
        return False
    try:
        return PublicKey(pubkey).verify(signature[:-1], digest, hasher=None)
    except (ValueError, TypeError):
        return False


def build_script_sig(signature: bytes, pubkey: bytes) -> bytes:
    """scriptSig for a P2PKH spend: <sig> <pubkey>"""
    return push_data(signature) + push_data(pubkey)


def create_witness_stack(signature: bytes, pubkey_bytes: bytes) -> list[bytes]:
    return [signature, pubkey_bytes]
