"""
Tests for digest signing and verification.
"""

import pytest

from mwcwallet.crypto import hash256
from mwcwallet.errors import InvalidLengthError, UnsupportedFeatureError
from mwcwallet.wallet.signing import (
    build_script_sig,
    create_witness_stack,
    sign_digest,
    verify_digest,
)

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def _der_s_value(signature: bytes) -> int:
    # 0x30 len 0x02 rlen r 0x02 slen s
    r_len = signature[3]
    s_len = signature[5 + r_len]
    s_start = 6 + r_len
    return int.from_bytes(signature[s_start : s_start + s_len], "big")


class TestSignDigest:
    def test_signature_verifies(self, private_key, pubkey):
        digest = hash256(b"sighash preimage")
        signature = sign_digest(digest, private_key)
        assert signature[-1] == 0x01
        assert signature[0] == 0x30
        assert verify_digest(digest, signature, pubkey)

    def test_deterministic(self, private_key):
        digest = hash256(b"same message")
        assert sign_digest(digest, private_key) == sign_digest(digest, private_key)

    def test_low_s(self, private_key):
        for i in range(16):
            signature = sign_digest(hash256(bytes([i])), private_key)
            assert _der_s_value(signature[:-1]) <= SECP256K1_ORDER // 2

    def test_unsupported_sighash_type(self, private_key):
        with pytest.raises(UnsupportedFeatureError):
            sign_digest(hash256(b"x"), private_key, sighash_type=0x02)

    def test_digest_length(self, private_key):
        with pytest.raises(InvalidLengthError):
            sign_digest(b"\x00" * 31, private_key)


class TestVerifyDigest:
    def test_wrong_key(self, private_key, other_pubkey):
        digest = hash256(b"payload")
        assert not verify_digest(digest, sign_digest(digest, private_key), other_pubkey)

    def test_wrong_digest(self, private_key, pubkey):
        signature = sign_digest(hash256(b"one"), private_key)
        assert not verify_digest(hash256(b"two"), signature, pubkey)

    def test_wrong_sighash_byte(self, private_key, pubkey):
        digest = hash256(b"payload")
        signature = sign_digest(digest, private_key)
        assert not verify_digest(digest, signature[:-1] + b"\x02", pubkey)

    def test_garbage_pubkey(self, private_key):
        digest = hash256(b"payload")
        assert not verify_digest(digest, sign_digest(digest, private_key), b"\x00" * 33)

    def test_empty_signature(self, pubkey):
        assert not verify_digest(hash256(b"payload"), b"", pubkey)


def test_build_script_sig(private_key, pubkey):
    signature = sign_digest(hash256(b"tx"), private_key)
    script_sig = build_script_sig(signature, pubkey)
    assert script_sig[0] == len(signature)
    assert script_sig[1 : 1 + len(signature)] == signature
    assert script_sig[1 + len(signature)] == 33
    assert script_sig[2 + len(signature) :] == pubkey


def test_create_witness_stack(pubkey):
    assert create_witness_stack(b"\x30\x01", pubkey) == [b"\x30\x01", pubkey]
