"""
Pytest configuration and fixtures for wallet tests.
"""

from __future__ import annotations

import pytest
from coincurve import PrivateKey

from mwcwallet.network import MAINNET, NetworkParams
from mwcwallet.wallet.address import pubkey_to_scriptpubkey
from mwcwallet.wallet.models import UTXO
from mwcwallet.wallet.script import ScriptType

# secp256k1 generator point G (private key 1)
GENERATOR_PUBKEY_HEX = "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
GENERATOR_HASH160_HEX = "751e76e8199196d454941c45d1b3a323f1433bd6"

TXID_A = "a1" * 32
TXID_B = "b2" * 32


def make_utxo(script: bytes, amount: int, txid: str = TXID_A, vout: int = 0) -> UTXO:
    return UTXO(txid=txid, vout=vout, scriptPubKey=script.hex(), amount=amount)


@pytest.fixture
def network() -> NetworkParams:
    return MAINNET


@pytest.fixture
def private_key() -> PrivateKey:
    """Deterministic signing key (not for production use!)."""
    return PrivateKey((1).to_bytes(32, "big"))


@pytest.fixture
def pubkey(private_key: PrivateKey) -> bytes:
    return private_key.public_key.format(compressed=True)


@pytest.fixture
def other_key() -> PrivateKey:
    return PrivateKey((2).to_bytes(32, "big"))


@pytest.fixture
def other_pubkey(other_key: PrivateKey) -> bytes:
    return other_key.public_key.format(compressed=True)


@pytest.fixture
def p2pkh_utxo(pubkey: bytes) -> UTXO:
    return make_utxo(pubkey_to_scriptpubkey(pubkey, ScriptType.P2PKH), 50_000, TXID_A, 0)


@pytest.fixture
def p2wpkh_utxo(pubkey: bytes) -> UTXO:
    return make_utxo(pubkey_to_scriptpubkey(pubkey, ScriptType.P2WPKH), 70_000, TXID_B, 1)


@pytest.fixture
def p2sh_utxo(pubkey: bytes) -> UTXO:
    return make_utxo(pubkey_to_scriptpubkey(pubkey, ScriptType.P2SH), 60_000, TXID_B, 2)
