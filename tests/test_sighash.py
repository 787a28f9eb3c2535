"""
Tests for legacy and BIP143 signature hashes.
"""

from __future__ import annotations

import pytest
from conftest import TXID_A, TXID_B, make_utxo

from mwcwallet.crypto import hash160, hash256
from mwcwallet.errors import MalformedInputError, UnsupportedFeatureError
from mwcwallet.wallet.models import Output
from mwcwallet.wallet.script import p2pkh_script, p2sh_script, p2wpkh_script
from mwcwallet.wallet.sighash import (
    Bip143Hasher,
    bip143_sighash,
    legacy_preimage,
    legacy_sighash,
    script_code_for,
)

HASH_A = bytes([0x11] * 20)
HASH_B = bytes([0x22] * 20)


@pytest.fixture
def utxos():
    return [
        make_utxo(p2pkh_script(HASH_A), 50_000, TXID_A, 0),
        make_utxo(p2wpkh_script(HASH_B), 70_000, TXID_B, 3),
    ]


@pytest.fixture
def outputs():
    return [Output(20_000, p2wpkh_script(HASH_B)), Output(99_000, p2pkh_script(HASH_A))]


def _outputs_hex(outputs: list[Output]) -> str:
    return "".join(out.serialize().hex() for out in outputs)


class TestLegacySighash:
    def test_preimage_layout(self, utxos, outputs):
        expected = (
            "01000000"  # version
            "02"
            + "a1" * 32
            + "00000000"
            + "19"
            + p2pkh_script(HASH_A).hex()  # signed input carries its scriptPubKey
            + "ffffffff"
            + "b2" * 32
            + "03000000"
            + "00"  # other inputs carry an empty script
            + "ffffffff"
            + "02"
            + _outputs_hex(outputs)
            + "00000000"  # locktime
            + "01000000"  # SIGHASH_ALL
        )
        assert legacy_preimage(utxos, 0, outputs).hex() == expected

    def test_sighash_is_hash256_of_preimage(self, utxos, outputs):
        for i in range(len(utxos)):
            assert legacy_sighash(utxos, i, outputs) == hash256(legacy_preimage(utxos, i, outputs))

    def test_depends_on_index(self, utxos, outputs):
        assert legacy_sighash(utxos, 0, outputs) != legacy_sighash(utxos, 1, outputs)

    def test_index_out_of_range(self, utxos, outputs):
        with pytest.raises(MalformedInputError):
            legacy_sighash(utxos, 2, outputs)

    def test_unsupported_sighash_type(self, utxos, outputs):
        with pytest.raises(UnsupportedFeatureError):
            legacy_sighash(utxos, 0, outputs, sighash_type=0x81)


class TestBip143Sighash:
    def test_cached_hashes(self, utxos, outputs):
        hasher = Bip143Hasher(utxos, outputs)
        prevouts = bytes.fromhex("a1" * 32 + "00000000" + "b2" * 32 + "03000000")
        assert hasher.hash_prevouts == hash256(prevouts)
        assert hasher.hash_sequence == hash256(b"\xff" * 8)
        # hashOutputs commits to the outputs without their count prefix
        assert hasher.hash_outputs == hash256(bytes.fromhex(_outputs_hex(outputs)))

    def test_preimage_layout(self, utxos, outputs):
        hasher = Bip143Hasher(utxos, outputs)
        script_code = p2pkh_script(HASH_B)
        expected = (
            "01000000"
            + hasher.hash_prevouts.hex()
            + hasher.hash_sequence.hex()
            + "b2" * 32
            + "03000000"
            + "19"
            + script_code.hex()
            + "7011010000000000"  # 70,000 sats
            + "ffffffff"
            + hasher.hash_outputs.hex()
            + "00000000"
            + "01000000"
        )
        assert hasher.preimage(1, script_code, 70_000).hex() == expected

    def test_one_shot_matches_hasher(self, utxos, outputs):
        script_code = p2pkh_script(HASH_B)
        assert bip143_sighash(utxos, 1, script_code, 70_000, outputs) == Bip143Hasher(
            utxos, outputs
        ).sighash(1, script_code, 70_000)

    def test_commits_to_amount(self, utxos, outputs):
        hasher = Bip143Hasher(utxos, outputs)
        script_code = p2pkh_script(HASH_B)
        assert hasher.sighash(1, script_code, 70_000) != hasher.sighash(1, script_code, 70_001)

    def test_commits_to_outputs(self, utxos, outputs):
        script_code = p2pkh_script(HASH_B)
        changed = [outputs[0], Output(98_999, outputs[1].script)]
        assert bip143_sighash(utxos, 1, script_code, 70_000, outputs) != bip143_sighash(
            utxos, 1, script_code, 70_000, changed
        )

    def test_index_out_of_range(self, utxos, outputs):
        with pytest.raises(MalformedInputError):
            Bip143Hasher(utxos, outputs).sighash(-1, p2pkh_script(HASH_B), 1)

    def test_unsupported_sighash_type(self, utxos, outputs):
        with pytest.raises(UnsupportedFeatureError):
            Bip143Hasher(utxos, outputs).sighash(1, p2pkh_script(HASH_B), 1, sighash_type=3)


class TestScriptCode:
    def test_p2wpkh(self, pubkey):
        script_pubkey = p2wpkh_script(HASH_B)
        assert script_code_for(script_pubkey, pubkey) == p2pkh_script(HASH_B)

    def test_p2sh_uses_pubkey_hash(self, pubkey):
        script_pubkey = p2sh_script(hash160(p2wpkh_script(hash160(pubkey))))
        assert script_code_for(script_pubkey, pubkey) == p2pkh_script(hash160(pubkey))

    def test_p2pkh_has_no_script_code(self, pubkey):
        with pytest.raises(UnsupportedFeatureError):
            script_code_for(p2pkh_script(HASH_A), pubkey)
