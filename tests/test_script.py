"""
Tests for script classification and script builders.
"""

import pytest

from mwcwallet.errors import InvalidLengthError, UnsupportedScriptError
from mwcwallet.wallet.script import (
    ScriptType,
    classify,
    p2pkh_script,
    p2sh_script,
    p2wpkh_script,
    push_data,
    script_hash160,
)

HASH = bytes(range(20))


class TestScriptBuilders:
    def test_p2pkh_script(self):
        script = p2pkh_script(HASH)
        assert script == bytes.fromhex("76a914") + HASH + bytes.fromhex("88ac")
        assert len(script) == 25

    def test_p2sh_script(self):
        script = p2sh_script(HASH)
        assert script == bytes.fromhex("a914") + HASH + bytes.fromhex("87")
        assert len(script) == 23

    def test_p2wpkh_script(self):
        script = p2wpkh_script(HASH)
        assert script == bytes.fromhex("0014") + HASH
        assert len(script) == 22

    @pytest.mark.parametrize("builder", [p2pkh_script, p2sh_script, p2wpkh_script])
    @pytest.mark.parametrize("size", [0, 19, 21, 32])
    def test_wrong_hash_length(self, builder, size):
        with pytest.raises(InvalidLengthError):
            builder(bytes(size))


class TestClassify:
    def test_p2pkh(self):
        assert classify(p2pkh_script(HASH)) == ScriptType.P2PKH

    def test_p2sh(self):
        assert classify(p2sh_script(HASH)) == ScriptType.P2SH

    def test_p2wpkh(self):
        assert classify(p2wpkh_script(HASH)) == ScriptType.P2WPKH

    def test_witness_flags(self):
        assert ScriptType.P2WPKH.is_witness
        assert ScriptType.P2SH.is_witness
        assert not ScriptType.P2PKH.is_witness

    @pytest.mark.parametrize(
        "script_hex",
        [
            "",
            "6a0568656c6c6f",  # OP_RETURN
            "0020" + "00" * 32,  # P2WSH
            "5120" + "00" * 32,  # P2TR
            "76a914" + "00" * 20 + "88",  # truncated P2PKH
            "a914" + "00" * 20 + "88",  # P2SH with wrong terminator
        ],
    )
    def test_unrecognized_is_rejected(self, script_hex):
        with pytest.raises(UnsupportedScriptError):
            classify(bytes.fromhex(script_hex))

    def test_non_strict_falls_back_to_p2pkh(self):
        assert classify(bytes.fromhex("6a00"), strict=False) == ScriptType.P2PKH

    def test_non_strict_still_classifies_known(self):
        assert classify(p2wpkh_script(HASH), strict=False) == ScriptType.P2WPKH


class TestScriptHash160:
    @pytest.mark.parametrize("builder", [p2pkh_script, p2sh_script, p2wpkh_script])
    def test_extracts_hash(self, builder):
        assert script_hash160(builder(HASH)) == HASH


class TestPushData:
    def test_direct_push(self):
        assert push_data(b"\xaa" * 33) == bytes([33]) + b"\xaa" * 33

    def test_pushdata1(self):
        data = b"\xbb" * 80
        assert push_data(data) == bytes([0x4C, 80]) + data

    def test_too_large(self):
        with pytest.raises(InvalidLengthError):
            push_data(bytes(300))
