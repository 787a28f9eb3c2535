"""
Tests for the PSBT-shaped skeleton.
"""

from conftest import TXID_A, TXID_B, make_utxo

from mwcwallet.wallet.models import Output
from mwcwallet.wallet.psbt import create_psbt_skeleton
from mwcwallet.wallet.script import p2pkh_script, p2wpkh_script


def test_skeleton_layout():
    utxos = [
        make_utxo(p2pkh_script(bytes(20)), 1_000, TXID_A, 0),
        make_utxo(p2wpkh_script(bytes(20)), 2_000, TXID_B, 1),
    ]
    outputs = [Output(500, p2wpkh_script(b"\x01" * 20)), Output(2_000, p2pkh_script(bytes(20)))]

    psbt = create_psbt_skeleton(utxos, outputs)

    expected = (
        b"psbt\xff"
        + bytes.fromhex("01000000")
        + b"\x00\x00"
        + b"\x00"
        + outputs[0].script
        + b"\x00"
        + outputs[1].script
    )
    assert psbt == expected


def test_skeleton_empty():
    assert create_psbt_skeleton([], []) == b"psbt\xff\x01\x00\x00\x00"
