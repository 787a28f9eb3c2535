"""
Exception hierarchy for transaction construction.

Every error is fatal for the current call. Callers surface the error and
may retry with corrected input; nothing is recovered inside the engine.
"""

from __future__ import annotations


class WalletError(Exception):
    """Base class for all wallet engine errors."""

    pass


class MalformedInputError(WalletError):
    """Bad hex, bad JSON, or an otherwise unparseable record."""

    pass


class InvalidLengthError(MalformedInputError):
    """A byte array had the wrong length (hashes, txids, programs)."""

    pass


class InvalidAddressError(MalformedInputError):
    """Address failed to decode, had a bad checksum or an unknown prefix."""

    pass


class InvalidKeyError(MalformedInputError):
    """WIF private key failed to decode or belongs to another network."""

    pass


class KeyMismatchError(MalformedInputError):
    """The signing key does not control the UTXO being spent."""

    pass


class InsufficientFundsError(WalletError):
    """Total input value does not cover amount plus fee."""

    def __init__(self, available: int, required: int):
        self.available = available
        self.required = required
        super().__init__(f"Insufficient funds: have {available} sats, need {required} sats")


class UnsupportedFeatureError(WalletError):
    """A feature outside the supported scope was requested."""

    pass


class UnsupportedScriptError(UnsupportedFeatureError):
    """scriptPubKey is not one of P2PKH, P2SH or P2WPKH."""

    pass


class UnsupportedWitnessVersionError(UnsupportedFeatureError):
    """Only witness version 0 is supported."""

    pass
