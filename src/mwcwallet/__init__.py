"""
mwcwallet - Transaction engine for MWC wallets

Builds and signs legacy and segwit transactions from a set of UTXOs.
"""

__version__ = "0.1.0"

from mwcwallet.constants import STANDARD_DUST_LIMIT
from mwcwallet.errors import (
    InsufficientFundsError,
    InvalidAddressError,
    InvalidKeyError,
    InvalidLengthError,
    KeyMismatchError,
    MalformedInputError,
    UnsupportedFeatureError,
    UnsupportedScriptError,
    UnsupportedWitnessVersionError,
    WalletError,
)
from mwcwallet.network import MAINNET, TESTNET, NetworkParams, NetworkType, get_network_params
from mwcwallet.wallet.address import (
    address_to_scriptpubkey,
    pubkey_to_address,
    pubkey_to_bech32,
    validate_address,
    wif_to_address,
)
from mwcwallet.wallet.builder import TxBuilder, create_signed_transaction
from mwcwallet.wallet.fees import decide_change, estimate_fee, estimate_fee_from_utxos
from mwcwallet.wallet.keys import decode_wif, encode_wif, generate_wif
from mwcwallet.wallet.models import UTXO, TxResult, parse_utxos
from mwcwallet.wallet.script import ScriptType, classify

__all__ = [
    "InsufficientFundsError",
    "InvalidAddressError",
    "InvalidKeyError",
    "InvalidLengthError",
    "KeyMismatchError",
    "MAINNET",
    "MalformedInputError",
    "NetworkParams",
    "NetworkType",
    "STANDARD_DUST_LIMIT",
    "ScriptType",
    "TESTNET",
    "TxBuilder",
    "TxResult",
    "UTXO",
    "UnsupportedFeatureError",
    "UnsupportedScriptError",
    "UnsupportedWitnessVersionError",
    "WalletError",
    "address_to_scriptpubkey",
    "classify",
    "create_signed_transaction",
    "decide_change",
    "decode_wif",
    "encode_wif",
    "estimate_fee",
    "estimate_fee_from_utxos",
    "generate_wif",
    "get_network_params",
    "parse_utxos",
    "pubkey_to_address",
    "pubkey_to_bech32",
    "validate_address",
    "wif_to_address",
]
