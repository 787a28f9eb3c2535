"""
Network parameters: address version bytes and bech32 prefixes.

Parameters are immutable values passed explicitly through every call, so
mainnet and testnet constructions can run side by side.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from mwcwallet.errors import MalformedInputError


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


class NetworkParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    network: NetworkType
    p2pkh_prefix: int = Field(..., ge=0, le=255)
    p2sh_prefix: int = Field(..., ge=0, le=255)
    wif_prefix: int = Field(..., ge=0, le=255)
    bech32_hrp: str = Field(..., min_length=1, max_length=83)


MAINNET = NetworkParams(
    network=NetworkType.MAINNET,
    p2pkh_prefix=0x14,
    p2sh_prefix=0x0A,
    wif_prefix=0x7B,
    bech32_hrp="mwc",
)

TESTNET = NetworkParams(
    network=NetworkType.TESTNET,
    p2pkh_prefix=0x53,
    p2sh_prefix=0xC5,
    wif_prefix=0xF0,
    bech32_hrp="tmwc",
)


def get_network_params(network: NetworkType | str | NetworkParams) -> NetworkParams:
    """Resolve a network selector to its parameters."""
    if isinstance(network, NetworkParams):
        return network
    try:
        network = NetworkType(network)
    except ValueError as e:
        raise MalformedInputError(f"Unknown network: {network}") from e
    if network == NetworkType.MAINNET:
        return MAINNET
    return TESTNET
