"""
Wallet data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from mwcwallet.errors import MalformedInputError
from mwcwallet.wallet.serialization import reverse_txid, serialize_output


class UTXO(BaseModel):
    """A spendable output supplied by the caller. Immutable once loaded."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    txid: str = Field(..., min_length=64, max_length=64)
    vout: int = Field(..., ge=0, le=0xFFFFFFFF)
    script_pubkey: str = Field(..., alias="scriptPubKey", min_length=2)
    amount: int = Field(..., ge=0, le=0xFFFFFFFFFFFFFFFF)

    @field_validator("txid", "script_pubkey")
    @classmethod
    def validate_hex(cls, v: str) -> str:
        try:
            bytes.fromhex(v)
        except ValueError as e:
            raise ValueError(f"not valid hex: {v!r}") from e
        return v.lower()

    @property
    def script(self) -> bytes:
        return bytes.fromhex(self.script_pubkey)

    @property
    def txid_le(self) -> bytes:
        return reverse_txid(self.txid)

    @property
    def outpoint(self) -> str:
        return f"{self.txid}:{self.vout}"


_utxo_list_adapter = TypeAdapter(list[UTXO])


def parse_utxos(utxos_json: str | bytes) -> list[UTXO]:
    """Parse a JSON list of UTXO records."""
    try:
        return _utxo_list_adapter.validate_json(utxos_json)
    except ValidationError as e:
        raise MalformedInputError(f"Invalid UTXO list: {e}") from e


@dataclass(frozen=True)
class Output:
    """Transaction output to be serialized."""

    value: int
    script: bytes

    def serialize(self) -> bytes:
        return serialize_output(self.value, self.script)


@dataclass
class SignedInput:
    """A fully signed input, ready for serialization."""

    utxo: UTXO
    script_sig: bytes
    witness: list[bytes] = field(default_factory=list)


@dataclass
class TxResult:
    """Result of building and signing a transaction.

    vsize is the BIP-141 virtual size from the real weight,
    ceil((3 * stripped_size + total_size) / 4), not ceil(len(raw_tx) / 4).
    """

    raw_tx: str
    vsize: int
    effective_fee: int
    txid: str
    change: int
    has_segwit: bool
    psbt: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "raw_tx": self.raw_tx,
            "txid": self.txid,
            "vsize": self.vsize,
            "effective_fee": self.effective_fee,
            "change": self.change,
            "has_segwit": self.has_segwit,
            "psbt": self.psbt,
        }
