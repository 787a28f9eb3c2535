"""
Serialization primitives and a raw transaction parser.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable
from dataclasses import dataclass, field

from mwcwallet.crypto import hash256
from mwcwallet.errors import InvalidLengthError, MalformedInputError


def u32_le(n: int) -> bytes:
    return struct.pack("<I", n)


def u64_le(n: int) -> bytes:
    return struct.pack("<Q", n)


def encode_varint(value: int) -> bytes:
    """Encode integer as Bitcoin varint."""
    if value < 0:
        raise MalformedInputError(f"Cannot encode negative varint: {value}")
    if value < 0xFD:
        return bytes([value])
    if value <= 0xFFFF:
        return b"\xfd" + struct.pack("<H", value)
    if value <= 0xFFFFFFFF:
        return b"\xfe" + struct.pack("<I", value)
    return b"\xff" + struct.pack("<Q", value)


def read_varint(data: bytes, offset: int) -> tuple[int, int]:
    """Read a varint. Returns (value, new_offset)."""
    first = data[offset]
    offset += 1

    if first < 0xFD:
        return first, offset
    if first == 0xFD:
        return struct.unpack("<H", data[offset : offset + 2])[0], offset + 2
    if first == 0xFE:
        return struct.unpack("<I", data[offset : offset + 4])[0], offset + 4
    return struct.unpack("<Q", data[offset : offset + 8])[0], offset + 8


def decode_hex(value: str, what: str = "hex") -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise MalformedInputError(f"Invalid {what}: {value!r}") from e


def reverse_txid(txid: str) -> bytes:
    """Convert a display-order (big-endian) txid to wire order."""
    txid_bytes = decode_hex(txid, "txid")
    if len(txid_bytes) != 32:
        raise InvalidLengthError(f"txid must be 32 bytes, got {len(txid_bytes)}")
    return txid_bytes[::-1]


def serialize_outpoint(txid: str, vout: int) -> bytes:
    """Serialize outpoint (txid:vout)."""
    return reverse_txid(txid) + u32_le(vout)


def serialize_script(script: bytes) -> bytes:
    return encode_varint(len(script)) + script


def serialize_output(value: int, script: bytes) -> bytes:
    return u64_le(value) + serialize_script(script)


def serialize_outputs(outputs: Iterable) -> bytes:
    """Serialize an output set: varint(count) followed by each output."""
    outputs = list(outputs)
    return encode_varint(len(outputs)) + b"".join(out.serialize() for out in outputs)


def serialize_witness(items: list[bytes]) -> bytes:
    """Serialize one input's witness: varint(item count) + varint(len)+item per item."""
    return encode_varint(len(items)) + b"".join(serialize_script(item) for item in items)


@dataclass
class ParsedInput:
    txid: str
    vout: int
    script_sig: bytes
    sequence: int


@dataclass
class ParsedOutput:
    value: int
    script: bytes


@dataclass
class ParsedTransaction:
    version: int
    segwit: bool
    inputs: list[ParsedInput]
    outputs: list[ParsedOutput]
    locktime: int
    witnesses: list[list[bytes]] = field(default_factory=list)


def deserialize_transaction(tx_bytes: bytes) -> ParsedTransaction:
    """Parse a raw transaction, with or without witness data."""
    try:
        offset = 0
        version = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
        offset += 4

        segwit = False
        if tx_bytes[offset] == 0x00 and tx_bytes[offset + 1] == 0x01:
            segwit = True
            offset += 2

        input_count, offset = read_varint(tx_bytes, offset)
        inputs: list[ParsedInput] = []
        for _ in range(input_count):
            txid = tx_bytes[offset : offset + 32][::-1].hex()
            offset += 32
            vout = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
            offset += 4
            script_len, offset = read_varint(tx_bytes, offset)
            script_sig = tx_bytes[offset : offset + script_len]
            offset += script_len
            sequence = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
            offset += 4
            inputs.append(ParsedInput(txid, vout, script_sig, sequence))

        output_count, offset = read_varint(tx_bytes, offset)
        outputs: list[ParsedOutput] = []
        for _ in range(output_count):
            value = struct.unpack("<Q", tx_bytes[offset : offset + 8])[0]
            offset += 8
            script_len, offset = read_varint(tx_bytes, offset)
            script = tx_bytes[offset : offset + script_len]
            offset += script_len
            outputs.append(ParsedOutput(value, script))

        witnesses: list[list[bytes]] = []
        if segwit:
            for _ in range(input_count):
                item_count, offset = read_varint(tx_bytes, offset)
                items = []
                for _ in range(item_count):
                    item_len, offset = read_varint(tx_bytes, offset)
                    items.append(tx_bytes[offset : offset + item_len])
                    offset += item_len
                witnesses.append(items)

        locktime = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
        offset += 4
        if offset != len(tx_bytes):
            raise ValueError(f"{len(tx_bytes) - offset} trailing bytes")

        return ParsedTransaction(version, segwit, inputs, outputs, locktime, witnesses)

    except (IndexError, struct.error, ValueError) as e:
        raise MalformedInputError(f"Failed to parse transaction: {e}") from e


def serialize_stripped(tx: ParsedTransaction) -> bytes:
    """Serialize without marker, flag and witness data."""
    data = u32_le(tx.version)
    data += encode_varint(len(tx.inputs))
    for inp in tx.inputs:
        data += serialize_outpoint(inp.txid, inp.vout)
        data += serialize_script(inp.script_sig)
        data += u32_le(inp.sequence)
    data += encode_varint(len(tx.outputs))
    for out in tx.outputs:
        data += serialize_output(out.value, out.script)
    data += u32_le(tx.locktime)
    return data


def compute_txid(tx_bytes: bytes) -> str:
    """Calculate txid (double SHA256 of non-witness data, display order)."""
    stripped = serialize_stripped(deserialize_transaction(tx_bytes))
    return hash256(stripped)[::-1].hex()
