"""Binary encoding of agreement parameters and the technical and economical parameter types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_MAX_BIG_BYTES = 67


def encode_compact(value: int) -> bytes:
    """Encode a non-negative integer in compact form."""
    if value < 0:
        raise ValueError("compact integers are non-negative")
    if value < 1 << 6:
        return bytes([value << 2])
    if value < 1 << 14:
        return ((value << 2) | 0b01).to_bytes(2, "little")
    if value < 1 << 30:
        return ((value << 2) | 0b10).to_bytes(4, "little")
    length = max(4, (value.bit_length() + 7) // 8)
    if length > _MAX_BIG_BYTES:
        raise ValueError("integer too large for compact encoding")
    return bytes([((length - 4) << 2) | 0b11]) + value.to_bytes(length, "little")


def decode_compact(data: bytes) -> tuple[int, int]:
    """Decode a compact integer; return (value, bytes consumed)."""
    if not data:
        raise ValueError("no data to decode")
    mode = data[0] & 0b11
    if mode == 0b00:
        return data[0] >> 2, 1
    if mode == 0b01:
        if len(data) < 2:
            raise ValueError("truncated compact integer")
        value = int.from_bytes(data[:2], "little") >> 2
        if value < 1 << 6:
            raise ValueError("non-canonical compact integer")
        return value, 2
    if mode == 0b10:
        if len(data) < 4:
            raise ValueError("truncated compact integer")
        value = int.from_bytes(data[:4], "little") >> 2
        if value < 1 << 14:
            raise ValueError("non-canonical compact integer")
        return value, 4
    length = (data[0] >> 2) + 4
    if len(data) < 1 + length:
        raise ValueError("truncated compact integer")
    body = data[1 : 1 + length]
    value = int.from_bytes(body, "little")
    if value < 1 << 30 or body[-1] == 0:
        raise ValueError("non-canonical compact integer")
    return value, 1 + length


def encode_u32(value: int) -> bytes:
    """Encode an unsigned 32-bit integer, little endian."""
    if not 0 <= value < 1 << 32:
        raise ValueError("value out of u32 range")
    return value.to_bytes(4, "little")


def _encode_item(item: Any) -> bytes:
    if hasattr(item, "encode") and not isinstance(item, str):
        return item.encode()
    if isinstance(item, (bytes, bytearray)):
        return bytes(item)
    if isinstance(item, bool):
        return b"\x01" if item else b"\x00"
    if isinstance(item, int):
        return encode_u32(item)
    raise TypeError(f"cannot encode {type(item).__name__}")


def encode_tuple(*args: Any) -> bytes:
    """Encode a tuple as the concatenation of its encoded members.

    Members with an ``encode`` method use it, raw bytes are taken as already
    encoded, and integers are encoded as u32 indexes.
    """
    return b"".join(_encode_item(item) for item in args)


@dataclass(frozen=True)
class IPFS:
    """Technical parameter: a raw 32-byte IPFS content hash."""

    hash: bytes

    def __post_init__(self) -> None:
        raw = bytes(self.hash)
        if len(raw) != 32:
            raise ValueError("IPFS hash must be 32 bytes")
        object.__setattr__(self, "hash", raw)

    def encode(self) -> bytes:
        return self.hash


@dataclass(frozen=True)
class SimpleMarket:
    """Economical parameter: the liability has a price of execution."""

    price: int

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError("price must not be negative")

    def encode(self) -> bytes:
        return encode_compact(self.price)