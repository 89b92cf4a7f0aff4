"""Fixed-width primitive codecs.

This module provides the leaf encodings every packed layout is built from:
little-endian integers of a declared width and raw byte arrays of a declared
length. Primitives accept every byte pattern of the right length, so their
validation is limited to the length check done at the View boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Union

Buffer = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class IntRepr:
    """A fixed-width little-endian integer representation.

    Attributes:
        name: Short name (``u8``, ``i32``, ...)
        width: Size in bytes
        signed: Whether the integer uses two's complement

    Example:
        >>> U16_REPR = IntRepr("u16", 2, False)
        >>> U16_REPR.to_bytes(0x0011)
        b'\\x11\\x00'
    """

    name: str
    width: int
    signed: bool

    @property
    def min_value(self) -> int:
        if self.signed:
            return -(1 << (self.width * 8 - 1))
        return 0

    @property
    def max_value(self) -> int:
        if self.signed:
            return (1 << (self.width * 8 - 1)) - 1
        return (1 << (self.width * 8)) - 1

    def fits(self, value: int) -> bool:
        """Return True if ``value`` can be represented in this width."""
        return self.min_value <= value <= self.max_value

    def from_bytes(self, data: Buffer) -> int:
        """Decode a little-endian integer from exactly ``width`` bytes."""
        if self.width == 1 and not self.signed:
            return data[0]
        return int.from_bytes(data, "little", signed=self.signed)

    def to_bytes(self, value: int) -> bytes:
        """Encode ``value`` as ``width`` little-endian bytes.

        Raises:
            OverflowError: If value does not fit in the width
        """
        return value.to_bytes(self.width, "little", signed=self.signed)


INT_REPRS: Dict[str, IntRepr] = {
    name: IntRepr(name, width, name.startswith("i"))
    for name, width in (
        ("u8", 1),
        ("u16", 2),
        ("u32", 4),
        ("u64", 8),
        ("u128", 16),
        ("i8", 1),
        ("i16", 2),
        ("i32", 4),
        ("i64", 8),
        ("i128", 16),
    )
}


def int_repr(name: str) -> IntRepr:
    """Look up an integer representation by name.

    Raises:
        KeyError: If the name is not a supported width
    """
    return INT_REPRS[name]


def read_bytes(data: Buffer) -> bytes:
    """Copy a fixed-length byte array out of the buffer."""
    return bytes(data)


def write_bytes(value: bytes, out: memoryview) -> None:
    """Write a byte array that must exactly fill ``out``."""
    if len(value) != len(out):
        raise ValueError(f"expected {len(out)} bytes, got {len(value)} bytes")
    out[:] = value
