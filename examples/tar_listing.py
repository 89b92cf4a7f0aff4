#!/usr/bin/env python3
"""Archive listing example for packview.

This example demonstrates:
1. Declaring the 512-byte ustar header with units, enums and byte arrays
2. Walking an archive by validating one header at a time
3. Reporting where a corrupted header fails

Usage:
    python tar_listing.py [archive.tar]
"""

from __future__ import annotations

import io
import sys
import tarfile
from typing import Annotated

from packview import (
    U64,
    FixedBytes,
    PackedEnum,
    PackedField,
    PackError,
    PackedStruct,
    PackedTuple,
    PackedUnit,
    View,
)


class FileName(PackedTuple):
    raw: Annotated[bytes, FixedBytes(length=100)]

    def text(self) -> str:
        return self.raw.rstrip(b"\x00").decode("utf-8", errors="replace")


class FileSize(PackedTuple):
    raw: Annotated[bytes, FixedBytes(length=12)]

    def to_size(self) -> int:
        digits = self.raw.strip(b"\x00 ")
        return int(digits, 8) if digits else 0


class TypeFlag(PackedEnum):
    __packed_repr__ = "u8"

    NORMAL_FILE = 0x30
    HARD_LINK = 0x31
    SYMBOLIC_LINK = 0x32
    CHARACTER_SPECIAL = 0x33
    BLOCK_SPECIAL = 0x34
    DIRECTORY = 0x35
    FIFO = 0x36
    CONTIGUOUS_FILE = 0x37
    GLOBAL_EXTENDED = 0x67
    EXTENDED_HEADER = 0x78


class UStar(PackedUnit):
    packed_value = b"ustar\x00"


class Version(PackedUnit):
    packed_value = b"00"


class HeaderPadding(PackedUnit):
    packed_value = bytes(12)


class Header(PackedStruct):
    """ustar archive-entry header."""

    filename: FileName
    file_mode: Annotated[bytes, FixedBytes(length=8)]
    owner: U64
    group: U64
    file_size: FileSize
    last_update: Annotated[bytes, FixedBytes(length=12)]
    checksum: Annotated[bytes, FixedBytes(length=8)]
    type_flag: TypeFlag
    linked_file: FileName
    ustar: UStar = UStar()
    version: Version = Version()
    user_name: Annotated[bytes, FixedBytes(length=32)]
    group_name: Annotated[bytes, FixedBytes(length=32)]
    device_major_number: Annotated[bytes, FixedBytes(length=8)]
    device_minor_number: Annotated[bytes, FixedBytes(length=8)]
    filename_prefix: Annotated[bytes, FixedBytes(length=155)]
    padding: HeaderPadding = PackedField(default=HeaderPadding(), accessor=False)


def sample_archive() -> bytes:
    """Build a small archive in memory."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w", format=tarfile.USTAR_FORMAT) as archive:
        for name, content in [("hello.txt", b"hello world\n"), ("notes.md", b"# notes\n" * 100)]:
            info = tarfile.TarInfo(name)
            info.size = len(content)
            archive.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def list_archive(data: bytes) -> None:
    """Print every entry of a ustar archive."""
    size = Header.packed_size()
    offset = 0
    while offset + size <= len(data) and any(data[offset : offset + size]):
        with View.try_from_slice(Header, memoryview(data)[offset : offset + size]) as view:
            header = view.unpack()

        file_size = header.file_size.to_size()
        print(f"   {header.filename.text()} ({file_size} bytes, {header.type_flag.name})")
        offset += size + (file_size + size - 1) // size * size


def main() -> None:
    """Run the archive listing example."""
    print("=" * 60)
    print("packview Archive Listing Example")
    print("=" * 60)
    print()

    if len(sys.argv) > 1:
        with open(sys.argv[1], "rb") as f:
            data = f.read()
    else:
        data = sample_archive()

    print(f"1. Listing entries (header size: {Header.packed_size()} bytes)...")
    list_archive(data)
    print()

    print("2. Corrupting the first header...")
    corrupted = bytearray(data[: Header.packed_size()])
    corrupted[156] = ord("Z")
    try:
        View.try_from_slice(Header, corrupted)
    except PackError as err:
        print(f"   Rejected at {err.path}")
        print(f"   {err}")


if __name__ == "__main__":
    main()
