"""End-to-end tests over real-world fixed-layout formats."""

from __future__ import annotations

from typing import Annotated

import pytest

from packview import (
    I32,
    U32,
    U64,
    AssumptionError,
    FieldContext,
    FixedBytes,
    InvalidDiscriminantError,
    PackedEnum,
    PackedField,
    PackedStruct,
    PackedTuple,
    PackedUnit,
    Packet,
    View,
    decode,
    encode,
    field_offsets,
)

# Block header: https://en.bitcoin.it/wiki/Protocol_documentation#Block_Headers


class BlockVersion(PackedTuple):
    value: I32


class Hash(PackedTuple):
    digest: Annotated[bytes, FixedBytes(length=32)] = PackedField(accessor=False)

    def hex(self) -> str:
        return self.digest[::-1].hex()


class BlockHeader(PackedStruct):
    """80-byte block header."""

    version: BlockVersion = PackedField(accessor="get_version")
    prev_block: Hash
    merkle_root: Hash
    timestamp: U32
    difficulty_target: U32
    nonce: U32


# ustar archive-entry header


class FileName(PackedTuple):
    raw: Annotated[bytes, FixedBytes(length=100)]

    def text(self) -> str:
        return self.raw.rstrip(b"\x00").decode()


class OctalField(PackedTuple):
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


class UStarVersion(PackedUnit):
    packed_value = b"00"


class HeaderPadding(PackedUnit):
    packed_value = bytes(12)


class TarHeader(PackedStruct):
    """512-byte ustar header."""

    filename: FileName
    file_mode: Annotated[bytes, FixedBytes(length=8)]
    owner: U64
    group: U64
    file_size: OctalField
    last_update: OctalField
    checksum: Annotated[bytes, FixedBytes(length=8)]
    type_flag: TypeFlag
    linked_file: FileName
    ustar: UStar = UStar()
    version: UStarVersion = UStarVersion()
    user_name: Annotated[bytes, FixedBytes(length=32)]
    group_name: Annotated[bytes, FixedBytes(length=32)]
    device_major_number: Annotated[bytes, FixedBytes(length=8)]
    device_minor_number: Annotated[bytes, FixedBytes(length=8)]
    filename_prefix: Annotated[bytes, FixedBytes(length=155)]
    padding: HeaderPadding = PackedField(default=HeaderPadding(), accessor=False)


def walk_archive(data: bytes) -> list[tuple[str, int, TypeFlag]]:
    """List (name, size, type) of every entry of a ustar archive."""
    size = TarHeader.packed_size()
    entries = []
    offset = 0
    while offset + size <= len(data) and any(data[offset : offset + size]):
        with View.try_from_slice(TarHeader, memoryview(data)[offset : offset + size]) as view:
            header = view.unpack()
        file_size = header.file_size.to_size()
        entries.append((header.filename.text(), file_size, header.type_flag))
        offset += size + (file_size + size - 1) // size * size
    return entries


class TestBlockHeader:
    """Test the 80-byte block header layout."""

    def test_size(self) -> None:
        assert BlockHeader.packed_size() == 80

    def test_accessors(self, block_header: bytes) -> None:
        view = View.try_from_slice(BlockHeader, block_header)

        assert view.get_version.unpack() == BlockVersion(2)
        assert view.get_version.value.unpack() == 2
        assert view.timestamp.unpack() == int.from_bytes(block_header[68:72], "little")
        assert view.difficulty_target.unpack() == int.from_bytes(block_header[72:76], "little")
        assert view.nonce.unpack() == int.from_bytes(block_header[76:80], "little")

    def test_suppressed_hash_accessor(self, block_header: bytes) -> None:
        view = View.try_from_slice(BlockHeader, block_header)

        assert view.prev_block.accessors() == []
        with pytest.raises(AttributeError):
            view.prev_block.digest
        assert view.prev_block.unpack().digest == block_header[4:36]
        assert view.merkle_root.unpack().hex() == block_header[36:68][::-1].hex()

    def test_roundtrip(self, block_header: bytes) -> None:
        header = decode(BlockHeader, block_header)

        assert encode(header) == block_header
        assert Packet.try_from_bytes(BlockHeader, block_header).unpack() == header

    def test_offsets(self) -> None:
        assert field_offsets(BlockHeader) == {
            "version": (0, 4),
            "prev_block": (4, 36),
            "merkle_root": (36, 68),
            "timestamp": (68, 72),
            "difficulty_target": (72, 76),
            "nonce": (76, 80),
        }


class TestTarHeader:
    """Test the 512-byte ustar header layout."""

    def test_size(self) -> None:
        assert TarHeader.packed_size() == 512

    def test_parse(self, tar_header: bytes) -> None:
        header = View.try_from_slice(TarHeader, tar_header).unpack()

        assert header.filename.text() == "hello.txt"
        assert header.file_size.to_size() == 12
        assert header.type_flag is TypeFlag.NORMAL_FILE
        assert header.user_name.rstrip(b"\x00") == b"user"

    def test_field_view(self, tar_header: bytes) -> None:
        view = View.try_from_slice(TarHeader, tar_header)

        assert view.type_flag.unpack() is TypeFlag.NORMAL_FILE
        assert bytes(view.ustar) == b"ustar\x00"
        assert "padding" not in view.accessors()

    def test_roundtrip(self, tar_header: bytes) -> None:
        assert encode(decode(TarHeader, tar_header)) == tar_header

    def test_walk_archive(self, tar_archive: bytes) -> None:
        assert walk_archive(tar_archive) == [
            ("hello.txt", 12, TypeFlag.NORMAL_FILE),
            ("docs/", 0, TypeFlag.DIRECTORY),
        ]

    def test_bad_magic(self, tar_header: bytes) -> None:
        data = bytearray(tar_header)
        data[257:263] = b"ustar "

        with pytest.raises(AssumptionError) as exc_info:
            View.try_from_slice(TarHeader, data)

        assert exc_info.value.contexts == [FieldContext("TarHeader", "ustar")]

    def test_bad_type_flag(self, tar_header: bytes) -> None:
        data = bytearray(tar_header)
        data[156] = ord("Z")

        with pytest.raises(InvalidDiscriminantError) as exc_info:
            View.try_from_slice(TarHeader, data)

        err = exc_info.value
        assert err.found == ord("Z")
        assert err.options == (0x30, 0x31, 0x32, 0x33, 0x34, 0x35, 0x36, 0x37, 0x67, 0x78)
        assert err.path == "TarHeader.type_flag"

    def test_padding_checked_without_accessor(self, tar_header: bytes) -> None:
        """Test fields without accessors are still validated."""
        data = bytearray(tar_header)
        data[511] = 1

        with pytest.raises(AssumptionError) as exc_info:
            View.try_from_slice(TarHeader, data)

        assert exc_info.value.path == "TarHeader.padding"

    def test_first_failure_wins(self, tar_header: bytes) -> None:
        """Test only the first invalid field is reported."""
        data = bytearray(tar_header)
        data[156] = ord("Z")
        data[257:263] = b"ustar "

        with pytest.raises(InvalidDiscriminantError):
            View.try_from_slice(TarHeader, data)
