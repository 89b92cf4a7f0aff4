"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

CHAIN_PACKET = (
    b"protocol tag"
    + b"\x21\x00"
    + bytes(32)
    + b"\x01\x00\x00\x00\x00\x00\x00\x00"
)

BLOCK_HEADER = bytes(
    [
        0x02, 0x00, 0x00, 0x00, 0x03, 0x5A, 0xB1, 0x54, 0x18, 0x35, 0x70, 0x28, 0x2C, 0xE9, 0xAF,
        0xC0, 0xB4, 0x94, 0xC9, 0xFC, 0x6A, 0x3C, 0xFE, 0xA0, 0x5A, 0xA8, 0xC1, 0xAD, 0xD2, 0xEC,
        0xC5, 0x64, 0x90, 0x00, 0x00, 0x00, 0x03, 0x8B, 0xA3, 0xD7, 0x8E, 0x45, 0x00, 0xA5, 0xA7,
        0x57, 0x0D, 0xBE, 0x61, 0x96, 0x03, 0x98, 0xAD, 0xD4, 0x41, 0x0D, 0x27, 0x8B, 0x21, 0xCD,
        0x97, 0x08, 0xE6, 0xD9, 0x74, 0x3F, 0x37, 0x4D, 0x54, 0x4F, 0xC0, 0x55, 0x22, 0x7F, 0x10,
        0x01, 0xC2, 0x9C, 0x1E, 0xA3,
    ]
)


def build_tar_header(
    name: bytes = b"hello.txt", size: int = 12, type_flag: bytes = b"0"
) -> bytes:
    """Build a ustar archive-entry header (512 bytes)."""
    header = bytearray(512)
    header[0 : len(name)] = name
    header[100:108] = b"0000644\x00"
    header[108:116] = b"0001750\x00"
    header[116:124] = b"0001750\x00"
    header[124:136] = b"%011o\x00" % size
    header[136:148] = b"14537115720\x00"
    header[148:156] = b"        "
    header[156:157] = type_flag
    header[257:263] = b"ustar\x00"
    header[263:265] = b"00"
    header[265:269] = b"user"
    header[297:302] = b"group"
    return bytes(header)


@pytest.fixture
def chain_packet() -> bytes:
    """54-byte packet: tag, version Era1, zero hash, value 1."""
    return CHAIN_PACKET


@pytest.fixture
def block_header() -> bytes:
    """80-byte little-endian block header."""
    return BLOCK_HEADER


@pytest.fixture
def tar_header() -> bytes:
    """512-byte ustar header of a regular 12-byte file."""
    return build_tar_header()


@pytest.fixture
def tar_archive() -> bytes:
    """Archive holding one 12-byte file and one directory, with end-of-archive blocks."""
    content = b"hello world\n"
    return (
        build_tar_header(b"hello.txt", len(content), b"0")
        + content.ljust(512, b"\x00")
        + build_tar_header(b"docs/", 0, b"5")
        + bytes(1024)
    )
