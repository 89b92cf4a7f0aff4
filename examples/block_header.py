#!/usr/bin/env python3
"""Block header example for packview.

This example demonstrates:
1. Declaring an 80-byte block header layout
2. Validating bytes once and reading fields through a zero-copy view
3. Custom and suppressed accessors
4. Inspecting field offsets
"""

from __future__ import annotations

from typing import Annotated

from packview import (
    I32,
    U32,
    FixedBytes,
    PackedField,
    PackedStruct,
    PackedTuple,
    View,
    field_offsets,
)

# as in https://en.bitcoin.it/wiki/Protocol_documentation#Block_Headers
BLOCK = bytes.fromhex(
    "02000000035ab154183570282ce9af"
    "c0b494c9fc6a3cfea05aa8c1add2ec"
    "c56490000000038ba3d78e4500a5a7"
    "570dbe61960398add4410d278b21cd"
    "9708e6d9743f374d544fc055227f10"
    "01c29c1ea3"
)


class Version(PackedTuple):
    value: I32


class Hash(PackedTuple):
    digest: Annotated[bytes, FixedBytes(length=32)] = PackedField(accessor=False)

    def hex(self) -> str:
        # hashes are displayed most significant byte first
        return self.digest[::-1].hex()


class Header(PackedStruct):
    """Block header."""

    version: Version = PackedField(accessor="get_version")
    prev_block: Hash
    merkle_root: Hash
    timestamp: U32
    difficulty_target: U32
    nonce: U32


def main() -> None:
    """Run the block header example."""
    print("=" * 60)
    print("packview Block Header Example")
    print("=" * 60)
    print()

    print("1. Layout...")
    for name, (start, end) in field_offsets(Header).items():
        print(f"   {name}: bytes {start}..{end}")
    print(f"   Total: {Header.packed_size()} bytes")
    print()

    print("2. Reading fields through a view...")
    with View.try_from_slice(Header, BLOCK) as view:
        print(f"   Version: {view.get_version.value.unpack()}")
        print(f"   Timestamp: {view.timestamp.unpack()}")
        print(f"   Nonce: {view.nonce.unpack()}")
        print(f"   Accessors: {', '.join(view.accessors())}")
        header = view.unpack()
    print()

    print("3. Decoded value...")
    print(f"   Previous block: {header.prev_block.hex()}")
    print(f"   Merkle root:    {header.merkle_root.hex()}")
    print(f"   Re-encodes identically: {header.to_bytes() == BLOCK}")


if __name__ == "__main__":
    main()
