"""Unit tests for composite layouts (structs, tuples and arrays)."""

from __future__ import annotations

from typing import Annotated

import pytest
from pydantic import ValidationError

from packview import (
    U8,
    U16,
    U32,
    U64,
    AssumptionError,
    EncodeError,
    FieldContext,
    FixedBytes,
    FixedList,
    InvalidDiscriminantError,
    InvalidSizeError,
    PackedEnum,
    PackedStruct,
    PackedTuple,
    PackedUnit,
    TupleContext,
    View,
    decode,
    encode,
)


class Tag(PackedUnit):
    packed_value = b"protocol tag"


class Version(PackedEnum):
    __packed_repr__ = "u16"

    ERA1 = 0b0000_0000_0010_0001
    TESTING = 0b1111_0101_0000_1100
    TEST_NET = 0b1111_0101_1011_1101


class Hash(PackedTuple):
    digest: Annotated[bytes, FixedBytes(length=32)]


class Value(PackedTuple):
    amount: U64


class ChainPacket(PackedStruct):
    tag: Tag = Tag()
    version: Version
    hash: Hash
    value: Value


class TagStruct(PackedUnit):
    packed_value = b"struct"


class TagTuple(PackedUnit):
    packed_value = b"tuple"


class Tuple1(PackedTuple):
    value: U8


class Tuple2(PackedTuple):
    first: U32
    second: U16


class Tuple3(PackedTuple):
    first: TagStruct
    second: TagStruct
    third: TagTuple


class Struct2(PackedStruct):
    tag: TagStruct = TagStruct()
    value: U16


class Registers(PackedStruct):
    flags: U8
    values: Annotated[list[U16], FixedList(length=3)]
    pair: tuple[U8, Version]


CHAIN_VALUE = ChainPacket(version=Version.ERA1, hash=Hash(bytes(32)), value=Value(1))


class TestChainPacket:
    """Test the 54-byte packet made of a tag, an enum, a hash and a value."""

    def test_packed_size(self) -> None:
        assert ChainPacket.packed_size() == 12 + 2 + 32 + 8

    def test_encode(self, chain_packet: bytes) -> None:
        assert encode(CHAIN_VALUE) == chain_packet

    def test_decode(self, chain_packet: bytes) -> None:
        view = View.try_from_slice(ChainPacket, chain_packet)

        assert view.unpack() == CHAIN_VALUE

    def test_decode_encode_identity(self, chain_packet: bytes) -> None:
        """Test decoding then encoding reproduces the exact bytes."""
        assert encode(decode(ChainPacket, chain_packet)) == chain_packet

    def test_invalid_version(self, chain_packet: bytes) -> None:
        """Test a bad discriminant is reported with the field path."""
        data = bytearray(chain_packet)
        data[12:14] = b"\x00\x00"

        with pytest.raises(InvalidDiscriminantError) as exc_info:
            View.try_from_slice(ChainPacket, data)

        err = exc_info.value
        assert err.contexts == [FieldContext("ChainPacket", "version")]
        assert err.path == "ChainPacket.version"
        assert str(err).endswith("(at ChainPacket.version)")


class TestTuples:
    """Test positional composites."""

    def test_tuple1(self) -> None:
        assert decode(Tuple1, b"\x00") == Tuple1(0)
        assert decode(Tuple1, b"\x2a") == Tuple1(42)
        assert encode(Tuple1(42)) == b"\x2a"

    def test_tuple1_wrong_size(self) -> None:
        """Test an oversized slice fails at the boundary."""
        with pytest.raises(InvalidSizeError) as exc_info:
            View.try_from_slice(Tuple1, bytes(2))

        assert exc_info.value.contexts == []
        assert exc_info.value.expected == 1
        assert exc_info.value.received == 2

    def test_tuple2(self) -> None:
        data = bytes([0xFF, 0, 0, 0, 0, 0])

        assert decode(Tuple2, data) == Tuple2(0xFF, 0)
        assert encode(Tuple2(0xFF, 0)) == data

    def test_tuple3(self) -> None:
        value = Tuple3(TagStruct(), TagStruct(), TagTuple())

        assert decode(Tuple3, b"structstructtuple") == value
        assert encode(value) == b"structstructtuple"

    def test_tuple_error_reports_index(self) -> None:
        """Test a failing entry is reported by position."""
        with pytest.raises(AssumptionError) as exc_info:
            View.try_from_slice(Tuple3, b"structstrucTtuple")

        assert exc_info.value.contexts == [TupleContext("Tuple3", 1)]
        assert exc_info.value.path == "Tuple3[1]"

    def test_positional_construction(self) -> None:
        value = Tuple2(1, second=2)

        assert value.astuple() == (1, 2)
        assert value[1] == 2
        assert len(value) == 2

    def test_positional_construction_errors(self) -> None:
        with pytest.raises(TypeError, match="positional arguments"):
            Tuple2(1, 2, 3)
        with pytest.raises(TypeError, match="multiple values"):
            Tuple2(1, first=2)


class TestStructs:
    """Test named composites."""

    def test_struct2(self) -> None:
        value = Struct2(value=42)

        assert decode(Struct2, b"struct\x2a\x00") == value
        assert encode(value) == b"struct\x2a\x00"

    def test_fail_fast(self) -> None:
        """Test only the first failing field is reported."""
        with pytest.raises(AssumptionError) as exc_info:
            View.try_from_slice(Tuple3, b"xxxxxxyyyyyyzzzzz")

        assert exc_info.value.contexts == [TupleContext("Tuple3", 0)]

    def test_nested_path(self) -> None:
        """Test contexts are collected from the leaf up to the outer type."""

        class Outer(PackedStruct):
            inner: Tuple3
            count: U8

        with pytest.raises(AssumptionError) as exc_info:
            View.try_from_slice(Outer, b"structstructtuplE\x01")

        err = exc_info.value
        assert err.contexts == [TupleContext("Tuple3", 2), FieldContext("Outer", "inner")]
        assert err.path == "Outer.inner[2]"
        assert err.root_type == "Outer"

    def test_values_are_validated(self) -> None:
        """Test constructors reject values that do not fit their width."""
        with pytest.raises(ValidationError):
            Struct2(value=0x1_0000)

    def test_unvalidated_value_fails_to_encode(self) -> None:
        """Test values that skipped validation are caught by the encoder."""
        value = Struct2.model_construct(tag=TagStruct(), value=-1)

        with pytest.raises(EncodeError, match="Field value of Struct2"):
            encode(value)


class TestArraysAndTuples:
    """Test fixed arrays and tuple annotations inside structs."""

    def test_roundtrip(self) -> None:
        value = Registers(flags=1, values=[1, 2, 0xFFFF], pair=(7, Version.TESTING))
        data = encode(value)

        assert data == b"\x01" + b"\x01\x00\x02\x00\xff\xff" + b"\x07" + b"\x0c\xf5"
        assert decode(Registers, data) == value

    def test_array_length_validated(self) -> None:
        with pytest.raises(ValidationError):
            Registers(flags=1, values=[1, 2], pair=(7, Version.TESTING))

    def test_error_inside_tuple_annotation(self) -> None:
        data = b"\x01" + bytes(6) + b"\x07" + b"\x00\x00"

        with pytest.raises(InvalidDiscriminantError) as exc_info:
            View.try_from_slice(Registers, data)

        assert exc_info.value.path == "Registers.pair[1]"

    def test_encode_plain_annotations(self) -> None:
        """Test encode/decode of annotations that are not models."""
        pair = tuple[U16, U8]

        assert encode((1, 2), pair) == b"\x01\x00\x02"
        assert decode(pair, b"\x01\x00\x02") == (1, 2)

        with pytest.raises(EncodeError, match="expected 2 entries"):
            encode((1,), pair)
