"""Fixed-layout binary encoder.

This module provides the encode() and encode_into() functions that write the
packed representation of a value, field by field in declaration order, with
little-endian integers and no padding.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel

from ..exceptions import EncodeError, SchemaError
from .schema import compile_schema


def infer_schema_type(value: Any, packed_type: Optional[Any] = None) -> Any:
    """Return the packed type to encode ``value`` with.

    Models and enum members carry their own type; anything else (integers,
    bytes, tuples, lists) needs an explicit annotation.

    Raises:
        SchemaError: If the type cannot be inferred
    """
    if packed_type is not None:
        return packed_type
    if isinstance(value, (BaseModel, enum.Enum)):
        return type(value)
    raise SchemaError(
        f"cannot infer the packed type of a {type(value).__name__} value, pass it explicitly "
        f"(e.g. encode(value, U32))"
    )


def encode(value: Any, packed_type: Optional[Any] = None) -> bytes:
    """Encode a value to its fixed-size packed representation.

    Args:
        value: Packed model instance, enum member, or plain value
        packed_type: Packed type or annotation (required for plain values)

    Returns:
        Exactly ``size`` bytes

    Raises:
        SchemaError: If the type cannot be packed
        EncodeError: If a field value is invalid or out of bounds

    Examples:
        ```python
        from packview import PackedStruct, U16, U32, encode

        class Position(PackedStruct):
            x: U16
            y: U32

        encode(Position(x=1, y=2))   # b'\\x01\\x00\\x02\\x00\\x00\\x00'
        encode(7, U16)               # b'\\x07\\x00'
        ```
    """
    layout = compile_schema(infer_schema_type(value, packed_type))
    buffer = bytearray(layout.size)
    layout.encode(value, memoryview(buffer))
    return bytes(buffer)


def encode_into(
    value: Any, buffer: Any, packed_type: Optional[Any] = None, offset: int = 0
) -> int:
    """Encode a value into a writable buffer at ``offset``.

    Args:
        value: Value to encode
        buffer: Writable bytes-like object (bytearray, writable memoryview, ...)
        packed_type: Packed type or annotation (required for plain values)
        offset: Position of the first byte to write

    Returns:
        Offset just past the written bytes

    Raises:
        EncodeError: If the buffer is too small or the value is invalid
    """
    layout = compile_schema(infer_schema_type(value, packed_type))
    target = memoryview(buffer)
    if target.readonly:
        raise EncodeError(f"{layout.type_name}: buffer is read-only")
    if target.ndim != 1 or target.format != "B":
        target = target.cast("B")

    end = offset + layout.size
    if offset < 0 or end > len(target):
        raise EncodeError(
            f"{layout.type_name}: needs {layout.size} bytes at offset {offset}, "
            f"buffer holds {len(target)} bytes"
        )

    layout.encode(value, target[offset:end])
    return end
