"""Fixed-layout binary decoder.

This module provides the decode() and check() functions. Both validate the
full byte range before any value is built; decode() then rebuilds the value
from the already validated bytes.
"""

from __future__ import annotations

from typing import Any

from ..view import View


def check(packed_type: Any, data: Any) -> None:
    """Validate that ``data`` is a legal encoding of ``packed_type``.

    Raises:
        InvalidSizeError: If ``len(data)`` differs from the type size
        PackError: If the bytes are not a legal encoding (the error path names
            the failing field)
    """
    View.try_from_slice(packed_type, data).release()


def decode(packed_type: Any, data: Any) -> Any:
    """Decode packed bytes into a value.

    Args:
        packed_type: Packed type or annotation to decode to
        data: bytes-like object holding exactly ``size`` bytes

    Returns:
        Decoded value (model instance, enum member, int, bytes, tuple or list)

    Raises:
        SchemaError: If the type cannot be packed
        PackError: If the data does not match the layout

    Examples:
        ```python
        from packview import decode, U16

        decode(U16, b"\\x2a\\x00")     # 42
        decode(Position, data)        # Position(x=1, y=2)
        ```
    """
    with View.try_from_slice(packed_type, data) as view:
        return view.unpack()
