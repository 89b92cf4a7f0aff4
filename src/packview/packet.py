"""Owned packed values.

A Packet owns exactly ``size`` immutable bytes holding the encoding of a
``T``. Packets are built by encoding a value (``Packet.pack``) or by copying
validated bytes (``Packet.try_from_bytes``, ``View.to_owned``), so their
content is always a legal encoding and views over them skip validation.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Optional, TypeVar

from .codec.encoder import infer_schema_type
from .codec.layout import Layout
from .codec.schema import compile_schema
from .view import RawBytesOrdering, View

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Packet(RawBytesOrdering, Generic[T]):
    """Exclusively owned bytes of a packed ``T``.

    Example:
        >>> packet = Packet.pack(header)
        >>> len(packet) == Header.packed_size()
        True
        >>> packet.view().block_number.unpack()
        42
    """

    __slots__ = ("_layout", "_data")

    def __init__(self, layout: Layout, data: bytes) -> None:
        self._layout = layout
        self._data = data

    @classmethod
    def pack(cls, value: T, packed_type: Optional[Any] = None) -> Packet[T]:
        """Encode ``value`` into a new packet.

        Args:
            value: Value to encode
            packed_type: Packed type of the value (inferred for models and enums)

        Raises:
            EncodeError: If the value cannot be represented
            SchemaError: If the type cannot be packed
        """
        layout = compile_schema(infer_schema_type(value, packed_type))
        buffer = bytearray(layout.size)
        layout.encode(value, memoryview(buffer))
        logger.debug("packed %s into %d bytes", layout.type_name, layout.size)
        return cls(layout, bytes(buffer))

    @classmethod
    def from_view(cls, view: View[T]) -> Packet[T]:
        """Copy the bytes of a view into an owned packet."""
        return cls(view.layout, view.tobytes())

    @classmethod
    def try_from_bytes(cls, packed_type: Any, data: Any) -> Packet[T]:
        """Validate ``data`` against ``packed_type`` and copy it.

        Raises:
            InvalidSizeError: If ``len(data)`` differs from the type size
            PackError: If the bytes are not a legal encoding of the type
        """
        with View.try_from_slice(packed_type, data) as view:
            return cls.from_view(view)

    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def type_name(self) -> str:
        return self._layout.type_name

    def view(self) -> View[T]:
        """Borrow the packet's bytes as a view (no validation needed)."""
        return View(self._layout, memoryview(self._data))

    def unpack(self) -> T:
        return self._layout.decode(memoryview(self._data))

    def tobytes(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Packet[{self.type_name}]({self._data!r})"
