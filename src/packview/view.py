"""Zero-copy validated views over packed bytes.

A View is a read-only handle over exactly ``size`` bytes that already passed
the layout's ``check``. Accessing a field of a view returns another view over
the field's sub-range: nothing is copied and nothing is validated twice.

Views borrow their buffer. The handle stays valid until ``release()`` is
called (or the ``with`` block that owns it exits); after that every operation
raises ``ValueError`` the same way a released ``memoryview`` does.

Example:
    >>> with Header.view(data) as header:
    ...     header.block_number.unpack()
    42
"""

from __future__ import annotations

import abc
import functools
import logging
from typing import TYPE_CHECKING, Any, Generic, Iterator, List, Optional, TypeVar

from .codec.layout import ArrayLayout, CompositeLayout, Layout
from .codec.schema import compile_schema
from .exceptions import InvalidSizeError, PackError

if TYPE_CHECKING:
    from .packet import Packet

logger = logging.getLogger(__name__)

T = TypeVar("T")


def as_buffer(data: Any) -> memoryview:
    """Return a read-only, one-dimensional byte memoryview over ``data``.

    Raises:
        TypeError: If data does not support the buffer protocol
    """
    buffer = memoryview(data)
    if buffer.ndim != 1 or buffer.format != "B":
        buffer = buffer.cast("B")
    return buffer.toreadonly()


@functools.total_ordering
class RawBytesOrdering(abc.ABC):
    """Equality, ordering and hashing over the raw packed bytes.

    Two handles compare equal when their bytes are equal, whatever type they
    were validated against. Plain ``bytes`` objects compare the same way.
    """

    __slots__ = ()

    @abc.abstractmethod
    def tobytes(self) -> bytes:
        """Return a copy of the packed bytes."""

    def _other_bytes(self, other: Any) -> Optional[bytes]:
        if isinstance(other, RawBytesOrdering):
            return other.tobytes()
        if isinstance(other, (bytes, bytearray, memoryview)):
            return bytes(other)
        return None

    def __eq__(self, other: Any) -> bool:
        raw = self._other_bytes(other)
        if raw is None:
            return NotImplemented
        return self.tobytes() == raw

    def __lt__(self, other: Any) -> bool:
        raw = self._other_bytes(other)
        if raw is None:
            return NotImplemented
        return self.tobytes() < raw

    def __hash__(self) -> int:
        return hash(self.tobytes())

    def __bytes__(self) -> bytes:
        return self.tobytes()


class View(RawBytesOrdering, Generic[T]):
    """A validated, borrowed, read-only handle over the bytes of a ``T``.

    Views are created with ``View.try_from_slice`` (or ``T.view(data)``),
    which checks the size and then the full layout, or with
    ``View.unchecked_from_slice`` when the bytes are known to be valid.

    Fields with an accessor are reachable as attributes; entries of tuples
    and fixed arrays by index.
    """

    __slots__ = ("_layout", "_data")

    def __init__(self, layout: Layout, data: memoryview) -> None:
        self._layout = layout
        self._data: Optional[memoryview] = data

    @classmethod
    def try_from_slice(cls, packed_type: Any, data: Any) -> View[T]:
        """Validate ``data`` against ``packed_type`` and wrap it.

        Args:
            packed_type: Packed type (or annotation) describing the bytes
            data: bytes-like object holding exactly ``size`` bytes

        Returns:
            A view over ``data`` (no copy is made)

        Raises:
            InvalidSizeError: If ``len(data)`` differs from the type size. The
                layout check does not run in that case.
            PackError: If the bytes are not a legal encoding of the type
            SchemaError: If the type cannot be packed
        """
        layout = compile_schema(packed_type)
        buffer = as_buffer(data)

        if len(buffer) != layout.size:
            raise InvalidSizeError(layout.type_name, layout.size, len(buffer))

        try:
            layout.check(buffer)
        except PackError as err:
            logger.debug("rejected %d bytes for %s: %s", len(buffer), layout.type_name, err)
            raise

        return cls(layout, buffer)

    @classmethod
    def unchecked_from_slice(cls, packed_type: Any, data: Any) -> View[T]:
        """Wrap ``data`` without validating it.

        The caller guarantees the bytes are a valid encoding; decoding bytes
        that are not may raise ``DecodeError``.
        """
        return cls(compile_schema(packed_type), as_buffer(data))

    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def type_name(self) -> str:
        return self._layout.type_name

    @property
    def released(self) -> bool:
        return self._data is None

    def _buffer(self) -> memoryview:
        if self._data is None:
            raise ValueError(f"operation forbidden on released view of {self.type_name}")
        return self._data

    def unpack(self) -> T:
        """Decode the value (always succeeds on a checked view)."""
        return self._layout.decode(self._buffer())

    decode = unpack

    def as_slice(self) -> memoryview:
        """The underlying bytes, without copying."""
        return self._buffer()

    def tobytes(self) -> bytes:
        return self._buffer().tobytes()

    def to_owned(self) -> Packet[T]:
        """Copy the bytes into an owned Packet."""
        from .packet import Packet

        return Packet.from_view(self)

    def _child(self, start: int, end: int, layout: Layout) -> View[Any]:
        return View(layout, self._buffer()[start:end])

    def field(self, accessor: str) -> View[Any]:
        """Return the view of the field reachable through ``accessor``.

        Raises:
            AttributeError: If the type has no such accessor
        """
        slot = self._layout.accessor(accessor)
        if slot is None:
            raise AttributeError(f"{self.type_name} has no accessor {accessor!r}")
        return self._child(slot.start, slot.end, slot.layout)

    def accessors(self) -> List[str]:
        return self._layout.accessors()

    def __getattr__(self, name: str) -> View[Any]:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.field(name)

    def __getitem__(self, index: int) -> View[Any]:
        slot = self._layout.slot(index)
        return self._child(slot.start, slot.end, slot.layout)

    def _entry_count(self) -> int:
        layout = self._layout
        if isinstance(layout, ArrayLayout):
            return layout.length
        if isinstance(layout, CompositeLayout) and layout.positional:
            return len(layout.slots)
        raise TypeError(f"{self.type_name} has no positional entries")

    def __iter__(self) -> Iterator[View[Any]]:
        for index in range(self._entry_count()):
            yield self[index]

    def __reversed__(self) -> Iterator[View[Any]]:
        for index in reversed(range(self._entry_count())):
            yield self[index]

    def __len__(self) -> int:
        """Number of positional entries; the byte length is ``len(view.as_slice())``."""
        return self._entry_count()

    def __bool__(self) -> bool:
        return True

    def release(self) -> None:
        """End the borrow. Further use of this view raises ValueError."""
        if self._data is not None:
            self._data.release()
            self._data = None

    def __enter__(self) -> View[T]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()

    def __repr__(self) -> str:
        if self._data is None:
            return f"View[{self.type_name}](<released>)"
        return f"View[{self.type_name}]({self._data.tobytes()!r})"

