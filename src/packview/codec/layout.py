"""Layout contract and the composite layout engine.

A Layout is the compiled form of a packed type. Every layout exposes the same
contract:

- ``size``: number of bytes the type occupies, known without any instance
- ``check(data)``: validate exactly ``size`` bytes, raising PackError
- ``decode(data)``: rebuild a value from bytes that already passed ``check``
- ``encode(value, out)``: write exactly ``size`` bytes into ``out``

Composite layouts (structs, tuples and fixed arrays) place their children
left to right with no padding, so the offset of each child is the sum of the
sizes before it. Checking is fail-fast: the first child that fails aborts the
check and its error gets the child's name or index appended as context.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Type

from pydantic import BaseModel

from ..exceptions import (
    DecodeError,
    EncodeError,
    ErrorContext,
    FieldContext,
    PackError,
    SchemaError,
    TupleContext,
)
from .primitives import IntRepr, read_bytes, write_bytes


class Layout(abc.ABC):
    """Compiled size/check/decode/encode contract for one packed type."""

    type_name: str
    size: int

    @abc.abstractmethod
    def check(self, data: memoryview) -> None:
        """Validate ``size`` bytes.

        Raises:
            PackError: If the bytes are not a legal encoding
        """

    @abc.abstractmethod
    def decode(self, data: memoryview) -> Any:
        """Rebuild a value from checked bytes."""

    @abc.abstractmethod
    def encode(self, value: Any, out: memoryview) -> None:
        """Write the packed representation of ``value`` into ``out``.

        Raises:
            EncodeError: If value cannot be represented
        """

    def accessor(self, name: str) -> Optional[Slot]:
        """Return the sub-range reachable through accessor ``name``, if any."""
        return None

    def accessors(self) -> List[str]:
        return []

    def slot(self, index: int) -> Slot:
        """Return the sub-range of positional entry ``index``."""
        raise TypeError(f"{self.type_name} has no positional entries")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.type_name}, size={self.size})"


@dataclass(frozen=True)
class Slot:
    """A contiguous sub-range of a composite occupied by one child layout.

    Attributes:
        name: Field name (or the index as a string for positional entries)
        index: Position of the child within the composite
        start: Offset of the first byte
        end: Offset one past the last byte
        layout: Layout of the child
        accessor: Accessor name, or None when the accessor is suppressed
    """

    name: str
    index: int
    start: int
    end: int
    layout: Layout
    accessor: Optional[str] = None

    @property
    def size(self) -> int:
        return self.end - self.start


class IntLayout(Layout):
    """Little-endian integer of a fixed width. Every bit pattern is valid."""

    def __init__(self, int_repr: IntRepr) -> None:
        self.repr = int_repr
        self.type_name = int_repr.name
        self.size = int_repr.width

    def check(self, data: memoryview) -> None:
        # any bit pattern of the right length is a valid integer
        return None

    def decode(self, data: memoryview) -> int:
        return self.repr.from_bytes(data)

    def encode(self, value: Any, out: memoryview) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise EncodeError(f"{self.type_name}: expected int, got {type(value).__name__}")
        if not self.repr.fits(value):
            raise EncodeError(
                f"{self.type_name}: value {value} out of bounds "
                f"[{self.repr.min_value}, {self.repr.max_value}]"
            )
        out[:] = self.repr.to_bytes(value)


class BytesLayout(Layout):
    """Raw byte array of a fixed length. Every byte pattern is valid."""

    def __init__(self, length: int) -> None:
        self.type_name = f"bytes[{length}]"
        self.size = length

    def check(self, data: memoryview) -> None:
        return None

    def decode(self, data: memoryview) -> bytes:
        return read_bytes(data)

    def encode(self, value: Any, out: memoryview) -> None:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodeError(f"{self.type_name}: expected bytes, got {type(value).__name__}")
        try:
            write_bytes(bytes(value), out)
        except ValueError as err:
            raise EncodeError(f"{self.type_name}: {err}") from err


class CompositeLayout(Layout):
    """Ordered sequence of child layouts laid out back to back.

    Subclasses decide how a value is split into children (``_values``) and how
    decoded children are put back together (``_build``).
    """

    positional = False

    def __init__(self, type_name: str, slots: Sequence[Slot]) -> None:
        self.type_name = type_name
        self.slots: List[Slot] = list(slots)
        self.size = self.slots[-1].end if self.slots else 0

        self._accessors: Dict[str, Slot] = {}
        for slot in self.slots:
            if slot.accessor is None:
                continue
            if slot.accessor in self._accessors:
                raise SchemaError(f"{type_name}: duplicate accessor {slot.accessor!r}")
            self._accessors[slot.accessor] = slot

    @staticmethod
    def place(children: Sequence[tuple[str, Layout, Optional[str]]]) -> List[Slot]:
        """Compute slots for ``(name, layout, accessor)`` children, left to right."""
        slots = []
        offset = 0
        for index, (name, layout, accessor) in enumerate(children):
            slots.append(Slot(name, index, offset, offset + layout.size, layout, accessor))
            offset += layout.size
        return slots

    def _context(self, slot: Slot) -> ErrorContext:
        if self.positional:
            return TupleContext(self.type_name, slot.index)
        return FieldContext(self.type_name, slot.name)

    def check(self, data: memoryview) -> None:
        for slot in self.slots:
            try:
                slot.layout.check(data[slot.start : slot.end])
            except PackError as err:
                err.add_context(self._context(slot))
                raise

    def decode(self, data: memoryview) -> Any:
        values = [slot.layout.decode(data[slot.start : slot.end]) for slot in self.slots]
        return self._build(values)

    def encode(self, value: Any, out: memoryview) -> None:
        values = self._values(value)
        for slot, field_value in zip(self.slots, values):
            try:
                slot.layout.encode(field_value, out[slot.start : slot.end])
            except EncodeError as err:
                raise EncodeError(f"Field {slot.name} of {self.type_name}: {err}") from err

    def accessor(self, name: str) -> Optional[Slot]:
        return self._accessors.get(name)

    def accessors(self) -> List[str]:
        return list(self._accessors)

    def slot(self, index: int) -> Slot:
        if not self.positional:
            return super().slot(index)
        return self.slots[index]

    @abc.abstractmethod
    def _values(self, value: Any) -> Sequence[Any]:
        """Split ``value`` into one value per slot."""

    @abc.abstractmethod
    def _build(self, values: List[Any]) -> Any:
        """Assemble decoded slot values into the composite value."""


class ModelLayout(CompositeLayout):
    """Composite backed by a pydantic model (PackedStruct or PackedTuple)."""

    def __init__(
        self, model: Type[BaseModel], slots: Sequence[Slot], *, positional: bool = False
    ) -> None:
        self.model = model
        self.positional = positional
        super().__init__(model.__name__, slots)

    def _values(self, value: Any) -> Sequence[Any]:
        if not isinstance(value, self.model):
            raise EncodeError(
                f"{self.type_name}: expected {self.model.__name__}, got {type(value).__name__}"
            )
        try:
            return [getattr(value, slot.name) for slot in self.slots]
        except AttributeError as err:
            raise EncodeError(f"{self.type_name}: {err}") from err

    def _build(self, values: List[Any]) -> Any:
        # bytes already passed check, so skip pydantic validation
        return self.model.model_construct(
            **{slot.name: field_value for slot, field_value in zip(self.slots, values)}
        )


class TupleLayout(CompositeLayout):
    """Positional composite for ``tuple[A, B, ...]`` annotations."""

    positional = True

    def __init__(self, layouts: Sequence[Layout]) -> None:
        type_name = "tuple[" + ", ".join(layout.type_name for layout in layouts) + "]"
        children = [(str(index), layout, None) for index, layout in enumerate(layouts)]
        super().__init__(type_name, self.place(children))

    def _values(self, value: Any) -> Sequence[Any]:
        if not isinstance(value, (tuple, list)):
            raise EncodeError(f"{self.type_name}: expected tuple, got {type(value).__name__}")
        if len(value) != len(self.slots):
            raise EncodeError(
                f"{self.type_name}: expected {len(self.slots)} entries, got {len(value)}"
            )
        return value

    def _build(self, values: List[Any]) -> tuple:
        return tuple(values)


class ArrayLayout(Layout):
    """``length`` repetitions of the same element layout.

    Element ``i`` lives at ``i * element.size``; offsets are computed on
    demand rather than stored per element.
    """

    positional = True

    def __init__(self, element: Layout, length: int) -> None:
        self.element = element
        self.length = length
        self.type_name = f"{element.type_name}[{length}]"
        self.size = element.size * length

    def _ranges(self) -> Iterator[tuple[int, int, int]]:
        step = self.element.size
        for index in range(self.length):
            yield index, index * step, (index + 1) * step

    def check(self, data: memoryview) -> None:
        for index, start, end in self._ranges():
            try:
                self.element.check(data[start:end])
            except PackError as err:
                err.add_context(TupleContext(self.type_name, index))
                raise

    def decode(self, data: memoryview) -> List[Any]:
        return [self.element.decode(data[start:end]) for _, start, end in self._ranges()]

    def encode(self, value: Any, out: memoryview) -> None:
        if isinstance(value, (str, bytes, bytearray)) or not hasattr(value, "__len__"):
            raise EncodeError(f"{self.type_name}: expected a sequence, got {type(value).__name__}")
        if len(value) != self.length:
            raise EncodeError(
                f"{self.type_name}: expected {self.length} elements, got {len(value)}"
            )
        for (index, start, end), element in zip(self._ranges(), value):
            try:
                self.element.encode(element, out[start:end])
            except EncodeError as err:
                raise EncodeError(f"Element {index} of {self.type_name}: {err}") from err

    def slot(self, index: int) -> Slot:
        if index < 0:
            index += self.length
        if not 0 <= index < self.length:
            raise IndexError(f"{self.type_name} index out of range: {index}")
        start = index * self.element.size
        return Slot(str(index), index, start, start + self.element.size, self.element)


def unchecked(type_name: str, detail: str) -> DecodeError:
    """Error for decode calls on bytes that never passed ``check``."""
    return DecodeError(f"{type_name}: {detail} (bytes were not validated)")
