"""Layout size calculation utilities.

This module provides functions to inspect the size and placement of packed
types without encoding or decoding anything.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel

from ..codec.layout import CompositeLayout, Layout
from ..codec.schema import compile_schema
from ..exceptions import SchemaError


def _layout_of(value_or_type: Any) -> Layout:
    # Get the class if we were passed an instance
    if isinstance(value_or_type, (BaseModel, enum.Enum)):
        return compile_schema(type(value_or_type))
    return compile_schema(value_or_type)


def _composite_of(value_or_type: Any) -> CompositeLayout:
    layout = _layout_of(value_or_type)
    if not isinstance(layout, CompositeLayout):
        raise SchemaError(f"{layout.type_name} is not a composite type")
    return layout


def encoded_size(value_or_type: Any) -> int:
    """Calculate the packed size of a type in bytes.

    The size is fixed by the layout and does not depend on field values.

    Args:
        value_or_type: Packed type, annotation, model instance or enum member

    Returns:
        Size in bytes

    Raises:
        SchemaError: If the type cannot be packed

    Example:
        >>> class Status(PackedStruct):
        ...     vehicle_id: U8
        ...     depth: U32
        >>> encoded_size(Status)
        5
    """
    return _layout_of(value_or_type).size


def field_sizes(value_or_type: Any) -> dict[str, int]:
    """Get the size in bytes of each field of a composite.

    Tuple entries are keyed by their index (as a string).

    Example:
        >>> field_sizes(Status)
        {'vehicle_id': 1, 'depth': 4}
    """
    return {slot.name: slot.size for slot in _composite_of(value_or_type).slots}


def field_offsets(value_or_type: Any) -> dict[str, tuple[int, int]]:
    """Get the ``(start, end)`` byte range of each field of a composite.

    Example:
        >>> field_offsets(Status)
        {'vehicle_id': (0, 1), 'depth': (1, 5)}
    """
    return {slot.name: (slot.start, slot.end) for slot in _composite_of(value_or_type).slots}
