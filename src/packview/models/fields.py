"""Field type helpers and utilities.

This module provides the fixed-width integer aliases and convenience functions
for declaring fixed-size fields on packed models.
"""

from __future__ import annotations

from typing import Annotated, Any, Union, cast

from pydantic import Field
from pydantic.fields import FieldInfo

from ..codec.primitives import INT_REPRS

PACKED_ACCESSOR = "packed_accessor"


def _int_alias(name: str) -> Any:
    int_repr = INT_REPRS[name]
    return Annotated[int, Field(ge=int_repr.min_value, le=int_repr.max_value), int_repr]


U8 = _int_alias("u8")
U16 = _int_alias("u16")
U32 = _int_alias("u32")
U64 = _int_alias("u64")
U128 = _int_alias("u128")
I8 = _int_alias("i8")
I16 = _int_alias("i16")
I32 = _int_alias("i32")
I64 = _int_alias("i64")
I128 = _int_alias("i128")


def FixedBytes(*, length: int, **kwargs: Any) -> FieldInfo:
    """Create a fixed-length bytes field.

    Args:
        length: Exact length in bytes
        **kwargs: Additional Field() arguments

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Block(PackedStruct):
        ...     prev_block: Annotated[bytes, FixedBytes(length=32)]
    """
    return cast(FieldInfo, Field(min_length=length, max_length=length, **kwargs))


def FixedList(*, length: int, **kwargs: Any) -> FieldInfo:
    """Create a fixed-length array field.

    Every element uses the layout of the list's item type; the array takes
    ``length`` times the element size.

    Args:
        length: Exact number of elements
        **kwargs: Additional Field() arguments

    Example:
        >>> class Targets(PackedStruct):
        ...     values: Annotated[list[U32], FixedList(length=3)]
    """
    return cast(FieldInfo, Field(min_length=length, max_length=length, **kwargs))


def PackedField(*, accessor: Union[str, bool, None] = None, **kwargs: Any) -> FieldInfo:
    """Create a field with packview-specific options.

    Args:
        accessor: Name of the view accessor for this field, or False to
            generate no accessor at all (default: the field name)
        **kwargs: Additional Field() arguments (default, description, etc.)

    Example:
        >>> class Header(PackedStruct):
        ...     version: Version = PackedField(accessor="get_version")
        ...     hash: Annotated[bytes, FixedBytes(length=32)] = PackedField(accessor=False)

    Note:
        The option is stored as extra field metadata and read back by the
        schema compiler.
    """
    return cast(FieldInfo, Field(json_schema_extra={PACKED_ACCESSOR: accessor}, **kwargs))
