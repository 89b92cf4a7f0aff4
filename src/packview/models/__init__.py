"""Packed type modeling for packview.

This module provides the base classes and field utilities for declaring
fixed-layout binary types using Pydantic models and IntEnums.
"""

from __future__ import annotations

from .base import PackedEnum, PackedModel, PackedStruct, PackedTuple, PackedUnit
from .fields import (
    I8,
    I16,
    I32,
    I64,
    I128,
    U8,
    U16,
    U32,
    U64,
    U128,
    FixedBytes,
    FixedList,
    PackedField,
)
from .options import PackedOptions

__all__ = [
    "PackedModel",
    "PackedStruct",
    "PackedTuple",
    "PackedUnit",
    "PackedEnum",
    "PackedOptions",
    "PackedField",
    "FixedBytes",
    "FixedList",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "I8",
    "I16",
    "I32",
    "I64",
    "I128",
]
