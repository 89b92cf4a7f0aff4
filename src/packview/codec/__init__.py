"""Fixed-layout binary codec for packview.

This module provides the compiled layouts every packed type is reduced to,
the schema compiler that builds them, and the encode/decode entry points.
"""

from __future__ import annotations

from .decoder import check, decode
from .discriminant import EnumLayout
from .encoder import encode, encode_into
from .layout import (
    ArrayLayout,
    BytesLayout,
    CompositeLayout,
    IntLayout,
    Layout,
    ModelLayout,
    Slot,
    TupleLayout,
)
from .primitives import INT_REPRS, IntRepr
from .schema import compile_schema
from .unit import UnitLayout

__all__ = [
    "encode",
    "encode_into",
    "decode",
    "check",
    "compile_schema",
    # Layouts
    "Layout",
    "Slot",
    "IntLayout",
    "BytesLayout",
    "CompositeLayout",
    "ModelLayout",
    "TupleLayout",
    "ArrayLayout",
    "UnitLayout",
    "EnumLayout",
    # Primitives
    "IntRepr",
    "INT_REPRS",
]
