"""packview: validated zero-copy views over fixed-layout binary data

A Python library for declaring fixed-size binary layouts (network packets,
on-disk headers, protocol frames) as Pydantic models and reading them without
copying. Bytes are validated once, at the boundary, then exposed through
views whose field accessors are plain slices of the original buffer.

Key Features:
- Pydantic-based layout declarations (structs, tuples, constant units, enums)
- Fixed sizes and offsets computed once per type
- Fail-fast validation with the full path to the failing field
- Little-endian integers, raw byte arrays, no padding

Quick Start:
    >>> from packview import PackedStruct, PackedUnit, U16, U32
    >>>
    >>> class Magic(PackedUnit):
    ...     packed_value = b"PV"
    >>>
    >>> class Header(PackedStruct):
    ...     magic: Magic = Magic()
    ...     version: U16
    ...     length: U32
    >>>
    >>> data = Header(version=1, length=64).to_bytes()
    >>> with Header.view(data) as header:
    ...     header.length.unpack()
    64
"""

from __future__ import annotations

from .codec import check, compile_schema, decode, encode, encode_into
from .exceptions import (
    AssumptionError,
    CustomError,
    DecodeError,
    EncodeError,
    ErrorContext,
    FieldContext,
    InvalidDiscriminantError,
    InvalidSizeError,
    MessageContext,
    MessageError,
    PackError,
    PackviewError,
    SchemaError,
    TupleContext,
    ensure,
)
from .models import (
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
    PackedEnum,
    PackedField,
    PackedModel,
    PackedOptions,
    PackedStruct,
    PackedTuple,
    PackedUnit,
)
from .packet import Packet
from .utils import encoded_size, field_offsets, field_sizes
from .view import View

__version__ = "0.1.0"

__all__ = [
    # Core API
    "View",
    "Packet",
    "encode",
    "encode_into",
    "decode",
    "check",
    "compile_schema",
    # Models
    "PackedModel",
    "PackedStruct",
    "PackedTuple",
    "PackedUnit",
    "PackedEnum",
    "PackedOptions",
    # Field helpers
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
    # Exceptions
    "PackviewError",
    "SchemaError",
    "EncodeError",
    "DecodeError",
    "PackError",
    "InvalidSizeError",
    "AssumptionError",
    "InvalidDiscriminantError",
    "CustomError",
    "MessageError",
    "ErrorContext",
    "FieldContext",
    "TupleContext",
    "MessageContext",
    "ensure",
    # Sizing
    "encoded_size",
    "field_sizes",
    "field_offsets",
    # Version
    "__version__",
]
