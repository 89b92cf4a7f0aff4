"""Base classes for packed types and packview-specific Pydantic configuration.

Packed types are declared as classes and compiled into layouts on first use:

- PackedStruct: fields laid out in declaration order, errors name the field
- PackedTuple: same layout, but positional (errors report the index and the
  model can be built from positional arguments)
- PackedUnit: no fields, the whole byte range must equal ``packed_value``
- PackedEnum: an IntEnum whose values are discriminants of ``__packed_repr__`` width
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..exceptions import SchemaError
from .options import PackedOptions

if TYPE_CHECKING:
    from ..packet import Packet
    from ..view import View


class PackedModel(BaseModel):
    """Base class for all packed models.

    packview-specific options are configured as ClassVar attributes:

    Attributes:
        packed_value: Literal content (units only)
        packed_repr: Integer width of an integer literal, or "char" (units only)
    """

    model_config = ConfigDict(
        # Lax mode: int-valued enums and bytearrays are coerced
        strict=False,
        # Allow arbitrary types (for future extensibility)
        arbitrary_types_allowed=True,
        # Validate on assignment
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    packed_value: ClassVar[Any] = None
    packed_repr: ClassVar[Optional[str]] = None

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        """Validate the packed options as soon as the class is created."""
        super().__pydantic_init_subclass__(**kwargs)
        cls.packed_options()

    @classmethod
    def packed_options(cls) -> PackedOptions:
        """Return the validated configuration record of this type."""
        return PackedOptions(value=cls.packed_value, repr=cls.packed_repr)

    @classmethod
    def packed_size(cls) -> int:
        """Number of bytes this type occupies."""
        from ..codec.schema import compile_schema

        return compile_schema(cls).size

    @classmethod
    def view(cls, data: Any) -> View[Any]:
        """Validate ``data`` and return a zero-copy view over it."""
        from ..view import View

        return View.try_from_slice(cls, data)

    @classmethod
    def from_bytes(cls, data: Any) -> Any:
        """Validate and decode ``data``."""
        return cls.view(data).unpack()

    def pack(self) -> Packet[Any]:
        """Encode this value into an owned Packet."""
        from ..packet import Packet

        return Packet.pack(self, type(self))

    def to_bytes(self) -> bytes:
        return bytes(self.pack())


class _Composite(PackedModel):
    @classmethod
    def packed_options(cls) -> PackedOptions:
        options = super().packed_options()
        if options.value is not None:
            raise SchemaError(
                f"{cls.__name__}: cannot have a packed_value associated to a composite"
            )
        return options


class PackedStruct(_Composite):
    """A named composite: fields are laid out back to back in declaration order.

    Example:
        >>> class Header(PackedStruct):
        ...     tag: Tag = Tag()
        ...     version: Version
        ...     block_number: U32
    """


class PackedTuple(_Composite):
    """A positional composite.

    Fields still have names (used as accessors), but validation errors report
    the entry index, and instances can be built positionally.

    Example:
        >>> class BlockNumber(PackedTuple):
        ...     epoch: U32
        ...     slot: U32
        >>> BlockNumber(1, 2)[1]
        2
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        if args:
            names = list(type(self).model_fields)
            if len(args) > len(names):
                raise TypeError(
                    f"{type(self).__name__} takes {len(names)} positional arguments "
                    f"but {len(args)} were given"
                )
            for name, value in zip(names, args):
                if name in kwargs:
                    raise TypeError(f"{type(self).__name__} got multiple values for {name!r}")
                kwargs[name] = value
        super().__init__(**kwargs)

    def astuple(self) -> Tuple[Any, ...]:
        return tuple(getattr(self, name) for name in type(self).model_fields)

    def __getitem__(self, index: int) -> Any:
        return self.astuple()[index]

    def __len__(self) -> int:
        return len(type(self).model_fields)


class PackedUnit(PackedModel):
    """A type with no data whose packed bytes always equal ``packed_value``.

    Example:
        >>> class ProtocolPrefix(PackedUnit):
        ...     packed_value = "my protocol"
        >>> ProtocolPrefix.packed_size()
        11
    """


class PackedEnum(enum.IntEnum):
    """An enum packed as its integer discriminant.

    Subclasses set ``__packed_repr__`` to the discriminant width and give every
    variant an explicit value.

    Example:
        >>> class Version(PackedEnum):
        ...     __packed_repr__ = "u8"
        ...     V1 = 1
        ...     V2 = 2
    """
