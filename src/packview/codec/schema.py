"""Schema compiler: Python type declarations to layouts.

This module introspects packed models, enums and field annotations and
compiles them into Layout objects. All sizes and offsets are resolved here,
once per type, before any byte is processed; compiled layouts of classes are
cached for the lifetime of the program.
"""

from __future__ import annotations

import enum
import logging
from typing import Annotated, Any, Dict, Iterable, List, Optional, Tuple, Type, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError
from ..models.base import PackedTuple, PackedUnit
from ..models.fields import PACKED_ACCESSOR
from ..models.options import CHAR_REPR, PackedOptions
from .discriminant import EnumLayout
from .layout import ArrayLayout, BytesLayout, CompositeLayout, IntLayout, Layout, ModelLayout, TupleLayout
from .primitives import IntRepr
from .unit import UnitLayout

logger = logging.getLogger(__name__)

_LAYOUTS: Dict[type, Layout] = {}


def compile_schema(packed_type: Any) -> Layout:
    """Compile a packed type (or field annotation) into its Layout.

    Args:
        packed_type: PackedStruct/PackedTuple/PackedUnit subclass, packed enum,
            integer alias (U8, I32, ...), or an annotation such as
            ``tuple[U8, U16]`` or ``Annotated[bytes, FixedBytes(length=4)]``

    Returns:
        Compiled Layout

    Raises:
        SchemaError: If the type has no fixed packed representation

    Example:
        >>> layout = compile_schema(Header)
        >>> layout.size
        80
    """
    if isinstance(packed_type, Layout):
        return packed_type
    return _compile(packed_type, (), ())


def _compile(annotation: Any, metadata: Tuple[Any, ...], stack: Tuple[type, ...]) -> Layout:
    if get_origin(annotation) is Annotated:
        inner, *extras = get_args(annotation)
        return _compile(inner, metadata + _flatten(extras), stack)

    int_repr = next((item for item in metadata if isinstance(item, IntRepr)), None)
    if int_repr is not None:
        if annotation is not int:
            raise SchemaError(f"{int_repr.name} applies to int, not {annotation!r}")
        return IntLayout(int_repr)

    if isinstance(annotation, type):
        if issubclass(annotation, enum.Enum):
            return _compile_class(annotation, stack, _compile_enum)
        if issubclass(annotation, BaseModel):
            return _compile_class(annotation, stack, _compile_model)
        if annotation is bytes:
            return BytesLayout(_fixed_length(annotation, metadata))
        if annotation is int:
            raise SchemaError(
                "integer fields require an explicit width (U8, U16, U32, U64, U128, "
                "I8, I16, I32, I64, I128)"
            )

    origin = get_origin(annotation)
    if origin is list:
        (element,) = get_args(annotation) or (None,)
        if element is None:
            raise SchemaError("fixed arrays need an element type: list[T]")
        return ArrayLayout(_compile(element, (), stack), _fixed_length(annotation, metadata))

    if origin is tuple:
        elements = get_args(annotation)
        if not elements or Ellipsis in elements:
            raise SchemaError(f"{annotation!r}: tuples must list every element type")
        return TupleLayout([_compile(element, (), stack) for element in elements])

    raise SchemaError(
        f"unsupported packed type {annotation!r}. Supported: integer aliases, fixed bytes, "
        f"fixed lists, tuples, packed models and packed enums."
    )


def _flatten(extras: Iterable[Any]) -> Tuple[Any, ...]:
    items: List[Any] = []
    for extra in extras:
        if isinstance(extra, FieldInfo):
            items.extend(extra.metadata)
        else:
            items.append(extra)
    return tuple(items)


def _fixed_length(annotation: Any, metadata: Iterable[Any]) -> int:
    """Extract the exact length from min_length/max_length constraints."""
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    for constraint in metadata:
        if hasattr(constraint, "min_length"):
            min_length = constraint.min_length
        if hasattr(constraint, "max_length"):
            max_length = constraint.max_length

    if max_length is None:
        raise SchemaError(
            f"{annotation!r}: fixed length required "
            f"(use FixedBytes(length=...) or FixedList(length=...))"
        )
    if min_length is not None and min_length != max_length:
        raise SchemaError(
            f"{annotation!r}: variable-length fields are not supported. "
            f"Use fixed length (min_length == max_length)."
        )
    return max_length


def _compile_class(cls: type, stack: Tuple[type, ...], build: Any) -> Layout:
    cached = _LAYOUTS.get(cls)
    if cached is not None:
        return cached

    if cls in stack:
        cycle = " -> ".join(item.__name__ for item in (*stack, cls))
        raise SchemaError(f"{cls.__name__} contains itself and has no fixed size ({cycle})")

    layout = build(cls, (*stack, cls))
    logger.debug("compiled %s: %s, %d bytes", cls.__name__, type(layout).__name__, layout.size)
    return _LAYOUTS.setdefault(cls, layout)


def _compile_enum(enum_type: Type[enum.Enum], stack: Tuple[type, ...]) -> Layout:
    repr_name = getattr(enum_type, "__packed_repr__", None)
    if repr_name is None:
        raise SchemaError(
            f"{enum_type.__name__}: enumerations need a __packed_repr__ attribute to set the size"
        )
    options = PackedOptions(repr=repr_name)
    if options.repr == CHAR_REPR:
        raise SchemaError(f"{enum_type.__name__}: {CHAR_REPR!r} is not an integer repr")
    return EnumLayout(enum_type, repr_name)


def _compile_model(model: Type[BaseModel], stack: Tuple[type, ...]) -> Layout:
    fields = model.model_fields

    if issubclass(model, PackedUnit):
        if fields:
            raise SchemaError(f"{model.__name__}: unit types cannot have fields")
        options = model.packed_options()
        if options.value is None:
            raise SchemaError(
                f"{model.__name__}: expecting a value associated to this type (packed_value = ...)"
            )
        return UnitLayout(model.__name__, options.value, options.repr, model.model_construct)

    if getattr(model, "packed_value", None) is not None:
        raise SchemaError(f"{model.__name__}: cannot have a packed_value associated to a composite")

    if not fields:
        raise SchemaError(
            f"{model.__name__}: composites need at least one field (use PackedUnit for constants)"
        )

    children = []
    for name, field_info in fields.items():
        layout = _compile_field(model, name, field_info, stack)
        options = PackedOptions(accessor=_accessor_option(field_info))
        children.append((name, layout, options.accessor_name(name)))

    return ModelLayout(
        model, CompositeLayout.place(children), positional=issubclass(model, PackedTuple)
    )


def _compile_field(
    model: Type[BaseModel], name: str, field_info: FieldInfo, stack: Tuple[type, ...]
) -> Layout:
    if field_info.annotation is None:
        raise SchemaError(f"Field {name} of {model.__name__} has no type annotation")
    try:
        return _compile(field_info.annotation, tuple(field_info.metadata), stack)
    except SchemaError as err:
        raise SchemaError(f"Field {name} of {model.__name__}: {err}") from err


def _accessor_option(field_info: FieldInfo) -> Any:
    extra = field_info.json_schema_extra
    if isinstance(extra, dict):
        return extra.get(PACKED_ACCESSOR)
    return None
