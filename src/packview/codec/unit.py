"""Fixed-value (unit) layouts.

A unit type carries no data: its whole byte range must equal one literal.
The literal decides both the size and how the bytes are compared:

- ``bytes``: compared byte for byte, size is the number of bytes
- ``str``: compared byte for byte against the UTF-8 encoding
- ``str`` with ``repr="char"``: decoded as UTF-8 first, then compared
- ``int`` with an integer repr: decoded little-endian, then compared numerically
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Union

from ..exceptions import CustomError, MessageContext, SchemaError, ensure
from .layout import Layout
from .primitives import INT_REPRS, IntRepr

LiteralValue = Union[bytes, str, int]


class UnitLayout(Layout):
    """Layout for a type whose only legal content is ``value``.

    Args:
        type_name: Name used in error messages
        value: The literal
        packed_repr: Integer width name for integer literals, ``"char"`` for chars
        factory: Returns the unit value on decode
    """

    def __init__(
        self,
        type_name: str,
        value: LiteralValue,
        packed_repr: Optional[str],
        factory: Callable[[], Any],
    ) -> None:
        self.type_name = type_name
        self.value = value
        self.factory = factory
        self.int_repr: Optional[IntRepr] = None
        self.is_char = False

        if isinstance(value, bool) or not isinstance(value, (bytes, str, int)):
            raise SchemaError(
                f"{type_name}: unsupported packed_value {value!r} "
                f"(expected bytes, str or int; bool and float are not supported)"
            )

        if isinstance(value, int):
            if packed_repr is None:
                raise SchemaError(
                    f"{type_name}: integer packed_value needs an explicit packed_repr "
                    f"(one of {', '.join(INT_REPRS)})"
                )
            if packed_repr not in INT_REPRS:
                raise SchemaError(f"{type_name}: unknown integer repr {packed_repr!r}")
            self.int_repr = INT_REPRS[packed_repr]
            if not self.int_repr.fits(value):
                raise SchemaError(f"{type_name}: {value} does not fit in {packed_repr}")
            self.literal = self.int_repr.to_bytes(value)
        elif isinstance(value, str):
            if packed_repr == "char":
                if len(value) != 1:
                    raise SchemaError(f"{type_name}: char packed_value must be one character")
                self.is_char = True
            elif packed_repr is not None:
                raise SchemaError(
                    f"{type_name}: packed_repr {packed_repr!r} does not apply to strings"
                )
            self.literal = value.encode("utf-8")
        else:
            if packed_repr is not None:
                raise SchemaError(f"{type_name}: packed_repr does not apply to byte strings")
            self.literal = bytes(value)

        self.size = len(self.literal)

    def check(self, data: memoryview) -> None:
        if self.int_repr is not None:
            self._check_int(data)
        elif self.is_char:
            self._check_char(data)
        elif isinstance(self.value, str):
            received = bytes(data)
            ensure(
                self.type_name,
                received == self.literal,
                f"data == {self.value!r}.encode()",
                f"Invalid string, expected {self.value!r} but received "
                f"{received.decode('utf-8', errors='replace')!r}",
            )
        else:
            received = bytes(data)
            ensure(
                self.type_name,
                received == self.literal,
                f"data == {self.literal!r}",
                f"Invalid byte string, expected {self.literal!r} but received {received!r}",
            )

    def _check_int(self, data: memoryview) -> None:
        assert self.int_repr is not None
        received = self.int_repr.from_bytes(data)
        ensure(
            self.type_name,
            received == self.value,
            f"int == {self.value}",
            f"Invalid packed integer, expected {self.value} but received {received}",
        )

    def _check_char(self, data: memoryview) -> None:
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as err:
            raise CustomError(self.type_name, err).add_context(
                MessageContext(self.type_name, "Failed to parse valid utf8 char from the slice")
            ) from err
        ensure(
            self.type_name,
            text[:1] == self.value,
            f"char == {self.value!r}",
            f"Invalid UTF8 encoded char, expected {self.value!r} but received {text!r}",
        )

    def decode(self, data: memoryview) -> Any:
        return self.factory()

    def encode(self, value: Any, out: memoryview) -> None:
        out[:] = self.literal
