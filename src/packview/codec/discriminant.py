"""Discriminated-unit (enum) layouts.

An enum occupies exactly the width of its integer repr. Each variant declares
one discriminant; any other value is rejected by ``check`` with an error that
lists every legal discriminant.
"""

from __future__ import annotations

import enum
from typing import Any, Dict, List, Type

from ..exceptions import EncodeError, InvalidDiscriminantError, SchemaError
from .layout import Layout, unchecked
from .primitives import INT_REPRS


class EnumLayout(Layout):
    """Layout mapping a fixed-width discriminant to enum variants.

    Args:
        enum_type: Enum class whose member values are the discriminants
        repr_name: Integer width of the discriminant (``u8``, ``u16``, ...)

    Raises:
        SchemaError: If the enum has no variants, an unknown repr, or a
            discriminant that is not an integer or does not fit the repr
    """

    def __init__(self, enum_type: Type[enum.Enum], repr_name: str) -> None:
        self.enum_type = enum_type
        self.type_name = enum_type.__name__

        if repr_name not in INT_REPRS:
            raise SchemaError(
                f"{self.type_name}: unknown repr {repr_name!r} "
                f"(expected one of {', '.join(INT_REPRS)})"
            )
        self.repr = INT_REPRS[repr_name]
        self.size = self.repr.width

        members = list(enum_type)
        if not members:
            raise SchemaError(
                f"{self.type_name}: zero-variant enums cannot be packed "
                f"because they cannot be instantiated"
            )

        self._variants: Dict[int, Any] = {}
        for member in members:
            discriminant = member.value
            if isinstance(discriminant, bool) or not isinstance(discriminant, int):
                raise SchemaError(
                    f"{self.type_name}.{member.name}: missing explicit integer discriminant "
                    f"(got {discriminant!r})"
                )
            if not self.repr.fits(discriminant):
                raise SchemaError(
                    f"{self.type_name}.{member.name}: discriminant {discriminant} "
                    f"does not fit in {repr_name}"
                )
            self._variants[discriminant] = member

    @property
    def discriminants(self) -> List[int]:
        """Declared discriminants in declaration order."""
        return list(self._variants)

    def check(self, data: memoryview) -> None:
        found = self.repr.from_bytes(data)
        if found not in self._variants:
            raise InvalidDiscriminantError(self.type_name, found, self.discriminants)

    def decode(self, data: memoryview) -> Any:
        found = self.repr.from_bytes(data)
        try:
            return self._variants[found]
        except KeyError:
            raise unchecked(self.type_name, f"invalid discriminant {found}") from None

    def encode(self, value: Any, out: memoryview) -> None:
        if not isinstance(value, self.enum_type):
            raise EncodeError(
                f"{self.type_name}: expected {self.type_name}, got {type(value).__name__}"
            )
        out[:] = self.repr.to_bytes(value.value)
