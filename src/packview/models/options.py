"""Packed configuration record.

Every per-type and per-field option understood by the schema compiler is
collected into one validated record:

- ``value``: the literal content of a unit type
- ``accessor``: accessor name of a field (``None`` for the default,
  ``False`` to suppress the accessor, or a custom name)
- ``repr``: integer width of an enum discriminant or an integer literal
  (``"char"`` marks a one-character string literal)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from ..codec.primitives import INT_REPRS
from ..exceptions import SchemaError

CHAR_REPR = "char"


@dataclass(frozen=True)
class PackedOptions:
    """Options for one packed type or field.

    Attributes:
        value: Literal content of a unit type (bytes, str or int)
        accessor: Accessor override; None (default), False (suppressed) or a name
        repr: Integer width name, or "char" for char literals

    Raises:
        SchemaError: If an option has an invalid value
    """

    value: Any = None
    accessor: Union[str, bool, None] = None
    repr: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate options."""
        if self.repr is not None and self.repr != CHAR_REPR and self.repr not in INT_REPRS:
            raise SchemaError(
                f"repr must be one of {', '.join(INT_REPRS)} or {CHAR_REPR!r}, got {self.repr!r}"
            )

        if isinstance(self.value, (bool, float)):
            raise SchemaError(f"{type(self.value).__name__} values are not supported")

        if self.accessor is True:
            object.__setattr__(self, "accessor", None)
        elif isinstance(self.accessor, str):
            if not self.accessor.isidentifier():
                raise SchemaError(f"accessor must be a valid identifier, got {self.accessor!r}")
            if self.accessor.startswith("_"):
                raise SchemaError(
                    f"accessor must not start with an underscore, got {self.accessor!r}"
                )
        elif self.accessor not in (None, False):
            raise SchemaError(f"accessor must be a name, True or False, got {self.accessor!r}")

    @property
    def suppressed(self) -> bool:
        return self.accessor is False

    def accessor_name(self, default: str) -> Optional[str]:
        """Resolve the accessor name, or None when the accessor is suppressed."""
        if self.accessor is False:
            return None
        if isinstance(self.accessor, str):
            return self.accessor
        return default
