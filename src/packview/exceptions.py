"""Exception hierarchy for packview.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from PackviewError for easy catching of any packview-specific error.

Validation failures raised while checking bytes are ``PackError`` subclasses. Instead of
nesting one error inside another, every ``PackError`` keeps an ordered list of context
frames (leaf first) that enclosing composites append on the way out, so the full path
from the top-level type down to the failing leaf is preserved.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any, List, Sequence


class PackviewError(Exception):
    """Base exception for all packview errors."""

    pass


class SchemaError(PackviewError):
    """Raised when a packed schema is invalid.

    Examples:
        - Unit type without a packed_value
        - Integer literal without an explicit width
        - Enum without __packed_repr__ or with a discriminant out of range
        - Field annotation without a fixed size
    """

    pass


class EncodeError(PackviewError):
    """Raised when a value cannot be written to its packed representation.

    Examples:
        - Integer does not fit in the declared width
        - Bytes field of the wrong length
        - Value of the wrong type (e.g. built with model_construct)
    """

    pass


class DecodeError(PackviewError):
    """Raised when decoding bytes that never passed validation.

    Decoding assumes the bytes were checked first; this error signals a broken
    contract (e.g. View.unchecked_from_slice on invalid data), not bad input.
    """

    pass


@dataclass(frozen=True)
class ErrorContext(abc.ABC):
    """A frame of structural context attached to a PackError."""

    type_name: str

    @abc.abstractmethod
    def describe(self) -> str:
        """Human-readable sentence for this frame."""

    @abc.abstractmethod
    def segment(self) -> str:
        """Path segment for this frame (e.g. ``.field`` or ``[1]``)."""


@dataclass(frozen=True)
class FieldContext(ErrorContext):
    """The named field ``field`` of ``type_name`` failed validation."""

    field: str

    def describe(self) -> str:
        return f"Field {self.field} of {self.type_name} is not valid"

    def segment(self) -> str:
        return f".{self.field}"


@dataclass(frozen=True)
class TupleContext(ErrorContext):
    """The positional entry ``index`` of ``type_name`` failed validation."""

    index: int

    def describe(self) -> str:
        return f"Tuple entry {self.type_name}.{self.index} is not valid"

    def segment(self) -> str:
        return f"[{self.index}]"


@dataclass(frozen=True)
class MessageContext(ErrorContext):
    """A free-form explanation attached by ``type_name``."""

    message: str

    def describe(self) -> str:
        return f"{self.type_name}: {self.message}"

    def segment(self) -> str:
        return ""


class PackError(PackviewError):
    """Raised when bytes are not a valid encoding of a packed type.

    Attributes:
        type_name: Name of the type whose validation failed
        contexts: Context frames, innermost first
    """

    def __init__(self, type_name: str, message: str) -> None:
        super().__init__(message)
        self.type_name = type_name
        self.message = message
        self.contexts: List[ErrorContext] = []

    def add_context(self, context: ErrorContext) -> PackError:
        """Append an enclosing context frame and return self for re-raising."""
        self.contexts.append(context)
        return self

    @property
    def root_type(self) -> str:
        """Name of the outermost type that reported this error."""
        if self.contexts:
            return self.contexts[-1].type_name
        return self.type_name

    @property
    def path(self) -> str:
        """Dotted path from the outermost type to the failing leaf.

        Example:
            >>> err.path
            'Header.version'
        """
        if not self.contexts:
            return self.type_name
        segments = [context.segment() for context in reversed(self.contexts)]
        return self.root_type + "".join(segments)

    def describe(self) -> str:
        """Render the whole causal chain, outermost context first."""
        lines = [context.describe() for context in reversed(self.contexts)]
        lines.append(self.message)
        return "\n".join(
            ("  " * depth) + ("caused by: " if depth else "") + line
            for depth, line in enumerate(lines)
        )

    def __str__(self) -> str:
        if any(context.segment() for context in self.contexts):
            return f"{self.message} (at {self.path})"
        return self.message


class InvalidSizeError(PackError):
    """Raised when a slice length does not match the packed size of a type."""

    def __init__(self, type_name: str, expected: int, received: int) -> None:
        super().__init__(
            type_name,
            f"Invalid size for {type_name}: expected {expected} bytes "
            f"but received {received} bytes",
        )
        self.expected = expected
        self.received = received


class AssumptionError(PackError):
    """Raised when a fixed-value comparison does not hold."""

    def __init__(self, type_name: str, assumption: str, message: str) -> None:
        super().__init__(type_name, f"Assumption `{assumption}` failed for {type_name}: {message}")
        self.assumption = assumption
        self.detail = message


class InvalidDiscriminantError(PackError):
    """Raised when a discriminant is not one of the declared variants."""

    def __init__(self, type_name: str, found: Any, options: Sequence[int]) -> None:
        self.found = found
        self.options = tuple(options)
        super().__init__(
            type_name,
            f"Invalid discriminant for {type_name}, received {found!r} "
            f"while expecting one of: [ {self.options_text} ]",
        )

    @property
    def options_text(self) -> str:
        return ", ".join(str(option) for option in self.options)


class CustomError(PackError):
    """Wraps a lower-level exception (e.g. UnicodeDecodeError) as a PackError.

    The wrapped exception is available as ``cause`` and is also set as
    ``__cause__`` when raised with ``raise ... from``.
    """

    def __init__(self, type_name: str, cause: BaseException) -> None:
        super().__init__(type_name, str(cause))
        self.cause = cause


class MessageError(PackError):
    """A validation failure described by a plain message."""

    pass


def ensure(type_name: str, condition: bool, assumption: str, message: str) -> None:
    """Raise AssumptionError unless ``condition`` holds.

    Args:
        type_name: Name of the type being validated
        condition: Result of the comparison
        assumption: Human readable form of the comparison
        message: Description including expected/received values

    Raises:
        AssumptionError: If condition is false

    Example:
        >>> ensure("u8", 0 == 1, "0 == 1", "math needs to hold here")
        Traceback (most recent call last):
        ...
        packview.exceptions.AssumptionError: Assumption `0 == 1` failed for u8: math needs to hold here
    """
    if not condition:
        raise AssumptionError(type_name, assumption, message)
