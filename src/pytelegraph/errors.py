"""Typed exception hierarchy for validation failures.

Every wrapper, content node and record raises one of these when it is given
a value that breaks its constraint. The same exception surfaces whether the
value was passed to a constructor or decoded from a JSON document, so callers
handle untrusted input in one place.

These deliberately derive from :class:`Exception` rather than
:class:`ValueError`: pydantic wraps ``ValueError`` raised inside validators
into its own ``ValidationError`` but re-raises any other exception unchanged.
"""

from collections.abc import Collection
from typing import Any

__all__ = (
    "ValidationError",
    "Empty",
    "TooLong",
    "TooLarge",
    "OutOfRange",
    "UnknownMember",
)


class ValidationError(Exception):
    """Base exception for every constraint violation.

    Attributes:
        field: name of the constrained value (for example ``title``)
        value: the rejected value
    """

    def __init__(self, message: str, *, field: str, value: Any):
        super().__init__(message)
        self.field = field
        self.value = value


class Empty(ValidationError):
    """Raised when a required value is empty or absent."""

    def __init__(self, field: str, value: Any = "", *, reason: str | None = None):
        super().__init__(
            reason or f"{field} is required and must not be empty",
            field=field,
            value=value,
        )


class TooLong(ValidationError):
    """Raised when a string reaches its exclusive length ceiling."""

    def __init__(self, field: str, value: str, limit: int):
        super().__init__(
            f"{field} must be shorter than {limit} characters (got {len(value)})",
            field=field,
            value=value,
        )
        self.limit = limit


class TooLarge(ValidationError):
    """Raised when a sequence holds too many entries.

    ``value`` is the offending entry count rather than the sequence itself.
    """

    def __init__(self, field: str, count: int, limit: int):
        super().__init__(
            f"{field} must hold fewer than {limit} entries (got {count})",
            field=field,
            value=count,
        )
        self.limit = limit


class OutOfRange(ValidationError):
    """Raised when an integer falls outside its inclusive range.

    A ``maximum`` of ``None`` means the range is unbounded above.
    """

    def __init__(self, field: str, value: int, minimum: int, maximum: int | None):
        bound = f"{minimum} - {maximum}" if maximum is not None else f">= {minimum}"
        super().__init__(
            f"{field} out of range: {value!r} (allowed: {bound})",
            field=field,
            value=value,
        )
        self.minimum = minimum
        self.maximum = maximum


class UnknownMember(ValidationError):
    """Raised when a value is not part of a closed vocabulary."""

    def __init__(self, field: str, value: Any, allowed: Collection[str]):
        super().__init__(
            f"Invalid {field}: {value!r} out of {tuple(allowed)!r}",
            field=field,
            value=value,
        )
        self.allowed = tuple(allowed)
