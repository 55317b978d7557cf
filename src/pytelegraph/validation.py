"""Pure constraint checks shared by every validated type.

Each check returns its input unchanged when it holds and raises the matching
:mod:`pytelegraph.errors` exception otherwise. Wrappers call these from their
pydantic validators, which run for direct construction and for decoding
alike.
"""

from collections.abc import Collection, Iterable, Sized
from typing import TypeVar

from .errors import Empty, OutOfRange, TooLarge, TooLong, UnknownMember

__all__ = (
    "check_non_empty",
    "check_shorter_than",
    "check_fewer_than",
    "check_range",
    "check_members",
)

_S = TypeVar("_S", bound=Sized)
_I = TypeVar("_I", bound=Iterable[str])


def check_non_empty(field: str, value: _S) -> _S:
    if not len(value):
        raise Empty(field, value)
    return value


def check_shorter_than(field: str, value: str, limit: int) -> str:
    if len(value) >= limit:
        raise TooLong(field, value, limit)
    return value


def check_fewer_than(field: str, values: _S, limit: int) -> _S:
    if len(values) >= limit:
        raise TooLarge(field, len(values), limit)
    return values


def check_range(field: str, value: int, minimum: int, maximum: int | None) -> int:
    """Check ``minimum <= value <= maximum``; both bounds are inclusive."""
    if value < minimum or (maximum is not None and value > maximum):
        raise OutOfRange(field, value, minimum, maximum)
    return value


def check_members(field: str, values: _I, allowed: Collection[str]) -> _I:
    """Check every element of ``values`` belongs to ``allowed``.

    The first offending element is reported.
    """
    for value in values:
        if value not in allowed:
            raise UnknownMember(field, value, allowed)
    return values
