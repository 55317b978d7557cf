"""Package metadata and configuration.

This module contains package-level metadata and configuration constants. Modules
should import package metadata directly from this module instead of relying on
re-exports from `pytelegraph.__init__` (for example: ``from pytelegraph.meta import LOGGER``).
"""

from logging import getLogger
from typing import Literal, TypedDict, final

__all__ = (
    "NAME",
    "VERSION",
    "LOGGER",
    "OPEN_TEXT_OPTIONS",
)


@final
class _OpenOptions(TypedDict):
    """Options accepted by :func:`open` when opening text files.

    The command line tool reads JSON and HTML documents and writes rendered
    output with these options, so every file touched by the package is
    decoded and encoded the same way.
    """

    encoding: str
    errors: Literal[
        "strict",
        "ignore",
        "replace",
        "surrogateescape",
        "xmlcharrefreplace",
        "backslashreplace",
        "namereplace",
    ]
    newline: None | Literal["", "\n", "\r", "\r\n"]


# update `pyproject.toml`
NAME = "pytelegraph"
VERSION = "0.3.0"

LOGGER = getLogger(NAME)
OPEN_TEXT_OPTIONS: _OpenOptions = {
    "encoding": "UTF-8",
    "errors": "strict",
    "newline": None,
}
