"""CLI utilities for pytelegraph.

This module provides the top-level CLI `ArgumentParser` factory and wires
in the subcommands from :mod:`pytelegraph.commands`.
"""

from argparse import ArgumentParser
from functools import partial
from typing import Callable

from .commands import check_parser, convert_parser, render_parser
from .meta import VERSION

__all__ = ("parser",)


def parser(parent: Callable[..., ArgumentParser] | None = None):
    """Return an ArgumentParser configured for the package CLI.

    If a `parent` callable is provided it will be used to construct the
    parser (useful when the command is embedded within another parser).
    """

    prog = __package__ or __name__

    parser = (ArgumentParser if parent is None else parent)(
        prog=f"python -m {prog}",
        description="work with Telegraph documents",
        add_help=True,
        allow_abbrev=False,
        exit_on_error=False,
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"{prog} v{VERSION}",
        help="print version and exit",
    )
    subparsers = parser.add_subparsers(
        required=True,
    )
    for name, factory in (
        ("check", check_parser),
        ("render", render_parser),
        ("convert", convert_parser),
    ):
        factory(partial(subparsers.add_parser, name))
    return parser
