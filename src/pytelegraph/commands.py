"""Offline command line tools for Telegraph documents.

This module implements the ``check``, ``render`` and ``convert``
subcommands: each has a coroutine doing the work and a `parser` factory
wiring it into argparse. Documents are JSON encodings of the models in
:mod:`pytelegraph.models` or HTML fragments; no network access happens here.
"""

from argparse import (
    ONE_OR_MORE as _ONE_OR_MORE,
)
from argparse import (
    ArgumentParser as _ArgParser,
)
from argparse import (
    Namespace as _NS,
)
from asyncio import gather as _gather
from dataclasses import dataclass as _dc
from enum import IntFlag as _IntFlag
from enum import auto as _auto
from enum import unique as _unq
from functools import wraps as _wraps
from sys import exit as _exit
from sys import stdout as _stdout
from typing import (
    Any as _Any,
)
from typing import (
    Callable as _Call,
)
from typing import (
    ClassVar as _ClsVar,
)
from typing import (
    Collection as _Coll,
)
from typing import (
    Literal as _Lit,
)
from typing import (
    Mapping as _Map,
)
from typing import (
    Sequence as _Seq,
)
from typing import (
    TypeVar as _TVar,
)
from typing import (
    final as _fin,
)

from anyio import Path as _Path
from pydantic import TypeAdapter as _TypeAdapter

from .markup import (
    parse_html as _parse_html,
)
from .markup import (
    render_html as _render_html,
)
from .markup import (
    render_markdown as _render_markdown,
)
from .meta import (
    LOGGER as _LOGGER,
)
from .meta import (
    OPEN_TEXT_OPTIONS as _OPEN_TXT_OPTS,
)
from .meta import (
    VERSION as _VER,
)
from .models import (
    Account as _Account,
)
from .models import (
    Content as _Content,
)
from .models import (
    ElementNode as _ElemNode,
)
from .models import (
    Node as _Node,
)
from .models import (
    Page as _Page,
)
from .models import (
    PageList as _PageList,
)
from .models import (
    PageViews as _PageViews,
)
from .models import (
    TextLeaf as _TextLeaf,
)

__all__ = (
    "ENTITIES",
    "ExitCode",
    "CheckArgs",
    "RenderArgs",
    "ConvertArgs",
    "check",
    "render",
    "convert",
    "check_parser",
    "render_parser",
    "convert_parser",
)

_T = _TVar("_T")

ENTITIES: _Map[str, _TypeAdapter[_Any]] = {
    "content": _TypeAdapter(_Content),
    "node": _TypeAdapter(_Node),
    "account": _TypeAdapter(_Account),
    "page": _TypeAdapter(_Page),
    "page-list": _TypeAdapter(_PageList),
    "page-views": _TypeAdapter(_PageViews),
}


@_fin
@_unq
class ExitCode(_IntFlag):
    """Exit codes representing various error and partial-error conditions.

    Each member corresponds to a phase or a class of failure. The bits can be
    combined, for example a partial decode error plus a generic error.
    """

    __slots__: _ClsVar = ()

    GENERIC_ERROR = _auto()
    READ_ERROR = _auto()
    DECODE_ERROR = _auto()
    WRITE_ERROR = _auto()
    DECODE_ERROR_PARTIAL = _auto()


@_fin
@_dc(frozen=True, kw_only=True, slots=True)
class CheckArgs:
    """Immutable container for parsed ``check`` arguments.

    Attributes:
        entity: key of :data:`ENTITIES` to decode every input as
        inputs: JSON documents to check
        ignore_individual_errors: if True, continue on individual file errors
    """

    entity: str
    inputs: _Seq[_Path]
    ignore_individual_errors: bool

    def __post_init__(self):
        object.__setattr__(self, "inputs", tuple(self.inputs))


@_fin
@_dc(frozen=True, kw_only=True, slots=True)
class RenderArgs:
    """Immutable container for parsed ``render`` arguments."""

    input: _Path
    output: _Path | None
    format: _Lit["html", "markdown"]


@_fin
@_dc(frozen=True, kw_only=True, slots=True)
class ConvertArgs:
    """Immutable container for parsed ``convert`` arguments."""

    input: _Path
    output: _Path | None


def _handle_partial_errors(
    results: _Coll[_T | BaseException],
    *,
    ignore_individual_errors: bool,
    error_message: str = "Error",
) -> tuple[bool, _Coll[_T]]:
    """Separate exceptions from values in gathered results.

    ``results`` comes from `gather(..., return_exceptions=True)`. Non-Exception
    base exceptions are always re-raised as a group. Exceptions are raised as
    a group unless `ignore_individual_errors` is set, in which case they are
    logged. Returns `(error_flag, successful_results)`.
    """

    error = False
    base_exceptions = tuple(
        result for result in results if isinstance(result, BaseException)
    )
    exceptions = tuple(exc for exc in base_exceptions if isinstance(exc, Exception))
    if len(exceptions) < len(base_exceptions):
        raise BaseExceptionGroup(error_message, base_exceptions)
    if exceptions:
        exception_group = ExceptionGroup(error_message, exceptions)
        if not ignore_individual_errors:
            raise exception_group
        try:
            raise exception_group
        except ExceptionGroup:
            _LOGGER.exception(error_message)
            error = True
    return error, tuple(
        result for result in results if not isinstance(result, BaseException)
    )


def _describe(value: object) -> str:
    if isinstance(value, _Content):
        return f"{len(value)} top-level nodes, size {value.size()}"
    if isinstance(value, (_TextLeaf, _ElemNode)):
        return f"{type(value).__name__}, size {value.size()}"
    if isinstance(value, _PageList):
        return f"{len(value.pages)} of {value.total_count} pages"
    return f"valid {type(value).__name__}"


async def _read_text(path: _Path) -> str:
    async with await path.open(mode="rt", **_OPEN_TXT_OPTS) as file:
        return await file.read()


async def _write_text(path: _Path | None, text: str) -> None:
    if path is None:
        _stdout.write(text)
        _stdout.flush()
        return
    await path.parent.mkdir(parents=True, exist_ok=True)
    async with await path.open(mode="wt", **_OPEN_TXT_OPTS) as file:
        await file.write(text)


async def check(args: CheckArgs):
    """Decode every input as `args.entity` and log a summary of each.

    Inputs are deduplicated. Individual failures either abort the run or,
    with `ignore_individual_errors`, are logged and flagged as partial.
    Calls `sys.exit` with the resulting exit code.
    """

    ec = ExitCode(0)

    try:
        adapter = ENTITIES[args.entity]
        inputs = tuple(dict.fromkeys(args.inputs))
        try:
            _LOGGER.info(f"Checking {len(inputs)} files as {args.entity}")

            async def check_one(path: _Path):
                value = adapter.validate_json(await _read_text(path))
                _LOGGER.info(f"'{path}': {_describe(value)}")
                return value

            results = await _gather(*map(check_one, inputs), return_exceptions=True)
            error, _ = _handle_partial_errors(
                results,
                ignore_individual_errors=args.ignore_individual_errors,
                error_message="Error checking",
            )
            if error:
                ec |= ExitCode.DECODE_ERROR_PARTIAL
        except Exception:
            _LOGGER.exception("Error checking")
            ec |= ExitCode.DECODE_ERROR
            raise
    except Exception:
        _LOGGER.exception("Error")
        ec |= ExitCode.GENERIC_ERROR

    _exit(ec)


async def render(args: RenderArgs):
    """Render a content document as HTML or Markdown.

    Reads `args.input`, decodes it as :class:`Content`, and writes the
    rendering to `args.output` or standard output. Calls `sys.exit` with the
    resulting exit code.
    """

    ec = ExitCode(0)

    try:
        try:
            _LOGGER.info(f"Reading '{args.input}'")
            text = await _read_text(args.input)
        except Exception:
            _LOGGER.exception("Error reading")
            ec |= ExitCode.READ_ERROR
            raise
        try:
            content = _Content.model_validate_json(text)
            rendered = (
                _render_markdown(content)
                if args.format == "markdown"
                else _render_html(content)
            )
        except Exception:
            _LOGGER.exception("Error decoding")
            ec |= ExitCode.DECODE_ERROR
            raise
        try:
            _LOGGER.info(f"Rendering {len(content)} nodes as {args.format}")
            await _write_text(args.output, rendered + "\n")
        except Exception:
            _LOGGER.exception("Error writing")
            ec |= ExitCode.WRITE_ERROR
            raise
    except Exception:
        _LOGGER.exception("Error")
        ec |= ExitCode.GENERIC_ERROR

    _exit(ec)


async def convert(args: ConvertArgs):
    """Parse an HTML fragment and write it as a content document.

    Calls `sys.exit` with the resulting exit code.
    """

    ec = ExitCode(0)

    try:
        try:
            _LOGGER.info(f"Reading '{args.input}'")
            text = await _read_text(args.input)
        except Exception:
            _LOGGER.exception("Error reading")
            ec |= ExitCode.READ_ERROR
            raise
        try:
            content = _parse_html(text)
        except Exception:
            _LOGGER.exception("Error parsing")
            ec |= ExitCode.DECODE_ERROR
            raise
        try:
            _LOGGER.info(f"Writing {len(content)} nodes")
            await _write_text(args.output, content.model_dump_json(indent=2) + "\n")
        except Exception:
            _LOGGER.exception("Error writing")
            ec |= ExitCode.WRITE_ERROR
            raise
    except Exception:
        _LOGGER.exception("Error")
        ec |= ExitCode.GENERIC_ERROR

    _exit(ec)


def _base_parser(
    parent: _Call[..., _ArgParser] | None, name: str, description: str
):
    prog = f"{__package__ or __name__} {name}"

    parser = (_ArgParser if parent is None else parent)(
        prog=f"python -m {prog}",
        description=description,
        add_help=True,
        allow_abbrev=False,
        exit_on_error=False,
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"{prog} v{_VER}",
        help="print version and exit",
    )
    return parser


def check_parser(parent: _Call[..., _ArgParser] | None = None):
    """Return an argparse parser configured for the ``check`` subcommand.

    When embedded, `parent` can be a callable that produces an `_ArgParser`.
    """

    parser = _base_parser(parent, "check", "validate Telegraph JSON documents")
    parser.add_argument(
        "--ignore-individual-errors",
        action="store_true",
        default=False,
        help="ignore errors from individual files",
        dest="ignore_individual_errors",
    )
    parser.add_argument(
        "entity",
        action="store",
        choices=tuple(ENTITIES),
        help="kind of document",
    )
    parser.add_argument(
        "inputs",
        action="store",
        nargs=_ONE_OR_MORE,
        type=_Path,
        help="sequence of JSON file(s) to check",
    )

    @_wraps(check)
    async def invoke(args: _NS):
        await check(
            CheckArgs(
                entity=args.entity,
                inputs=args.inputs,
                ignore_individual_errors=args.ignore_individual_errors,
            )
        )

    parser.set_defaults(invoke=invoke)
    return parser


def render_parser(parent: _Call[..., _ArgParser] | None = None):
    """Return an argparse parser configured for the ``render`` subcommand."""

    parser = _base_parser(parent, "render", "render page content as HTML or Markdown")
    parser.add_argument(
        "-f",
        "--format",
        action="store",
        choices=("html", "markdown"),
        default="html",
        help="output format",
    )
    parser.add_argument(
        "-o",
        "--output",
        action="store",
        type=_Path,
        help="output file (default: standard output)",
    )
    parser.add_argument(
        "input",
        action="store",
        type=_Path,
        help="content JSON file",
    )

    @_wraps(render)
    async def invoke(args: _NS):
        await render(
            RenderArgs(input=args.input, output=args.output, format=args.format)
        )

    parser.set_defaults(invoke=invoke)
    return parser


def convert_parser(parent: _Call[..., _ArgParser] | None = None):
    """Return an argparse parser configured for the ``convert`` subcommand."""

    parser = _base_parser(parent, "convert", "convert an HTML fragment to page content")
    parser.add_argument(
        "-o",
        "--output",
        action="store",
        type=_Path,
        help="output file (default: standard output)",
    )
    parser.add_argument(
        "input",
        action="store",
        type=_Path,
        help="HTML file",
    )

    @_wraps(convert)
    async def invoke(args: _NS):
        await convert(ConvertArgs(input=args.input, output=args.output))

    parser.set_defaults(invoke=invoke)
    return parser
