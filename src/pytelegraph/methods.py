"""Request models for the Telegraph API methods.

Each request holds validated parameters and a :meth:`run` coroutine that
hands the request to a caller-supplied transport. The transport performs the
actual network I/O, decodes the response (``request.RESPONSE`` names the
expected record type) and returns it; :meth:`run` awaits it once and returns
the result unchanged. Exceptions raised by the transport propagate as-is.

Requests are frozen: derive a new request with different parameters through
the constructor or :meth:`from_raw` so that every value is validated again.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any, ClassVar, Self, TypeVar

from pydantic import BaseModel, Field, field_validator, model_validator

from .errors import Empty
from .meta import LOGGER
from .models import (
    Account,
    AuthorName,
    AuthorUrl,
    Content,
    Day,
    ElementNode,
    Fields,
    Hour,
    Limit,
    Month,
    Page,
    PageList,
    PageViews,
    ShortName,
    TextLeaf,
    Title,
    Year,
    _Record,
)
from .validation import check_range

__all__ = (
    "Transport",
    "CreateAccount",
    "EditAccountInfo",
    "GetAccountInfo",
    "RevokeAccessToken",
    "CreatePage",
    "EditPage",
    "GetPage",
    "GetPageList",
    "GetViews",
)

_Q = TypeVar("_Q")
_R = TypeVar("_R")
_W = TypeVar("_W")

Transport = Callable[[_Q], Awaitable[_R]]
"""An asynchronous function performing a request and returning its response."""


def _optional(wrapper: Callable[[Any], _W], value: Any) -> _W | None:
    return None if value is None else wrapper(value)


def _content(content: Content | Iterable[TextLeaf | ElementNode]) -> Content:
    return content if isinstance(content, Content) else Content(tuple(content))


class _Method(_Record):
    METHOD: ClassVar[str]
    RESPONSE: ClassVar[type[BaseModel]]

    async def run(self, transport: Callable[[Self], Awaitable[_R]]) -> _R:
        """Perform this request through ``transport`` and return its result."""
        LOGGER.debug(f"Running {self.METHOD}")
        return await transport(self)


class CreateAccount(_Method):
    """Create a new Telegraph account.

    Most users only need one account, but this can be useful for channel
    administrators who would like to keep individual author names and profile
    links for each of their channels. On success, returns an :class:`Account`
    with the regular fields and an additional ``access_token`` field.

    Sample request:
    ``https://api.telegra.ph/createAccount?short_name=Sandbox&author_name=Anonymous``
    """

    METHOD: ClassVar[str] = "createAccount"
    RESPONSE: ClassVar[type[BaseModel]] = Account

    short_name: ShortName
    author_name: AuthorName | None = None
    author_url: AuthorUrl | None = None

    @classmethod
    def from_raw(
        cls,
        short_name: str,
        author_name: str | None = None,
        author_url: str | None = None,
    ) -> CreateAccount:
        return cls(
            short_name=ShortName(short_name),
            author_name=_optional(AuthorName, author_name),
            author_url=_optional(AuthorUrl, author_url),
        )


class EditAccountInfo(_Method):
    """Update information about a Telegraph account.

    On success, returns an :class:`Account` with the default fields.
    """

    METHOD: ClassVar[str] = "editAccountInfo"
    RESPONSE: ClassVar[type[BaseModel]] = Account

    access_token: str
    short_name: ShortName
    author_name: AuthorName | None = None
    author_url: AuthorUrl | None = None

    @classmethod
    def from_raw(
        cls,
        access_token: str,
        short_name: str,
        author_name: str | None = None,
        author_url: str | None = None,
    ) -> EditAccountInfo:
        return cls(
            access_token=access_token,
            short_name=ShortName(short_name),
            author_name=_optional(AuthorName, author_name),
            author_url=_optional(AuthorUrl, author_url),
        )


class GetAccountInfo(_Method):
    """Get information about a Telegraph account.

    ``fields`` defaults to short_name, author_name and author_url.
    """

    METHOD: ClassVar[str] = "getAccountInfo"
    RESPONSE: ClassVar[type[BaseModel]] = Account

    access_token: str
    fields: Fields = Field(default_factory=Fields)

    @classmethod
    def from_raw(cls, access_token: str, fields: Iterable[str] = ()) -> GetAccountInfo:
        return cls(access_token=access_token, fields=Fields(tuple(fields)))


class RevokeAccessToken(_Method):
    """Revoke ``access_token`` and generate a new one.

    Useful when the user would like to reset all connected sessions, or the
    token may have been compromised. On success, returns an :class:`Account`
    with new ``access_token`` and ``auth_url`` fields.
    """

    METHOD: ClassVar[str] = "revokeAccessToken"
    RESPONSE: ClassVar[type[BaseModel]] = Account

    access_token: str


class CreatePage(_Method):
    """Create a new Telegraph page. On success, returns a :class:`Page`.

    If ``return_content`` is true, the returned page includes its content.
    """

    METHOD: ClassVar[str] = "createPage"
    RESPONSE: ClassVar[type[BaseModel]] = Page

    access_token: str
    title: Title
    content: Content
    author_name: AuthorName | None = None
    author_url: AuthorUrl | None = None
    return_content: bool = False

    @classmethod
    def from_raw(
        cls,
        access_token: str,
        title: str,
        content: Content | Iterable[TextLeaf | ElementNode],
        author_name: str | None = None,
        author_url: str | None = None,
        return_content: bool = False,
    ) -> CreatePage:
        return cls(
            access_token=access_token,
            title=Title(title),
            content=_content(content),
            author_name=_optional(AuthorName, author_name),
            author_url=_optional(AuthorUrl, author_url),
            return_content=return_content,
        )


class EditPage(_Method):
    """Edit an existing Telegraph page. On success, returns a :class:`Page`."""

    METHOD: ClassVar[str] = "editPage"
    RESPONSE: ClassVar[type[BaseModel]] = Page

    access_token: str
    path: str
    title: Title
    content: Content
    author_name: AuthorName | None = None
    author_url: AuthorUrl | None = None
    return_content: bool = False

    @classmethod
    def from_raw(
        cls,
        access_token: str,
        path: str,
        title: str,
        content: Content | Iterable[TextLeaf | ElementNode],
        author_name: str | None = None,
        author_url: str | None = None,
        return_content: bool = False,
    ) -> EditPage:
        return cls(
            access_token=access_token,
            path=path,
            title=Title(title),
            content=_content(content),
            author_name=_optional(AuthorName, author_name),
            author_url=_optional(AuthorUrl, author_url),
            return_content=return_content,
        )


class GetPage(_Method):
    """Get a Telegraph page. Returns a :class:`Page` on success.

    ``path`` is everything that comes after ``https://telegra.ph/``, in the
    format ``Title-12-31``.
    """

    METHOD: ClassVar[str] = "getPage"
    RESPONSE: ClassVar[type[BaseModel]] = Page

    path: str
    return_content: bool = False


class GetPageList(_Method):
    """Get a list of pages belonging to a Telegraph account.

    Returns a :class:`PageList`, sorted by most recently created pages first.
    """

    METHOD: ClassVar[str] = "getPageList"
    RESPONSE: ClassVar[type[BaseModel]] = PageList

    access_token: str
    offset: int = 0
    """Sequential number of the first page to be returned."""
    limit: Limit = Field(default_factory=Limit)

    @field_validator("offset")
    @classmethod
    def _check_offset(cls, value: int) -> int:
        return check_range("offset", value, 0, None)

    @classmethod
    def from_raw(cls, access_token: str, offset: int = 0, limit: int = 50) -> GetPageList:
        return cls(access_token=access_token, offset=offset, limit=Limit(limit))


class GetViews(_Method):
    """Get the number of views for a Telegraph article.

    By default, the total number of page views is returned. Passing ``year``,
    ``month``, ``day`` and ``hour`` narrows the count; each of them requires
    the coarser ones before it.

    Sample request: ``https://api.telegra.ph/getViews/Sample-Page-12-15?year=2016&month=12``
    """

    METHOD: ClassVar[str] = "getViews"
    RESPONSE: ClassVar[type[BaseModel]] = PageViews

    path: str
    year: Year | None = None
    month: Month | None = None
    day: Day | None = None
    hour: Hour | None = None

    @model_validator(mode="after")
    def _check_companions(self) -> Self:
        for field, companion in (("month", "year"), ("day", "month"), ("hour", "day")):
            if getattr(self, field) is not None and getattr(self, companion) is None:
                raise Empty(
                    companion,
                    None,
                    reason=f"{companion} is required when {field} is passed",
                )
        return self

    @classmethod
    def from_raw(
        cls,
        path: str,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
        hour: int | None = None,
    ) -> GetViews:
        return cls(
            path=path,
            year=_optional(Year, year),
            month=_optional(Month, month),
            day=_optional(Day, day),
            hour=_optional(Hour, hour),
        )
