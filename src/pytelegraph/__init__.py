"""Typed models for the Telegraph publishing API.

The API accepts GET and POST requests and answers with a JSON object whose
Boolean ``ok`` field tells whether the request succeeded; the payload is then
in ``result``, otherwise ``error`` explains the failure (for example
``SHORT_NAME_REQUIRED``). This package does not talk to the API itself: it
provides the validated values, page content tree and response records
(:mod:`pytelegraph.models`), and request models whose ``run`` coroutine
delegates to a caller-supplied transport (:mod:`pytelegraph.methods`).

Package metadata lives in :mod:`pytelegraph.meta`.
"""

from .errors import (
    Empty,
    OutOfRange,
    TooLarge,
    TooLong,
    UnknownMember,
    ValidationError,
)
from .methods import (
    CreateAccount,
    CreatePage,
    EditAccountInfo,
    EditPage,
    GetAccountInfo,
    GetPage,
    GetPageList,
    GetViews,
    RevokeAccessToken,
    Transport,
)
from .models import (
    Account,
    Attrs,
    AuthorName,
    AuthorUrl,
    Content,
    Day,
    ElementNode,
    Fields,
    Hour,
    Limit,
    Month,
    Node,
    Page,
    PageList,
    PageViews,
    ShortName,
    Tag,
    TextLeaf,
    Title,
    Year,
)

__all__ = (
    "ValidationError",
    "Empty",
    "TooLong",
    "TooLarge",
    "OutOfRange",
    "UnknownMember",
    "ShortName",
    "AuthorName",
    "AuthorUrl",
    "Title",
    "Fields",
    "Limit",
    "Year",
    "Month",
    "Day",
    "Hour",
    "Tag",
    "Attrs",
    "TextLeaf",
    "ElementNode",
    "Node",
    "Content",
    "Account",
    "Page",
    "PageList",
    "PageViews",
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
