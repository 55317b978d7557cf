"""Pydantic models for Telegraph API values, page content and responses.

Every wrapper validates on construction through :mod:`pytelegraph.validation`,
and pydantic runs the very same validator when a model is decoded from JSON
or a mapping, so there is no unvalidated entry path. Failures raise the
exceptions in :mod:`pytelegraph.errors` in both cases.

Wrappers serialize as their bare inner value. Records omit fields that are
``None``. A content node serializes as a single-key object naming its
variant, ``{"TextLeaf": "..."}`` or ``{"ElementNode": {...}}``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    RootModel,
    SerializerFunctionWrapHandler,
    ValidationInfo,
    WrapSerializer,
    field_validator,
    model_serializer,
)

from .errors import UnknownMember
from .validation import (
    check_fewer_than,
    check_members,
    check_non_empty,
    check_range,
    check_shorter_than,
)

__all__ = (
    "ACCOUNT_FIELDS",
    "DEFAULT_FIELDS",
    "ATTRIBUTE_KEYS",
    "TAGS",
    "NODE_VARIANTS",
    "MAX_CONTENT_NODES",
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
)

ACCOUNT_FIELDS = ("short_name", "author_name", "author_url", "auth_url", "page_count")
DEFAULT_FIELDS = ("short_name", "author_name", "author_url")
ATTRIBUTE_KEYS = ("href", "src")
TAGS = (
    "a",
    "aside",
    "b",
    "blockquote",
    "br",
    "code",
    "em",
    "figcaption",
    "figure",
    "h3",
    "h4",
    "hr",
    "i",
    "iframe",
    "img",
    "li",
    "ol",
    "p",
    "pre",
    "s",
    "strong",
    "u",
    "ul",
    "video",
)
NODE_VARIANTS = ("TextLeaf", "ElementNode")
MAX_CONTENT_NODES = 64 * 1024


class _Record(BaseModel):
    """Frozen record whose ``None`` fields are left out when serialized."""

    model_config = ConfigDict(frozen=True)

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        return {key: value for key, value in handler(self).items() if value is not None}


class ShortName(RootModel[str]):
    """Account name, helps users with several accounts remember which they are
    currently using.

    Displayed to the user above the "Edit/Publish" button on Telegra.ph, other
    users don't see this name.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: str) -> str:
        return check_non_empty("short_name", value)


class AuthorName(RootModel[str]):
    """Default author name used when creating new articles."""

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: str) -> str:
        return check_shorter_than("author_name", value, 128)


class AuthorUrl(RootModel[str]):
    """Profile link, opened when users click on the author's name below the
    title.

    Can be any link, not necessarily to a Telegram profile or channel.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: str) -> str:
        return check_shorter_than("author_url", value, 512)


class Title(RootModel[str]):
    """Title of the page."""

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: str) -> str:
        check_non_empty("title", value)
        return check_shorter_than("title", value, 256)


class Fields(RootModel[tuple[str, ...]]):
    """List of account fields to return.

    Available fields: short_name, author_name, author_url, auth_url,
    page_count. An empty list stands for :data:`DEFAULT_FIELDS`. Repeated
    fields are kept once, in order of first appearance.
    """

    root: tuple[str, ...] = DEFAULT_FIELDS

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        check_members("fields", value, ACCOUNT_FIELDS)
        return tuple(dict.fromkeys(value)) or DEFAULT_FIELDS

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __contains__(self, field: object) -> bool:
        return field in self.root

    def __len__(self) -> int:
        return len(self.root)


class Limit(RootModel[int]):
    """Limits the number of pages to be retrieved, 0 - 200."""

    root: int = 50

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: int) -> int:
        return check_range("limit", value, 0, 200)


class Year(RootModel[int]):
    """Year of the requested page views, 2000 - 2100.

    Required if month is passed.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: int) -> int:
        return check_range("year", value, 2000, 2100)


class Month(RootModel[int]):
    """Month of the requested page views, 1 - 12.

    Required if day is passed.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: int) -> int:
        return check_range("month", value, 1, 12)


class Day(RootModel[int]):
    """Day of the requested page views, 1 - 31.

    Required if hour is passed.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: int) -> int:
        return check_range("day", value, 1, 31)


class Hour(RootModel[int]):
    """Hour of the requested page views, 0 - 24."""

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: int) -> int:
        return check_range("hour", value, 0, 24)


class Tag(RootModel[str]):
    """Name of the DOM element, one of :data:`TAGS`."""

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: str) -> str:
        check_members("tag", (value,), TAGS)
        return value


class Attrs(RootModel[Mapping[str, str]]):
    """Attributes of the DOM element.

    Key of object represents name of attribute, value represents value of
    attribute. Available attributes: href, src.

    The mapping is stored read-only, so attributes cannot change after
    validation and the wrapper stays hashable.
    """

    root: Mapping[str, str] = Field(default_factory=lambda: MappingProxyType({}))

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        check_members("attribute key", value, ATTRIBUTE_KEYS)
        return MappingProxyType(dict(value))

    @model_serializer
    def _dump(self) -> dict[str, str]:
        return dict(self.root)

    def __hash__(self) -> int:
        return hash(frozenset(self.root.items()))

    def with_attr(self, key: str, value: str) -> Attrs:
        """Return a copy with ``key`` set to ``value``."""
        return Attrs({**self.root, key: value})


class TextLeaf(RootModel[str]):
    """A DOM text node."""

    model_config = ConfigDict(frozen=True)

    def size(self) -> int:
        return len(self.root)


class ElementNode(_Record):
    """A DOM element node.

    Children are held in tuples owned by their parent, so the structure is
    always a tree.
    """

    tag: Tag
    attrs: Attrs | None = None
    children: tuple[Node, ...] | None = None

    def size(self) -> int:
        """Length of the tag, of the attribute dict repr and of every child.

        An empty :class:`TextLeaf` child has size 0, so adding one leaves the
        size unchanged; any other child increases it.
        """
        attrs = dict(self.attrs.root) if self.attrs is not None else None
        return (
            len(self.tag.root)
            + len(repr(attrs))
            + sum(child.size() for child in self.children or ())
        )


def _untag_node(data: Any) -> Any:
    if isinstance(data, (TextLeaf, ElementNode)):
        return data
    if isinstance(data, Mapping) and len(data) == 1:
        ((variant, payload),) = data.items()
        if variant == "TextLeaf":
            return TextLeaf.model_validate(payload)
        if variant == "ElementNode":
            return ElementNode.model_validate(payload)
        raise UnknownMember("node", variant, NODE_VARIANTS)
    raise UnknownMember("node", data, NODE_VARIANTS)


def _tag_node(
    node: TextLeaf | ElementNode, handler: SerializerFunctionWrapHandler
) -> dict[str, Any]:
    return {type(node).__name__: handler(node)}


Node = Annotated[
    TextLeaf | ElementNode,
    BeforeValidator(_untag_node),
    WrapSerializer(_tag_node),
]
"""A DOM node: either a :class:`TextLeaf` or an :class:`ElementNode`."""

ElementNode.model_rebuild()


class Content(RootModel[tuple[Node, ...]]):
    """Content of the page, a non-empty sequence of nodes.

    Holds fewer than :data:`MAX_CONTENT_NODES` top-level nodes; nested
    descendants are not counted.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _check(cls, value: tuple[TextLeaf | ElementNode, ...]):
        check_non_empty("content", value)
        return check_fewer_than("content", value, MAX_CONTENT_NODES)

    def __iter__(self) -> Iterator[TextLeaf | ElementNode]:  # type: ignore[override]
        return iter(self.root)

    def __getitem__(self, index: int) -> TextLeaf | ElementNode:
        return self.root[index]

    def __len__(self) -> int:
        return len(self.root)

    def size(self) -> int:
        return sum(node.size() for node in self.root)


def _check_count(value: int | None, info: ValidationInfo) -> int | None:
    if value is None:
        return value
    return check_range(info.field_name or "count", value, 0, None)


class Account(_Record):
    """This object represents a Telegraph account."""

    short_name: ShortName
    author_name: AuthorName | None = None
    author_url: AuthorUrl | None = None
    access_token: str | None = None
    """Only returned by the createAccount and revokeAccessToken method."""
    auth_url: str | None = None
    """URL to authorize a browser on telegra.ph and connect it to a Telegraph
    account. Valid for only one use and for 5 minutes only."""
    page_count: int | None = None
    """Number of pages belonging to the Telegraph account."""

    _counts = field_validator("page_count")(_check_count)

    @classmethod
    def minimal(cls, short_name: str) -> Account:
        """Return an account holding only a validated short name."""
        return cls(short_name=ShortName(short_name))


class Page(_Record):
    """This object represents a page on Telegraph."""

    path: str
    """Path to the page."""
    url: str
    """URL of the page."""
    title: Title
    description: str
    author_name: AuthorName | None = None
    author_url: AuthorUrl | None = None
    image_url: str | None = None
    content: Content | None = None
    views: int
    """Number of page views for the page."""
    can_edit: bool | None = None
    """Only returned if access_token passed. True, if the target Telegraph
    account can edit the page."""

    _counts = field_validator("views")(_check_count)

    @classmethod
    def minimal(
        cls, path: str, url: str, title: str, description: str, content: Content
    ) -> Page:
        """Return a page with no views and no optional metadata."""
        return cls(
            path=path,
            url=url,
            title=Title(title),
            description=description,
            content=content,
            views=0,
        )


class PageList(_Record):
    """A list of Telegraph articles belonging to an account.

    Most recently created articles first.
    """

    total_count: int = 0
    """Total number of pages belonging to the target Telegraph account."""
    pages: tuple[Page, ...] = ()
    """Requested pages of the target Telegraph account."""

    _counts = field_validator("total_count")(_check_count)


class PageViews(_Record):
    """The number of page views for a Telegraph article."""

    views: int = 0

    _counts = field_validator("views")(_check_count)
