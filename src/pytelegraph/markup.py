"""Conversion between page content nodes and HTML.

Telegraph describes page content as a subset of the DOM. This module renders
nodes back to HTML (and, through ``html2text``, to a Markdown preview) and
parses HTML fragments into validated :class:`~pytelegraph.models.Content`.
"""

from collections.abc import Iterable
from html import escape

from bs4 import BeautifulSoup, NavigableString
from bs4 import Tag as _SoupTag
from bs4.element import PageElement, PreformattedString
from html2text import HTML2Text

from .models import ATTRIBUTE_KEYS, Attrs, Content, ElementNode, Tag, TextLeaf

__all__ = (
    "VOID_TAGS",
    "render_html",
    "render_markdown",
    "parse_html",
)

VOID_TAGS = frozenset({"br", "hr", "img"})


def _render(node: TextLeaf | ElementNode, out: list[str]) -> None:
    if isinstance(node, TextLeaf):
        out.append(escape(node.root, quote=False))
        return
    tag = node.tag.root
    attrs = node.attrs.root if node.attrs is not None else {}
    out.append(
        f"<{tag}"
        + "".join(f' {key}="{escape(value)}"' for key, value in attrs.items())
        + ">"
    )
    if tag in VOID_TAGS:
        return
    for child in node.children or ():
        _render(child, out)
    out.append(f"</{tag}>")


def render_html(nodes: Iterable[TextLeaf | ElementNode]) -> str:
    """Render nodes as an HTML fragment.

    Text and attribute values are escaped. Void elements (``br``, ``hr``,
    ``img``) are emitted without a closing tag and their children, if any,
    are not rendered.
    """

    out: list[str] = []
    for node in nodes:
        _render(node, out)
    return "".join(out)


def render_markdown(nodes: Iterable[TextLeaf | ElementNode]) -> str:
    """Render nodes as Markdown by passing their HTML through ``html2text``."""

    htm_md = HTML2Text()
    htm_md.body_width = 0
    htm_md.emphasis_mark = "_"
    htm_md.single_line_break = True
    htm_md.strong_mark = "__"
    htm_md.ul_item_mark = "-"
    return htm_md.handle(render_html(nodes)).strip()


def _convert(item: PageElement) -> TextLeaf | ElementNode | None:
    if isinstance(item, PreformattedString):
        # comments, doctypes and processing instructions
        return None
    if isinstance(item, NavigableString):
        return TextLeaf(str(item)) if item else None
    if not isinstance(item, _SoupTag):
        return None
    attrs = {
        key: value
        for key, value in item.attrs.items()
        if key in ATTRIBUTE_KEYS and isinstance(value, str)
    }
    return ElementNode(
        tag=Tag(item.name),
        attrs=Attrs(attrs) if attrs else None,
        children=_convert_all(item.contents) or None,
    )


def _convert_all(items: Iterable[PageElement]) -> tuple[TextLeaf | ElementNode, ...]:
    return tuple(
        node for node in (_convert(item) for item in items) if node is not None
    )


def parse_html(html: str) -> Content:
    """Parse an HTML fragment into page content.

    Elements outside :data:`~pytelegraph.models.TAGS` raise
    :class:`~pytelegraph.errors.UnknownMember`; attributes other than
    ``href`` and ``src`` are dropped, as are comments. Unclosed elements are
    closed at the end of the fragment and stray end tags are ignored. An empty
    fragment raises :class:`~pytelegraph.errors.Empty`.
    """

    soup = BeautifulSoup(html, "html.parser")
    return Content(_convert_all(soup.contents))
