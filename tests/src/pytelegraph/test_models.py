"""Unit tests for the validated wrappers, content tree and records.

Covers construction and decoding of every wrapper against its bounds, the
closed vocabularies, the tagged node encoding, the content ceiling and the
omission of absent record fields.
"""

import json
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import TypeAdapter

from pytelegraph.errors import (
    Empty,
    OutOfRange,
    TooLarge,
    TooLong,
    UnknownMember,
    ValidationError,
)
from pytelegraph.models import (
    ACCOUNT_FIELDS,
    ATTRIBUTE_KEYS,
    DEFAULT_FIELDS,
    MAX_CONTENT_NODES,
    TAGS,
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

__all__ = ()

_NODE = TypeAdapter(Node)
_CHARS = st.characters(blacklist_categories=("Cs",))


@given(st.text(max_size=40))
def test_short_name_accepts_any_non_empty_string(s: str) -> None:
    """`ShortName` succeeds iff the string is non-empty, via both entry paths."""
    if s:
        assert ShortName(s).root == s
        assert ShortName.model_validate(s) == ShortName(s)
    else:
        with pytest.raises(Empty):
            ShortName(s)
        with pytest.raises(Empty):
            ShortName.model_validate_json(json.dumps(s))


@given(st.text(max_size=300))
def test_title_length_bounds(s: str) -> None:
    """`Title` accepts 1 <= len < 256 and reports the failing constraint."""
    if not s:
        with pytest.raises(Empty):
            Title(s)
    elif len(s) >= 256:
        with pytest.raises(TooLong) as info:
            Title.model_validate(s)
        assert info.value.limit == 256
        assert info.value.field == "title"
    else:
        assert Title(s).root == s


@pytest.mark.parametrize(
    "wrapper,limit",
    [(AuthorName, 128), (AuthorUrl, 512)],
)
def test_author_wrappers_exclusive_ceiling(wrapper: Any, limit: int) -> None:
    """Author name and URL accept up to `limit - 1` characters, including empty."""
    assert wrapper("").root == ""
    assert wrapper("x" * (limit - 1)).root == "x" * (limit - 1)
    with pytest.raises(TooLong):
        wrapper("x" * limit)
    with pytest.raises(TooLong):
        wrapper.model_validate_json(json.dumps("x" * limit))


def test_length_counts_characters_not_bytes() -> None:
    """Multi-byte characters count once each."""
    assert AuthorName("é" * 127).root == "é" * 127


def test_title_boundary_with_multi_byte_text() -> None:
    """A title of 255 multi-byte characters fits; 256 does not."""
    assert Title("é" * 255).root == "é" * 255
    assert Title("\N{GRINNING FACE}" * 255).root == "\N{GRINNING FACE}" * 255
    with pytest.raises(TooLong) as info:
        Title("é" * 256)
    assert info.value.value == "é" * 256


@pytest.mark.parametrize(
    "wrapper,values",
    [
        (ShortName, st.text(_CHARS, min_size=1, max_size=40)),
        (AuthorName, st.text(_CHARS, max_size=127)),
        (AuthorUrl, st.text(_CHARS, max_size=200)),
        (Title, st.text(_CHARS, min_size=1, max_size=255)),
        (Fields, st.lists(st.sampled_from(ACCOUNT_FIELDS), max_size=8)),
        (Limit, st.integers(0, 200)),
        (Year, st.integers(2000, 2100)),
        (Month, st.integers(1, 12)),
        (Day, st.integers(1, 31)),
        (Hour, st.integers(0, 24)),
        (Tag, st.sampled_from(TAGS)),
        (Attrs, st.dictionaries(st.sampled_from(ATTRIBUTE_KEYS), st.text(_CHARS))),
    ],
)
@given(data=st.data())
def test_wrappers_decode_their_own_encoding(
    wrapper: Any, values: st.SearchStrategy[Any], data: st.DataObject
) -> None:
    """Decoding a wrapper's JSON encoding gives back an equal wrapper."""
    value = wrapper(data.draw(values))
    assert wrapper.model_validate_json(value.model_dump_json()) == value


@pytest.mark.parametrize(
    "wrapper,minimum,maximum",
    [
        (Limit, 0, 200),
        (Year, 2000, 2100),
        (Month, 1, 12),
        (Day, 1, 31),
        (Hour, 0, 24),
    ],
)
@given(n=st.integers(min_value=-50, max_value=2200))
def test_numeric_wrappers_inclusive_ranges(
    wrapper: Any, minimum: int, maximum: int, n: int
) -> None:
    """Each numeric wrapper accepts exactly its inclusive range on both paths."""
    if minimum <= n <= maximum:
        assert wrapper(n).root == n
        assert wrapper.model_validate_json(str(n)) == wrapper(n)
    else:
        with pytest.raises(OutOfRange) as info:
            wrapper(n)
        assert (info.value.minimum, info.value.maximum) == (minimum, maximum)
        assert info.value.value == n
        with pytest.raises(OutOfRange):
            wrapper.model_validate(n)


def test_range_edges() -> None:
    """Spot-check the edges that differ between the date parts."""
    assert Hour(24).root == 24
    assert Day(31).root == 31
    with pytest.raises(OutOfRange):
        Month(13)
    with pytest.raises(OutOfRange):
        Day(0)
    with pytest.raises(OutOfRange):
        Year(2101)


def test_limit_defaults_to_fifty() -> None:
    """`Limit()` without a value is 50."""
    assert Limit().root == 50


def test_fields_default_on_empty() -> None:
    """Empty input, or no input, yields the three default fields."""
    assert Fields([]).root == DEFAULT_FIELDS
    assert Fields().root == DEFAULT_FIELDS
    assert set(Fields.model_validate([])) == {"short_name", "author_name", "author_url"}


def test_fields_preserves_order_and_drops_repeats() -> None:
    """Fields keep the source order and keep each name once."""
    fields = Fields(["page_count", "short_name", "page_count"])
    assert fields.root == ("page_count", "short_name")
    assert "short_name" in fields
    assert len(fields) == 2
    assert fields.model_dump() == ("page_count", "short_name")


def test_fields_rejects_unknown_member() -> None:
    """An unknown field name fails the same way on both paths."""
    with pytest.raises(UnknownMember) as info:
        Fields(["short_name", "password"])
    assert info.value.value == "password"
    assert info.value.allowed == ACCOUNT_FIELDS
    with pytest.raises(UnknownMember):
        Fields.model_validate_json('["password"]')


@given(st.sampled_from(TAGS))
def test_tag_accepts_vocabulary(tag: str) -> None:
    """Every allowed tag name is accepted."""
    assert Tag(tag).root == tag


@pytest.mark.parametrize("tag", ["class", "div", "h1", "A", ""])
def test_tag_rejects_unknown_names(tag: str) -> None:
    """Names outside the 24-tag vocabulary raise `UnknownMember`."""
    with pytest.raises(UnknownMember):
        Tag(tag)


def test_tag_vocabulary_is_exact() -> None:
    """The vocabulary holds exactly 24 names, blockquote among them."""
    assert len(set(TAGS)) == 24
    assert Tag("blockquote").root == "blockquote"


def test_attrs_rejects_unknown_keys() -> None:
    """Only `href` and `src` are accepted as attribute keys."""
    assert Attrs({"href": "https://x/", "src": "/a.png"}).root["src"] == "/a.png"
    with pytest.raises(UnknownMember):
        Attrs({"_href": "https://x/"})
    with pytest.raises(UnknownMember):
        Attrs.model_validate_json('{"href": "a", "class": "b"}')


def test_attrs_with_attr_returns_new_validated_copy() -> None:
    """`with_attr` returns a new mapping and validates the key."""
    attrs = Attrs()
    updated = attrs.with_attr("href", "https://x/")
    assert attrs.root == {}
    assert updated.root == {"href": "https://x/"}
    with pytest.raises(UnknownMember):
        updated.with_attr("style", "color: red")


def test_attrs_cannot_change_after_construction() -> None:
    """Attribute mappings are read-only and detached from their input."""
    raw = {"href": "https://x/"}
    node = ElementNode(tag=Tag("a"), attrs=Attrs(raw))
    raw["src"] = "/a.png"
    assert node.attrs is not None
    assert node.attrs.root == {"href": "https://x/"}
    with pytest.raises(TypeError):
        node.attrs.root["onclick"] = "alert(1)"  # type: ignore[index]
    content = Content((node,))
    assert Content.model_validate_json(content.model_dump_json()) == content


def test_nodes_with_attributes_are_hashable() -> None:
    """Equal attributes, nodes and content hash equally."""
    built = ElementNode(tag=Tag("a"), attrs=Attrs({"href": "x", "src": "y"}))
    decoded = ElementNode.model_validate(
        {"tag": "a", "attrs": {"src": "y", "href": "x"}}
    )
    assert hash(Attrs({"href": "x"})) == hash(Attrs({"href": "x"}))
    assert hash(built) == hash(decoded)
    assert len({built, decoded}) == 1
    assert hash(Content((built,))) == hash(Content((decoded,)))


def test_validation_errors_share_a_base() -> None:
    """Every error kind is a `ValidationError` with an actionable message."""
    with pytest.raises(ValidationError) as info:
        Year(1999)
    assert "year" in str(info.value)
    assert "1999" in str(info.value)
    assert "2000 - 2100" in str(info.value)


def test_element_node_end_to_end_decoding() -> None:
    """A nested element decodes into typed nodes and re-encodes equivalently."""
    raw = {
        "tag": "a",
        "attrs": {"href": "https://x/"},
        "children": [
            {"TextLeaf": "hi"},
            {"ElementNode": {"tag": "figure"}},
        ],
    }
    node = ElementNode.model_validate(raw)

    assert node.tag == Tag("a")
    assert node.attrs is not None
    assert node.attrs.root == {"href": "https://x/"}
    assert node.children is not None
    leaf, figure = node.children
    assert leaf == TextLeaf("hi")
    assert isinstance(figure, ElementNode)
    assert figure.tag.root == "figure"
    assert figure.attrs is None
    assert figure.children is None

    assert node.model_dump(mode="json") == raw
    assert ElementNode.model_validate_json(node.model_dump_json()) == node


def test_node_uses_variant_name_as_discriminant() -> None:
    """Nodes encode as single-key objects naming their variant."""
    assert _NODE.dump_python(TextLeaf("hi")) == {"TextLeaf": "hi"}
    assert _NODE.dump_python(ElementNode(tag=Tag("br"))) == {
        "ElementNode": {"tag": "br"}
    }
    assert _NODE.validate_python({"TextLeaf": "hi"}) == TextLeaf("hi")


@pytest.mark.parametrize(
    "raw",
    [
        "bare text",
        {"String": "hi"},
        {"TextLeaf": "hi", "ElementNode": {"tag": "p"}},
        {},
    ],
)
def test_node_rejects_untagged_shapes(raw: Any) -> None:
    """Anything but a single known variant key raises `UnknownMember`."""
    with pytest.raises(UnknownMember):
        _NODE.validate_python(raw)


def test_nested_invalid_tag_surfaces_unchanged() -> None:
    """A bad tag deep in the tree raises the same error as direct construction."""
    raw = {"tag": "p", "children": [{"ElementNode": {"tag": "script"}}]}
    with pytest.raises(UnknownMember) as info:
        ElementNode.model_validate(raw)
    assert info.value.value == "script"


def test_element_node_accepts_plain_instances() -> None:
    """Programmatic construction takes node instances and raw wrapper values."""
    node = ElementNode(tag="p", children=[TextLeaf("a"), ElementNode(tag="br")])
    assert node.tag == Tag("p")
    assert node.children is not None
    assert len(node.children) == 2


def test_size_metric() -> None:
    """Size adds tag length, attrs repr length and children sizes."""
    assert TextLeaf("hello").size() == 5
    bare = ElementNode(tag=Tag("p"))
    assert bare.size() == len("p") + len("None")
    link = ElementNode(
        tag=Tag("a"),
        attrs=Attrs({"href": "x"}),
        children=(TextLeaf("hi"), bare),
    )
    assert link.size() == 1 + len(repr({"href": "x"})) + 2 + bare.size()
    assert Content((TextLeaf("ab"), link)).size() == 2 + link.size()


def test_size_grows_with_children() -> None:
    """Adding a non-empty child strictly increases the size; an empty leaf adds 0."""
    parent = ElementNode(tag=Tag("ul"), children=(ElementNode(tag=Tag("li")),))
    bigger = ElementNode(
        tag=Tag("ul"),
        children=(*(parent.children or ()), ElementNode(tag=Tag("li"))),
    )
    assert bigger.size() > parent.size()

    bare = ElementNode(tag=Tag("p"))
    assert ElementNode(tag=Tag("p"), children=(TextLeaf("x"),)).size() > bare.size()
    assert ElementNode(tag=Tag("p"), children=(TextLeaf(""),)).size() == bare.size()


def test_content_bounds() -> None:
    """Content must be non-empty and hold fewer than 65536 top-level nodes."""
    with pytest.raises(Empty):
        Content(())
    with pytest.raises(Empty):
        Content.model_validate_json("[]")
    assert len(Content((TextLeaf("x"),))) == 1

    leaf = TextLeaf("")
    assert len(Content((leaf,) * (MAX_CONTENT_NODES - 1))) == MAX_CONTENT_NODES - 1
    with pytest.raises(TooLarge) as info:
        Content((leaf,) * MAX_CONTENT_NODES)
    assert info.value.value == 65536


def test_content_iterates_its_nodes() -> None:
    """Content behaves as a read-only sequence of nodes."""
    content = Content.model_validate(
        [{"TextLeaf": "a"}, {"ElementNode": {"tag": "hr"}}]
    )
    assert content[0] == TextLeaf("a")
    assert [type(node).__name__ for node in content] == ["TextLeaf", "ElementNode"]
    assert content.model_dump() == (
        {"TextLeaf": "a"},
        {"ElementNode": {"tag": "hr"}},
    )


def test_wrappers_are_immutable() -> None:
    """Assigning to a wrapper or record fails."""
    title = Title("t")
    with pytest.raises(Exception):
        title.root = ""  # type: ignore[misc]
    account = Account.minimal("bruce")
    with pytest.raises(Exception):
        account.short_name = ShortName("captain")  # type: ignore[misc]


def test_account_omits_absent_fields() -> None:
    """Only populated account fields are encoded."""
    account = Account.minimal("bruce")
    assert account.model_dump() == {"short_name": "bruce"}
    full = Account.model_validate(
        {
            "short_name": "Sandbox",
            "author_name": "Anonymous",
            "access_token": "b968da509bb7",
            "auth_url": "https://edit.telegra.ph/auth/x",
            "page_count": 3,
        }
    )
    assert full.author_name == AuthorName("Anonymous")
    assert full.author_url is None
    assert "author_url" not in full.model_dump_json()
    assert Account.model_validate_json(full.model_dump_json()) == full


def test_account_rejects_invalid_nested_values() -> None:
    """Invalid wrapper fields inside a record surface the wrapper's error."""
    with pytest.raises(Empty):
        Account.model_validate({"short_name": ""})
    with pytest.raises(TooLong):
        Account.model_validate({"short_name": "a", "author_name": "n" * 128})
    with pytest.raises(OutOfRange):
        Account.model_validate({"short_name": "a", "page_count": -1})


def test_page_minimal_and_round_trip() -> None:
    """`Page.minimal` fills required fields and encodes content as tagged nodes."""
    content = Content((TextLeaf("text node"),))
    page = Page.minimal("path", "https://example.com/", "title", "description", content)
    assert page.views == 0
    assert page.can_edit is None
    assert page.model_dump(mode="json") == {
        "path": "path",
        "url": "https://example.com/",
        "title": "title",
        "description": "description",
        "content": [{"TextLeaf": "text node"}],
        "views": 0,
    }
    assert Page.model_validate_json(page.model_dump_json()) == page


def test_page_requires_title_and_views() -> None:
    """Decoding a page without its required fields fails."""
    with pytest.raises(Empty):
        Page.model_validate(
            {"path": "p", "url": "u", "title": "", "description": "", "views": 0}
        )
    with pytest.raises(OutOfRange):
        Page.model_validate(
            {"path": "p", "url": "u", "title": "t", "description": "", "views": -5}
        )


def test_page_list_and_views_defaults() -> None:
    """Empty listings and view counts start at zero."""
    assert PageList().total_count == 0
    assert PageList().pages == ()
    assert PageViews().views == 0
    with pytest.raises(OutOfRange):
        PageList(total_count=-1)
    listing = PageList.model_validate(
        {
            "total_count": 2,
            "pages": [
                {"path": "b", "url": "u/b", "title": "B", "description": "", "views": 1},
                {"path": "a", "url": "u/a", "title": "A", "description": "", "views": 9},
            ],
        }
    )
    assert [page.path for page in listing.pages] == ["b", "a"]
    assert PageList.model_validate_json(listing.model_dump_json()) == listing
