"""Unit tests for domain entities."""

from epub_reader.core import (
    NOT_FOUND,
    ContentList,
    ContentNode,
    LibraryBook,
    NavNode,
    NotFound,
    SectionContent,
    TextLeaf,
    flatten,
    generic_title,
    parse_content,
)


def test_generic_title_is_one_based():
    assert generic_title(0) == "Section 1"
    assert generic_title(9) == "Section 10"


def test_section_content_ok_flag():
    assert SectionContent(index=0, section=None, html="<p>x</p>").ok
    assert not SectionContent(index=0, section=None, html="<p>x</p>", error="x").ok


def test_not_found_is_falsy_singleton():
    assert not NOT_FOUND
    assert NotFound() is NOT_FOUND
    assert repr(NOT_FOUND) == "NOT_FOUND"


def test_library_book_record_keys():
    book = LibraryBook(id=3, title="t", author="a", image=None, progress=2, location="/x")
    assert book.to_record() == {
        "id": 3,
        "title": "t",
        "author": "a",
        "image": None,
        "progress": 2,
        "location": "/x",
    }


def test_flatten_visits_parents_before_children():
    tree = [
        NavNode("Part 1", None, [NavNode("Ch 1", "a.xhtml"), NavNode("Ch 2", "b.xhtml", [NavNode("2.1", "c.xhtml")])]),
        NavNode("Ch 3", "d.xhtml"),
    ]
    assert [node.title for node in flatten(tree)] == ["Part 1", "Ch 1", "Ch 2", "2.1", "Ch 3"]


class TestParseContent:
    """Tests for lifting decoded JSON into content trees."""

    def test_string_becomes_leaf(self):
        assert parse_content("dog") == TextLeaf("dog")

    def test_node_keeps_attributes(self):
        tree = parse_content({"tag": "span", "title": "noun (common)", "style": {"x": 1}})
        assert isinstance(tree, ContentNode)
        assert tree.tag == "span"
        assert tree.attr("title") == "noun (common)"
        assert tree.content is None

    def test_nested_list(self):
        tree = parse_content(["a", {"tag": "li", "content": "b"}])
        assert tree == ContentList((TextLeaf("a"), ContentNode(tag="li", attrs={}, content=TextLeaf("b"))))

    def test_scalars_are_dropped(self):
        assert parse_content(42) is None
        assert parse_content(None) is None
        assert parse_content(["a", 1, None]) == ContentList((TextLeaf("a"),))
