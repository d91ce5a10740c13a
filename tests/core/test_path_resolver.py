"""Unit tests for package path algebra."""

import pytest

from epub_reader.core import path_resolver


class TestNormalize:
    """Tests for normalize()."""

    def test_collapses_separators_and_parent_segments(self):
        assert path_resolver.normalize("//a/b/../c/") == "a/c"

    def test_converts_backslashes(self):
        assert path_resolver.normalize("OEBPS\\text\\ch1.xhtml") == "OEBPS/text/ch1.xhtml"

    def test_skips_current_directory_segments(self):
        assert path_resolver.normalize("./a/./b") == "a/b"

    def test_parent_above_root_is_clamped(self):
        """Climbing above the root is a no-op rather than an error."""
        assert path_resolver.normalize("../../x.xhtml") == "x.xhtml"

    @pytest.mark.parametrize("path", ["", "/", "//", None])
    def test_empty_inputs(self, path):
        assert path_resolver.normalize(path) == ""

    @pytest.mark.parametrize("path", ["//a/b/../c/", "x\\y//z", "./p/q/."])
    def test_idempotent(self, path):
        once = path_resolver.normalize(path)
        assert path_resolver.normalize(once) == once


class TestResolve:
    """Tests for resolve() and resolve_href()."""

    def test_relative_to_descriptor_directory(self):
        assert path_resolver.resolve("OEBPS/content.opf", "text/ch1.xhtml") == "OEBPS/text/ch1.xhtml"

    def test_parent_segment_leaves_descriptor_directory(self):
        assert path_resolver.resolve("OEBPS/content.opf", "../images/x.png") == "images/x.png"

    def test_top_level_base(self):
        assert path_resolver.resolve("content.opf", "ch1.xhtml") == "ch1.xhtml"

    def test_fragment_is_stripped(self):
        assert path_resolver.resolve("OEBPS/nav.xhtml", "text/ch1.xhtml#p3") == "OEBPS/text/ch1.xhtml"

    def test_resolving_dot_relative_to_itself(self):
        """'./name' against a file in the same directory yields that file."""
        assert path_resolver.resolve("OEBPS/text/ch1.xhtml", "./ch1.xhtml") == "OEBPS/text/ch1.xhtml"

    def test_excess_parent_segments_do_not_crash(self):
        assert path_resolver.resolve("a/b.opf", "../../../c.xhtml") == "c.xhtml"

    def test_resolve_href_decodes_percent_escapes(self):
        resolved = path_resolver.resolve_href("OEBPS/content.opf", "text/my%20chapter.xhtml#top")
        assert resolved == "OEBPS/text/my chapter.xhtml"


class TestPathHelpers:
    """Tests for the small helpers."""

    def test_strip_fragment(self):
        assert path_resolver.strip_fragment("a.xhtml#x#y") == "a.xhtml"
        assert path_resolver.strip_fragment("#only") == ""

    def test_directory_of(self):
        assert path_resolver.directory_of("OEBPS/text/ch1.xhtml") == "OEBPS/text"
        assert path_resolver.directory_of("content.opf") == ""

    def test_extension_of_is_lowercased(self):
        assert path_resolver.extension_of("A/B.XHTML") == ".xhtml"
        assert path_resolver.extension_of("META-INF/container.xml") == ".xml"
        assert path_resolver.extension_of("mimetype") == ""

    def test_join(self):
        assert path_resolver.join("", "OEBPS", "text/../ch1.xhtml") == "OEBPS/ch1.xhtml"
