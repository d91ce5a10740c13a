"""Tests for PackageParser - manifest, spine, metadata and degenerate inputs."""

import pytest

from conftest import package_opf
from epub_reader.core.errors import ManifestParseError
from epub_reader.io import PackageParser

XHTML = "application/xhtml+xml"


@pytest.fixture
def parser():
    return PackageParser()


def parse(parser, opf, path="OEBPS/content.opf"):
    return parser.parse(path, opf.encode("utf-8"))


def test_manifest_hrefs_resolved_against_descriptor(parser):
    opf = package_opf(
        [
            ("ch1", "text/ch1.xhtml", XHTML, ""),
            ("img", "../images/cover%20art.png", "image/png", "cover-image"),
        ],
        ["ch1"],
    )
    package = parse(parser, opf)
    paths = {item.id: item.path for item in package.manifest}
    assert paths == {"ch1": "OEBPS/text/ch1.xhtml", "img": "images/cover art.png"}
    assert package.item_by_id("img").has_property("cover-image")


def test_spine_order_preserved(parser):
    opf = package_opf(
        [("a", "a.xhtml", XHTML, ""), ("b", "b.xhtml", XHTML, ""), ("c", "c.xhtml", XHTML, "")],
        ["c", "a", "b"],
    )
    package = parse(parser, opf)
    assert [item.id for item in parser.reading_order(package)] == ["c", "a", "b"]


def test_unknown_spine_idref_is_skipped(parser, caplog):
    opf = package_opf([("a", "a.xhtml", XHTML, "")], ["ghost", "a"])
    package = parse(parser, opf)
    assert [item.id for item in parser.reading_order(package)] == ["a"]
    assert "ghost" in caplog.text


def test_empty_spine_uses_markup_items(parser):
    opf = package_opf(
        [
            ("css", "style.css", "text/css", ""),
            ("a", "a.xhtml", XHTML, ""),
            ("b", "b.html", "text/html", ""),
        ],
        [],
    )
    package = parse(parser, opf)
    assert [item.idref for item in package.spine] == ["a", "b"]


def test_empty_spine_without_markup_uses_every_item(parser):
    opf = package_opf([("css", "style.css", "text/css", ""), ("t", "notes.txt", "text/plain", "")], [])
    package = parse(parser, opf)
    assert [item.idref for item in package.spine] == ["css", "t"]


def test_duplicate_manifest_id_keeps_first(parser):
    opf = package_opf([("a", "first.xhtml", XHTML, ""), ("a", "second.xhtml", XHTML, "")], ["a"])
    package = parse(parser, opf)
    assert [item.path for item in package.manifest] == ["OEBPS/first.xhtml"]


def test_metadata(parser):
    opf = package_opf(
        [("a", "a.xhtml", XHTML, ""), ("cov", "img/c.jpg", "image/jpeg", "cover-image")],
        ["a"],
        title="吾輩は猫である",
        author="夏目漱石",
    )
    metadata = parse(parser, opf).metadata
    assert metadata.title == "吾輩は猫である"
    assert metadata.author == "夏目漱石"
    assert metadata.language == "ja"
    assert metadata.cover_path == "OEBPS/img/c.jpg"


def test_epub2_cover_meta(parser):
    opf = """<?xml version="1.0"?>
<package xmlns="http://www.idpf.org/2007/opf" version="2.0">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:title>Old</dc:title>
    <meta name="cover" content="cover-img"/>
  </metadata>
  <manifest>
    <item id="cover-img" href="cover.jpg" media-type="image/jpeg"/>
    <item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>
    <item id="a" href="a.xhtml" media-type="application/xhtml+xml"/>
  </manifest>
  <spine toc="ncx"><itemref idref="a"/></spine>
</package>"""
    package = parse(parser, opf, path="content.opf")
    assert package.metadata.cover_path == "cover.jpg"
    assert package.metadata.author is None
    assert package.toc_id == "ncx"


def test_unprefixed_namespace_free_descriptor(parser):
    opf = """<package><manifest><item id="a" href="a.xhtml" media-type="application/xhtml+xml"/></manifest>
<spine><itemref idref="a"/></spine></package>"""
    package = parse(parser, opf, path="content.opf")
    assert [item.path for item in parser.reading_order(package)] == ["a.xhtml"]
    assert package.toc_id is None


def test_unparseable_descriptor_raises(parser):
    with pytest.raises(ManifestParseError):
        parser.parse("content.opf", b"")
