"""Shared fixtures: small EPUB directories and term-bank archives on disk."""

import json
import struct
import zipfile
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union

import pytest
from PySide6.QtCore import QCoreApplication

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{opf_path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

ManifestSpec = Tuple[str, str, str, str]  # id, href, media-type, properties


def chapter_xhtml(title: str, body: str = "") -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<html xmlns="http://www.w3.org/1999/xhtml"><head><title>'
        f"{title}</title></head><body>{body or f'<h1>{title}</h1>'}</body></html>"
    )


def package_opf(
    manifest: Iterable[ManifestSpec],
    spine: Sequence[str],
    title: str = "Test Book",
    author: Optional[str] = "Natsume Soseki",
    toc: Optional[str] = None,
) -> str:
    items = "\n".join(
        f'    <item id="{item_id}" href="{href}" media-type="{media_type}"'
        + (f' properties="{props}"' if props else "")
        + "/>"
        for item_id, href, media_type, props in manifest
    )
    itemrefs = "\n".join(f'    <itemref idref="{idref}"/>' for idref in spine)
    creator = f"<dc:creator>{author}</dc:creator>" if author else ""
    toc_attr = f' toc="{toc}"' if toc else ""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="uid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:title>{title}</dc:title>
    {creator}
    <dc:language>ja</dc:language>
  </metadata>
  <manifest>
{items}
  </manifest>
  <spine{toc_attr}>
{itemrefs}
  </spine>
</package>
"""


def write_files(root: Path, files: Dict[str, Union[str, bytes]]) -> Path:
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def book_dir(tmp_path):
    """Factory writing a book directory from a {path: content} mapping."""

    def make(files: Dict[str, Union[str, bytes]], name: str = "book") -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        return write_files(root, files)

    return make


@pytest.fixture
def standard_book(book_dir):
    """A conformant three-chapter book under OEBPS/ without a TOC."""
    manifest = [
        ("ch1", "text/ch1.xhtml", "application/xhtml+xml", ""),
        ("ch2", "text/ch2.xhtml", "application/xhtml+xml", ""),
        ("ch3", "text/ch3.xhtml", "application/xhtml+xml", ""),
        ("cover", "images/cover.png", "image/png", "cover-image"),
    ]
    return book_dir(
        {
            "mimetype": "application/epub+zip",
            "META-INF/container.xml": CONTAINER_XML.format(opf_path="OEBPS/content.opf"),
            "OEBPS/content.opf": package_opf(manifest, ["ch2", "ch1", "ch3"]),
            "OEBPS/text/ch1.xhtml": chapter_xhtml("One"),
            "OEBPS/text/ch2.xhtml": chapter_xhtml("Two"),
            "OEBPS/text/ch3.xhtml": chapter_xhtml("Three"),
            "OEBPS/images/cover.png": b"\x89PNG\r\n",
        }
    )


def zip_directory(source: Path, target: Path) -> Path:
    with zipfile.ZipFile(target, "w") as archive:
        for path in sorted(source.rglob("*")):
            if path.is_file():
                archive.write(path, path.relative_to(source).as_posix())
    return target


CENTRAL_DIRECTORY_SIGNATURE = b"PK\x01\x02"
DEFLATE64 = 9


def set_compression_method(archive_path: Path, member: str, method: int = DEFLATE64) -> Path:
    """Rewrite ``member``'s compression method in the central directory.

    zipfile refuses to open such a member (NotImplementedError), which stands
    in for archives produced by tools using methods it cannot decode.
    """
    data = bytearray(archive_path.read_bytes())
    position = data.find(CENTRAL_DIRECTORY_SIGNATURE)
    while position != -1:
        (name_length,) = struct.unpack_from("<H", data, position + 28)
        name = bytes(data[position + 46 : position + 46 + name_length]).decode("utf-8")
        if name == member:
            struct.pack_into("<H", data, position + 10, method)
            archive_path.write_bytes(bytes(data))
            return archive_path
        position = data.find(CENTRAL_DIRECTORY_SIGNATURE, position + 46 + name_length)
    raise KeyError(member)


@pytest.fixture
def term_bank_archive(tmp_path):
    """Factory writing a lexicon zip from {member name: rows}."""

    def make(
        banks: Dict[str, object],
        name: str = "jmdict.zip",
        index: Optional[dict] = None,
    ) -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as archive:
            if index is not None:
                archive.writestr("index.json", json.dumps(index))
            for member, rows in banks.items():
                payload = rows if isinstance(rows, str) else json.dumps(rows, ensure_ascii=False)
                archive.writestr(member, payload)
        return path

    return make


def term_row(word: str, reading: str, *blocks: dict) -> list:
    """A Yomitan v3 term row with the given glossary blocks."""
    return [word, reading, "", "", 0, list(blocks), 1, ""]


def structured(*content) -> dict:
    return {"type": "structured-content", "content": list(content)}


DOG_ROW = term_row(
    "犬",
    "いぬ",
    structured({"tag": "span", "title": "noun (common)"}, {"tag": "li", "content": "dog"}),
)


@pytest.fixture
def qt_app():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


class ImmediateThreadPool:
    """Thread pool stand-in that runs workers synchronously."""

    def __init__(self):
        self.started = []

    def start(self, worker):
        self.started.append(worker)
        worker.run()
