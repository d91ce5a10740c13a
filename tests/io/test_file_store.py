"""Tests for DirectoryFileStore."""

import pytest

from epub_reader.core import CancellationToken
from epub_reader.core.errors import FileReadError, OperationCancelled
from epub_reader.io import DirectoryFileStore


@pytest.fixture
def store(book_dir):
    root = book_dir(
        {
            "b/z.xhtml": "<p>z</p>",
            "a.txt": "plain",
            "b/a.xhtml": "<p>a</p>",
            "bom.xhtml": b"\xef\xbb\xbf<p>bom</p>",
            "latin1.xhtml": b"<p>caf\xe9</p>",
        }
    )
    return DirectoryFileStore(root)


def test_list_files_sorted_package_paths(store):
    assert store.list_files() == ["a.txt", "b/a.xhtml", "b/z.xhtml", "bom.xhtml", "latin1.xhtml"]


def test_exists_normalizes_paths(store):
    assert store.exists("b\\a.xhtml")
    assert store.exists("/b//z.xhtml")
    assert not store.exists("b")
    assert not store.exists("missing.xhtml")


def test_read_text_drops_bom(store):
    assert store.read_text("bom.xhtml") == "<p>bom</p>"


def test_read_text_falls_back_for_invalid_utf8(store):
    """Undecodable bytes come back with replacement characters instead of failing."""
    assert store.read_text("latin1.xhtml") == "<p>caf�</p>"


def test_read_missing_file_raises(store):
    with pytest.raises(FileReadError, match="missing.xhtml"):
        store.read_text("missing.xhtml")
    with pytest.raises(FileReadError):
        store.read_bytes("missing.xhtml")


def test_list_files_honours_cancellation(store):
    token = CancellationToken()
    token.cancel()
    with pytest.raises(OperationCancelled):
        store.list_files(token)
