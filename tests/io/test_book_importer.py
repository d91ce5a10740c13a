"""Tests for BookImporter - extraction, metadata and library registration."""

import zipfile
from pathlib import Path

import pytest

from conftest import chapter_xhtml, package_opf, set_compression_method, zip_directory
from epub_reader.core import CancellationToken
from epub_reader.core.errors import BookImportError, DuplicateBookError, LibraryStoreError, OperationCancelled
from epub_reader.io import BookImporter, LibraryRepository
from epub_reader.io.book_importer import UNKNOWN_AUTHOR, title_from_filename


@pytest.fixture
def library_repo(tmp_path):
    return LibraryRepository(tmp_path / "data" / "books.json")


@pytest.fixture
def books_dir(tmp_path):
    return tmp_path / "data" / "books"


@pytest.fixture
def importer(library_repo, books_dir):
    return BookImporter(library_repo, books_dir)


@pytest.fixture
def kokoro_epub(standard_book, tmp_path):
    return zip_directory(standard_book, tmp_path / "Kokoro.epub")


def test_title_from_filename():
    assert title_from_filename(Path("/x/Kokoro.EPUB")) == "Kokoro"
    assert title_from_filename(Path("a.b.epub")) == "a.b"


def test_import_extracts_and_registers(importer, library_repo, books_dir, kokoro_epub):
    book = importer.import_epub(kokoro_epub)

    book_dir = books_dir / "Kokoro"
    assert (book_dir / "OEBPS" / "text" / "ch1.xhtml").is_file()
    assert book.title == "Kokoro"
    assert book.author == "Natsume Soseki"
    assert book.image == str(book_dir / "OEBPS/images/cover.png")
    assert book.progress == 0
    assert book.location == str(book_dir)
    assert library_repo.get_all_books() == [book]


def test_book_without_creator_or_cover(importer, book_dir, tmp_path):
    manifest = [("a", "a.xhtml", "application/xhtml+xml", "")]
    source = book_dir({"content.opf": package_opf(manifest, ["a"], author=None), "a.xhtml": chapter_xhtml("A")})
    book = importer.import_epub(zip_directory(source, tmp_path / "Anon.epub"))
    assert book.author == UNKNOWN_AUTHOR
    assert book.image is None


def test_duplicate_title_is_rejected(importer, library_repo, kokoro_epub):
    importer.import_epub(kokoro_epub)
    with pytest.raises(DuplicateBookError):
        importer.import_epub(kokoro_epub)
    assert len(library_repo.get_all_books()) == 1


def test_invalid_archive_leaves_nothing_behind(importer, library_repo, books_dir, tmp_path):
    bogus = tmp_path / "Broken.epub"
    bogus.write_bytes(b"this is not a zip")
    with pytest.raises(BookImportError):
        importer.import_epub(bogus)
    assert not (books_dir / "Broken").exists()
    assert library_repo.get_all_books() == []


def test_undecodable_member_cleans_up_so_retry_succeeds(importer, library_repo, books_dir, standard_book, tmp_path):
    """An archive zipfile cannot decode mid-extraction leaves no directory behind."""
    damaged_dir = tmp_path / "damaged"
    damaged_dir.mkdir()
    damaged = zip_directory(standard_book, damaged_dir / "Kokoro.epub")
    set_compression_method(damaged, "OEBPS/text/ch3.xhtml")

    with pytest.raises(BookImportError, match="compression method"):
        importer.import_epub(damaged)
    assert not (books_dir / "Kokoro").exists()
    assert library_repo.get_all_books() == []

    book = importer.import_epub(zip_directory(standard_book, tmp_path / "Kokoro.epub"))
    assert book.title == "Kokoro"
    assert (books_dir / "Kokoro" / "OEBPS" / "text" / "ch3.xhtml").is_file()


def test_members_cannot_escape_book_directory(importer, books_dir, tmp_path):
    epub = tmp_path / "Sneaky.epub"
    with zipfile.ZipFile(epub, "w") as archive:
        archive.writestr("../../escape.xhtml", "<p/>")
        archive.writestr("content.opf", "<package/>")
    importer.import_epub(epub)
    assert (books_dir / "Sneaky" / "escape.xhtml").is_file()
    assert not (tmp_path / "escape.xhtml").exists()


def test_cancelled_import_cleans_up(importer, books_dir, kokoro_epub):
    token = CancellationToken()
    token.cancel()
    with pytest.raises(OperationCancelled):
        importer.import_epub(kokoro_epub, token)
    assert not (books_dir / "Kokoro").exists()


def test_remove_book_deletes_files(importer, library_repo, books_dir, kokoro_epub):
    book = importer.import_epub(kokoro_epub)
    removed = importer.remove_book(book.id)
    assert removed.id == book.id
    assert not (books_dir / "Kokoro").exists()
    assert library_repo.get_all_books() == []


def test_remove_book_keeps_foreign_directories(importer, library_repo, tmp_path):
    foreign = tmp_path / "elsewhere"
    foreign.mkdir()
    book = library_repo.add_book("Foreign", "x", None, str(foreign))
    importer.remove_book(book.id)
    assert foreign.is_dir()


def test_remove_unknown_book(importer):
    with pytest.raises(LibraryStoreError):
        importer.remove_book(5)
