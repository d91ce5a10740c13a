"""Book Importer - extracts EPUB archives into the library."""

import logging
import re
import shutil
import zipfile
from pathlib import Path
from typing import Optional, Tuple

from epub_reader.core import LibraryBook, path_resolver
from epub_reader.core.cancellation import CancellationToken, check_cancelled
from epub_reader.core.errors import (
    BookImportError,
    DuplicateBookError,
    FileReadError,
    ManifestParseError,
    OperationCancelled,
    PackageNotFound,
)
from epub_reader.io.file_store import DirectoryFileStore
from epub_reader.io.library_repository import LibraryRepository
from epub_reader.io.package_locator import PackageLocator
from epub_reader.io.package_parser import PackageParser

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown Author"


def title_from_filename(epub_path: Path) -> str:
    return re.sub(r"\.epub$", "", Path(epub_path).name, flags=re.IGNORECASE)


class BookImporter:
    """Imports EPUB archives: extraction, metadata and the library record.

    Placeholder covers are the view's business; books without a cover are
    stored with ``image=None``.
    """

    def __init__(self, library_repository: LibraryRepository, books_dir: Path):
        self.library_repository = library_repository
        self.books_dir = Path(books_dir)
        self.parser = PackageParser()

    def import_epub(self, epub_path: Path, cancel_token: Optional[CancellationToken] = None) -> LibraryBook:
        """
        Extract ``epub_path`` and add it to the library.

        Raises:
            DuplicateBookError: If a book with the same title exists.
            BookImportError: If extraction or registration fails; the partially
                extracted directory is removed.
        """
        epub_path = Path(epub_path)
        title = title_from_filename(epub_path)
        if not title.strip():
            raise BookImportError(f"Cannot derive a title from {epub_path.name}")
        if self.library_repository.find_by_title(title) is not None:
            raise DuplicateBookError(f"'{title}' is already in the library")

        book_dir = self.books_dir / title
        if book_dir.exists():
            raise BookImportError(f"Extraction directory already exists: {book_dir}")

        imported = False
        try:
            self._extract(epub_path, book_dir, cancel_token)
            author, cover = self._read_metadata(book_dir, cancel_token)
            book = self.library_repository.add_book(
                title=title,
                author=author,
                image=str(book_dir / cover) if cover else None,
                location=str(book_dir),
            )
            imported = True
        except OperationCancelled:
            raise
        except Exception as e:
            # zipfile raises NotImplementedError/RuntimeError for unsupported
            # compression and encrypted members.
            raise BookImportError(f"Failed to import {epub_path.name}: {e}") from e
        finally:
            if not imported:
                shutil.rmtree(book_dir, ignore_errors=True)

        logger.info("Imported '%s' by %s into %s", book.title, book.author, book_dir)
        return book

    def remove_book(self, book_id: int, delete_files: bool = True) -> LibraryBook:
        """Delete a book record and, optionally, its extracted directory."""
        book = self.library_repository.delete_book(book_id)
        if delete_files and book.location:
            location = Path(book.location)
            # Only directories this importer created are removed.
            if location.resolve().parent == self.books_dir.resolve():
                shutil.rmtree(location, ignore_errors=True)
            else:
                logger.warning("Not deleting %s: outside %s", location, self.books_dir)
        return book

    def _extract(self, epub_path: Path, book_dir: Path, cancel_token: Optional[CancellationToken]) -> None:
        with zipfile.ZipFile(epub_path) as archive:
            book_dir.mkdir(parents=True)
            for member in archive.infolist():
                check_cancelled(cancel_token)
                if member.is_dir():
                    continue
                relative = path_resolver.normalize(member.filename)
                if not relative:
                    continue
                target = book_dir.joinpath(*relative.split(path_resolver.SEPARATOR))
                target.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(member) as source, open(target, "wb") as sink:
                    shutil.copyfileobj(source, sink)
        logger.debug("Extracted %s to %s", epub_path, book_dir)

    def _read_metadata(
        self, book_dir: Path, cancel_token: Optional[CancellationToken]
    ) -> Tuple[str, Optional[str]]:
        """Return (author, cover path relative to the book) from the package."""
        store = DirectoryFileStore(book_dir)
        try:
            location = PackageLocator(store).locate(cancel_token)
            package = self.parser.parse(location.descriptor_path, store.read_bytes(location.descriptor_path))
        except (PackageNotFound, ManifestParseError, FileReadError) as e:
            logger.warning("No package metadata for %s: %s", book_dir.name, e)
            return UNKNOWN_AUTHOR, None

        cover = package.metadata.cover_path
        if cover and not store.exists(cover):
            logger.warning("Cover image %s missing from %s", cover, book_dir.name)
            cover = None
        return package.metadata.author or UNKNOWN_AUTHOR, cover
