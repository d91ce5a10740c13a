"""Data access layer for the library JSON document."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from epub_reader.core import LibraryBook
from epub_reader.core.errors import LibraryStoreError

logger = logging.getLogger(__name__)

_locks_guard = threading.Lock()
_locks: Dict[str, threading.RLock] = {}


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.expanduser().resolve())
    with _locks_guard:
        return _locks.setdefault(key, threading.RLock())


class LibraryRepository:
    """Manages persistence of library books in a single JSON document.

    The document is shared by the library screen, the navigator's progress
    saves and book import/delete, so every write is a read-modify-write under
    a per-file lock followed by an atomic replace.

    Like the rest of the persistence layer this repository fails fast: errors
    surface as LibraryStoreError rather than None results.
    """

    def __init__(self, library_path: Path) -> None:
        """Initialize repository.

        Args:
            library_path: Location of the JSON document (created on first write).
        """
        if library_path is None:
            raise LibraryStoreError("Library path required")
        self.library_path = Path(library_path)
        self._lock = _lock_for(self.library_path)

    def get_all_books(self) -> List[LibraryBook]:
        """Return all books in stored order (empty if the document is missing).

        Raises:
            LibraryStoreError: If the document cannot be read or decoded.
        """
        with self._lock:
            return [self._record_to_book(record) for record in self._read_records()]

    def get_book(self, book_id: int) -> LibraryBook:
        """Retrieve a book by id.

        Raises:
            LibraryStoreError: If the book is not found.
        """
        for book in self.get_all_books():
            if book.id == book_id:
                return book
        raise LibraryStoreError(f"Book not found in library: {book_id}")

    def find_by_title(self, title: str) -> Optional[LibraryBook]:
        for book in self.get_all_books():
            if book.title == title:
                return book
        return None

    def add_book(self, title: str, author: str, image: Optional[str], location: str) -> LibraryBook:
        """Append a new book with zero progress.

        Returns:
            LibraryBook: The stored book.

        Raises:
            LibraryStoreError: If the title is empty or the write fails.
        """
        if not title or not title.strip():
            raise LibraryStoreError("Book title cannot be empty")

        created: List[LibraryBook] = []

        def append(records: List[dict]) -> List[dict]:
            next_id = max((self._record_id(record) for record in records), default=0) + 1
            book = LibraryBook(
                id=next_id,
                title=title.strip(),
                author=author,
                image=image,
                progress=0,
                location=location,
            )
            created.append(book)
            return records + [book.to_record()]

        self._update(append)
        return created[0]

    def update_progress(self, book_id: int, section_index: int) -> LibraryBook:
        """Store the section index last loaded for a book.

        Raises:
            LibraryStoreError: If the book is not found or the write fails.
        """

        def set_progress(records: List[dict]) -> List[dict]:
            for record in records:
                if self._record_id(record) == book_id:
                    record["progress"] = int(section_index)
                    return records
            raise LibraryStoreError(f"Book not found in library: {book_id}")

        self._update(set_progress)
        return self.get_book(book_id)

    def delete_book(self, book_id: int) -> LibraryBook:
        """Remove a book record (does NOT delete extracted files).

        Returns:
            LibraryBook: The removed record.

        Raises:
            LibraryStoreError: If the book is not found or the write fails.
        """
        removed: List[LibraryBook] = []

        def remove(records: List[dict]) -> List[dict]:
            kept = []
            for record in records:
                if self._record_id(record) == book_id:
                    removed.append(self._record_to_book(record))
                else:
                    kept.append(record)
            if not removed:
                raise LibraryStoreError(f"Book not found in library: {book_id}")
            return kept

        self._update(remove)
        return removed[0]

    def _update(self, mutate: Callable[[List[dict]], List[dict]]) -> None:
        with self._lock:
            self._write_records(mutate(self._read_records()))

    def _read_records(self) -> List[dict]:
        if not self.library_path.exists():
            return []
        try:
            with open(self.library_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise LibraryStoreError(f"Failed to read library: {e}") from e
        if not isinstance(data, list):
            raise LibraryStoreError(f"Library document is not a list: {self.library_path}")
        return [record for record in data if isinstance(record, dict)]

    def _write_records(self, records: List[dict]) -> None:
        directory = self.library_path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".books-", suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.library_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise LibraryStoreError(f"Failed to write library: {e}") from e
        logger.debug("Library written with %d books", len(records))

    @staticmethod
    def _record_id(record: dict) -> int:
        try:
            return int(record.get("id", 0))
        except (TypeError, ValueError):
            return 0

    @staticmethod
    def _record_to_book(record: dict) -> LibraryBook:
        """Convert a JSON record to a LibraryBook entity."""
        try:
            progress = int(record.get("progress") or 0)
        except (TypeError, ValueError):
            # Older documents stored progress as free-form strings.
            progress = 0
        return LibraryBook(
            id=LibraryRepository._record_id(record),
            title=str(record.get("title") or ""),
            author=str(record.get("author") or "Unknown Author"),
            image=record.get("image") or None,
            progress=progress,
            location=str(record.get("location") or ""),
        )
