"""Library Coordinator - Orchestrates library book management and display."""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from epub_reader.core import LibraryBook
from epub_reader.core.errors import ReaderError
from epub_reader.io import BookImporter, LibraryRepository
from epub_reader.services import BookImportWorker

logger = logging.getLogger(__name__)


class LibraryCoordinator(QObject):
    """Manages the library screen and book operations.

    Responsibilities:
    - Load books from the library store into the screen
    - Import EPUB archives in the background
    - Handle book selection (open for reading)
    - Handle book deletion
    """

    book_selected = Signal(int)

    def __init__(
        self,
        library_screen,
        library_repository: LibraryRepository,
        book_importer: BookImporter,
        main_window,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()

        if library_screen is None:
            raise ValueError("LibraryScreen must not be None")
        if library_repository is None:
            raise ValueError("LibraryRepository must not be None")
        if book_importer is None:
            raise ValueError("BookImporter must not be None")
        if main_window is None:
            raise ValueError("MainWindow must not be None")

        self.library_screen = library_screen
        self.library_repository = library_repository
        self.book_importer = book_importer
        self.main_window = main_window
        self.thread_pool = thread_pool or QThreadPool.globalInstance()
        self._import_worker: Optional[BookImportWorker] = None

    def show_library(self):
        """Display the library screen and reload books."""
        self._load_and_display_books()
        self.main_window.display_library_view(self.library_screen)

    def import_book(self, epub_path: Path) -> bool:
        """Start importing an EPUB archive; returns False if one is already running."""
        if self._import_worker is not None:
            self.main_window.show_error("Import In Progress", "Another book is still being imported.")
            return False

        worker = BookImportWorker(self.book_importer, Path(epub_path))
        worker.signals.result.connect(self._on_book_imported)
        worker.signals.error.connect(self._on_import_failed)
        worker.signals.finished.connect(self._on_import_finished)
        self._import_worker = worker
        self.thread_pool.start(worker)
        return True

    @Slot(object)
    def _on_book_imported(self, book: LibraryBook):
        self._load_and_display_books()
        self.main_window.show_info("Book Imported", f"Imported '{book.title}' by {book.author}")

    @Slot(str)
    def _on_import_failed(self, message: str):
        logger.warning("Book import failed: %s", message)
        self.main_window.show_error("Import Error", message)

    @Slot()
    def _on_import_finished(self):
        self._import_worker = None

    @Slot(int)
    def handle_book_selected(self, book_id: int):
        """Handle when user selects a book from the library.

        Args:
            book_id: Id of the selected book.
        """
        try:
            book = self.library_repository.get_book(book_id)
        except ReaderError as e:
            self.main_window.show_error("Library Error", str(e))
            return

        if not Path(book.location).is_dir():
            self.main_window.show_error(
                "Book Missing",
                f"The files for '{book.title}' are no longer at:\n{book.location}",
            )
            return

        self.book_selected.emit(book.id)

    @Slot(int)
    def handle_book_deleted(self, book_id: int):
        """Handle when user deletes a book from the library.

        Args:
            book_id: Id of the book to delete.
        """
        try:
            self.book_importer.remove_book(book_id)
        except ReaderError as e:
            self.main_window.show_error("Delete Error", str(e))
            return

        # Reload and display updated library
        self._load_and_display_books()

    def _load_and_display_books(self):
        """Load all books from the repository and display them in the library screen."""
        try:
            books = self.library_repository.get_all_books()
            self.library_screen.display_books(books)
        except ReaderError as e:
            self.main_window.show_error("Library Load Error", str(e))
