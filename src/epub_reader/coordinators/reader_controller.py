"""Reader Controller - Central coordinator for the reading session."""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, Signal, Slot

from epub_reader.core import NOT_FOUND, LibraryBook, SectionContent
from epub_reader.core.errors import ReaderError
from epub_reader.io import BookLoader, LibraryRepository
from epub_reader.services import DictionaryIndex, SectionNavigator
from epub_reader.services.text_processing import normalize_text

logger = logging.getLogger(__name__)


class ReaderController(QObject):
    """
    Owns the live reading session and routes view events to the core.

    The view only renders what it is handed: section markup (or inline error
    markup), lookup results and error messages.
    """

    section_changed = Signal(int)
    book_opened = Signal(str)
    book_closed = Signal()

    def __init__(
        self,
        main_window,
        reader_view,
        book_loader: BookLoader,
        library_repository: LibraryRepository,
        dictionary_index: Optional[DictionaryIndex] = None,
    ):
        super().__init__()

        self.main_window = main_window
        self.reader_view = reader_view
        self.book_loader = book_loader
        self.library_repository = library_repository
        self.dictionary_index = dictionary_index

        # Session state
        self.current_book: Optional[LibraryBook] = None
        self.navigator: Optional[SectionNavigator] = None

    @Slot(int)
    def open_book(self, book_id: int) -> bool:
        """
        Open a library book and render its saved position.

        Returns:
            True when the book opened; failures are shown to the user.
        """
        try:
            book = self.library_repository.get_book(book_id)
            loaded = self.book_loader.load(Path(book.location))
        except ReaderError as e:
            logger.warning("Failed to open book %s: %s", book_id, e)
            self.main_window.show_error("Book Load Error", str(e))
            return False

        self.current_book = book
        self.navigator = SectionNavigator(
            book_id=book.id,
            sections=loaded.sections,
            store=loaded.store,
            library_repository=self.library_repository,
            start_index=book.progress,
        )
        self.book_opened.emit(loaded.title or book.title)
        self._render_current_section()
        return True

    def close_book(self) -> None:
        if self.navigator is None:
            return
        self.current_book = None
        self.navigator = None
        self.book_closed.emit()

    def _render_current_section(self) -> Optional[SectionContent]:
        if self.navigator is None:
            return None
        content = self.navigator.load_current()
        self.reader_view.render_section(content)
        if content.ok:
            self.section_changed.emit(content.index)
        return content

    @Slot()
    def next_section(self) -> bool:
        """Navigate to the next section."""
        if self.navigator is None or not self.navigator.advance():
            return False
        self._render_current_section()
        return True

    @Slot()
    def previous_section(self) -> bool:
        """Navigate to the previous section."""
        if self.navigator is None or not self.navigator.retreat():
            return False
        self._render_current_section()
        return True

    @Slot(int)
    def jump_to_section(self, index: int) -> bool:
        """
        Jump to a specific section (0-indexed, clamped into range).
        """
        if self.navigator is None or not self.navigator.jump_to(index):
            return False
        self._render_current_section()
        return True

    @Slot(str)
    def handle_text_selected(self, text: str) -> None:
        """Look up selected text and show the first definition."""
        token = normalize_text(text)
        if not token or self.dictionary_index is None:
            return
        result = self.dictionary_index.lookup(token)
        if result is NOT_FOUND:
            self.reader_view.show_lookup_miss(token)
            return
        self.reader_view.show_definition(result)
