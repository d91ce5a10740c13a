"""Section Navigator - the reading cursor over an opened book."""

import html
import logging
from typing import Optional, Sequence, Tuple

from bs4 import BeautifulSoup

from epub_reader.core.errors import ReaderError
from epub_reader.core.section import Section, SectionContent
from epub_reader.io.file_store import FileStore
from epub_reader.io.library_repository import LibraryRepository

logger = logging.getLogger(__name__)


def error_html(message: str) -> str:
    """Inline markup shown in place of a section that failed to load."""
    return f"<p>{html.escape(message)}</p>"


def extract_body(content: str) -> str:
    """Return the inner markup of <body>, or ``content`` verbatim without one."""
    soup = BeautifulSoup(content, "html.parser")
    body = soup.find("body")
    if body is None:
        return content
    inner = "".join(str(child) for child in body.contents)
    # Only a body with no children at all falls back; whitespace is content.
    return inner if inner else content


class SectionNavigator:
    """
    Owns the section list and the current position for one reading session.

    The section list is immutable for the session. ``current_index`` is always
    clamped into range, including when restored from persisted progress.
    Successful loads persist progress to the library store best-effort.
    """

    def __init__(
        self,
        book_id: Optional[int],
        sections: Sequence[Section],
        store: FileStore,
        library_repository: Optional[LibraryRepository] = None,
        start_index: int = 0,
    ):
        self.book_id = book_id
        self._sections: Tuple[Section, ...] = tuple(sections)
        self.store = store
        self.library_repository = library_repository
        self._current_index = 0
        self.current_index = start_index

    @property
    def sections(self) -> Tuple[Section, ...]:
        return self._sections

    @property
    def total_sections(self) -> int:
        return len(self._sections)

    @property
    def current_index(self) -> int:
        return self._current_index

    @current_index.setter
    def current_index(self, value: int) -> None:
        self._current_index = self._clamp(value)

    @property
    def current_section(self) -> Optional[Section]:
        if not self._sections:
            return None
        return self._sections[self._current_index]

    def _clamp(self, value: int) -> int:
        try:
            index = int(value)
        except (TypeError, ValueError):
            index = 0
        if not self._sections:
            return 0
        return max(0, min(index, len(self._sections) - 1))

    def advance(self) -> bool:
        """Move to the next section; False at the last one."""
        if self._current_index >= len(self._sections) - 1:
            return False
        self._current_index += 1
        return True

    def retreat(self) -> bool:
        """Move to the previous section; False at the first one."""
        if self._current_index <= 0:
            return False
        self._current_index -= 1
        return True

    def jump_to(self, index: int) -> bool:
        """Move to ``index`` (clamped); returns whether the cursor moved."""
        target = self._clamp(index)
        moved = target != self._current_index
        self._current_index = target
        return moved

    def load_current(self) -> SectionContent:
        return self.load_section(self._current_index)

    def load_section(self, index: int) -> SectionContent:
        """
        Load a section's displayable markup.

        Never raises: failures come back as a SectionContent whose ``error`` is
        set and whose ``html`` is an inline error paragraph.

        Args:
            index: Section index; clamped into range.
        """
        if not self._sections:
            message = "Error loading section: book has no sections"
            return SectionContent(index=0, section=None, html=error_html(message), error=message)

        index = self._clamp(index)
        section = self._sections[index]
        try:
            raw = self.store.read_text(section.path)
            markup = extract_body(raw)
        except Exception as e:
            logger.warning("Failed to load section %d (%s): %s", index, section.path, e)
            message = f"Error loading section: {e}"
            return SectionContent(index=index, section=section, html=error_html(message), error=message)

        self._current_index = index
        self._save_progress()
        return SectionContent(index=index, section=section, html=markup)

    def _save_progress(self) -> None:
        if self.library_repository is None or self.book_id is None:
            return
        try:
            self.library_repository.update_progress(self.book_id, self._current_index)
        except ReaderError as e:
            logger.warning("Could not save progress for book %s: %s", self.book_id, e)
