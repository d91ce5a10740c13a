"""Section entity - one readable unit of a book in reading order."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Section:
    """A readable resource of the book.

    Attributes:
        path: Package-relative path of the resource (identity of the section).
        title: Display title, from the table of contents when available.
        order: 0-indexed position in the final reading order.
    """

    path: str
    title: str
    order: int


@dataclass(frozen=True)
class SectionContent:
    """Result of loading a section for display.

    When ``error`` is set, ``html`` holds an inline error block the view can
    render in place of the section.
    """

    index: int
    section: Optional[Section]
    html: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def generic_title(position: int) -> str:
    """Fallback title for the section at 0-indexed ``position``."""
    return f"Section {position + 1}"
