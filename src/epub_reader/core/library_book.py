"""Domain entity for a book record in the library store."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LibraryBook:
    """Represents an imported book in the library collection.

    Attributes:
        id: Unique identifier within the library document.
        title: Display title (derived from the archive file name).
        author: First creator listed in the package metadata.
        image: Path to the cover image, or None when the book has none.
        progress: 0-indexed section the reader last loaded.
        location: Directory the EPUB archive was extracted into.
    """

    id: int
    title: str
    author: str
    image: Optional[str]
    progress: int
    location: str

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "image": self.image,
            "progress": self.progress,
            "location": self.location,
        }
