"""
EPUB Reader - the core of a reader for EPUB books with dictionary lookups.

This package provides:
- EPUB package resolution into ordered, navigable sections
- Recovery from broken packages (directory scans, spine synthesis)
- Term-bank dictionary import and exact-match lookups
- A JSON library store with reading progress
"""

__version__ = "0.1.0"

# Make key components available at package level
from epub_reader.core import Section, SectionContent
from epub_reader.io import BookLoader, DictionaryStore, LibraryRepository

__all__ = [
    "BookLoader",
    "DictionaryStore",
    "LibraryRepository",
    "Section",
    "SectionContent",
]
