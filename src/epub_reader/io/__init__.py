"""I/O layer - Data access for persistence and file operations."""

from .book_importer import BookImporter
from .book_loader import BookLoader, LoadedBook
from .dictionary_store import DictionaryStore
from .file_store import DirectoryFileStore, FileStore
from .library_repository import LibraryRepository
from .package_locator import PackageLocation, PackageLocator
from .package_parser import PackageParser
from .section_validator import SectionValidator
from .toc_resolver import TocResolver

__all__ = [
    "BookImporter",
    "BookLoader",
    "DictionaryStore",
    "DirectoryFileStore",
    "FileStore",
    "LibraryRepository",
    "LoadedBook",
    "PackageLocation",
    "PackageLocator",
    "PackageParser",
    "SectionValidator",
    "TocResolver",
]
