"""Domain layer - pure entities, path algebra and error taxonomy."""

from .cancellation import CancellationToken, ResourceGuard, check_cancelled, resource_guard
from .dictionary_entities import (
    NOT_FOUND,
    Definition,
    DefinitionCandidate,
    DictionaryEntry,
    DictionaryLookup,
    ImportSummary,
    NotFound,
)
from .errors import (
    BookImportError,
    DuplicateBookError,
    FileReadError,
    ImportTransactionError,
    LibraryStoreError,
    ManifestParseError,
    NoReadableContent,
    OperationCancelled,
    PackageNotFound,
    ReaderError,
    ResourceBusyError,
)
from .library_book import LibraryBook
from .nav_node import NavNode, flatten
from .package_document import ManifestItem, PackageDocument, PackageMetadata, SpineItem
from .section import Section, SectionContent, generic_title
from .structured_content import ContentList, ContentNode, ContentTree, TextLeaf, parse_content

__all__ = [
    "BookImportError",
    "CancellationToken",
    "ContentList",
    "ContentNode",
    "ContentTree",
    "Definition",
    "DefinitionCandidate",
    "DictionaryEntry",
    "DictionaryLookup",
    "DuplicateBookError",
    "FileReadError",
    "ImportSummary",
    "ImportTransactionError",
    "LibraryBook",
    "LibraryStoreError",
    "ManifestItem",
    "ManifestParseError",
    "NOT_FOUND",
    "NavNode",
    "NoReadableContent",
    "NotFound",
    "OperationCancelled",
    "PackageDocument",
    "PackageMetadata",
    "PackageNotFound",
    "ReaderError",
    "ResourceBusyError",
    "ResourceGuard",
    "Section",
    "SectionContent",
    "SpineItem",
    "TextLeaf",
    "check_cancelled",
    "flatten",
    "generic_title",
    "parse_content",
    "resource_guard",
]
