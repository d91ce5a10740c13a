"""Error taxonomy shared by the book and dictionary engines.

Every error derives from ReaderError, itself a RuntimeError, so callers that
only care about "the operation failed" can catch one type and show the message.
"""


class ReaderError(RuntimeError):
    """Base class for all recoverable reader failures."""


class PackageNotFound(ReaderError):
    """No package descriptor could be located inside a book directory."""


class ManifestParseError(ReaderError):
    """The package descriptor exists but cannot be parsed at all."""


class NoReadableContent(ReaderError):
    """Neither the package nor a filesystem scan produced a readable section."""


class FileReadError(ReaderError):
    """A resource could not be read, even as raw bytes."""


class ImportTransactionError(ReaderError):
    """A dictionary import failed and was rolled back as a whole."""


class LibraryStoreError(ReaderError):
    """The library JSON document could not be read or written."""


class DuplicateBookError(ReaderError):
    """A book with the same title is already in the library."""


class BookImportError(ReaderError):
    """An EPUB archive could not be imported into the library."""


class ResourceBusyError(ReaderError):
    """Another operation already holds the resource."""


class OperationCancelled(ReaderError):
    """A long-running operation observed a cancellation request."""
