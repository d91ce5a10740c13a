"""Background workers for long operations using Qt threading."""

from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from epub_reader.core.cancellation import CancellationToken
from epub_reader.core.errors import OperationCancelled, ReaderError
from epub_reader.io.book_importer import BookImporter
from epub_reader.services.dictionary_importer import DictionaryImporter


class WorkerSignals(QObject):
    """
    Signals for communicating results from worker threads.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals.
    """
    finished = Signal()
    error = Signal(str)
    cancelled = Signal()
    result = Signal(object)  # ImportSummary or LibraryBook


class _CancellableWorker(QRunnable):
    def __init__(self, cancel_token: Optional[CancellationToken] = None):
        super().__init__()
        self.cancel_token = cancel_token or CancellationToken()
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    def cancel(self) -> None:
        self.cancel_token.cancel()

    def execute(self) -> object:
        raise NotImplementedError

    @Slot()
    def run(self):
        """Execute the operation in a background thread."""
        try:
            self.signals.result.emit(self.execute())
        except OperationCancelled:
            self.signals.cancelled.emit()
        except ReaderError as e:
            self.signals.error.emit(str(e))
        except Exception as e:
            # Catch any unexpected exceptions not handled by the service
            self.signals.error.emit(f"Unexpected error: {e}")
        finally:
            self.signals.finished.emit()


class DictionaryImportWorker(_CancellableWorker):
    """Runs a dictionary import off the GUI thread."""

    def __init__(self, importer: DictionaryImporter, archive_path: Path,
                 cancel_token: Optional[CancellationToken] = None):
        super().__init__(cancel_token)
        self.importer = importer
        self.archive_path = Path(archive_path)

    def execute(self) -> object:
        return self.importer.import_archive(self.archive_path, self.cancel_token)


class BookImportWorker(_CancellableWorker):
    """Extracts an EPUB into the library off the GUI thread."""

    def __init__(self, importer: BookImporter, epub_path: Path,
                 cancel_token: Optional[CancellationToken] = None):
        super().__init__(cancel_token)
        self.importer = importer
        self.epub_path = Path(epub_path)

    def execute(self) -> object:
        return self.importer.import_epub(self.epub_path, self.cancel_token)

