"""Dictionary Import Coordinator - runs lexicon imports and reports status."""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from epub_reader.core import ImportSummary
from epub_reader.services import DictionaryImporter, DictionaryImportWorker

logger = logging.getLogger(__name__)


class DictionaryImportCoordinator(QObject):
    """
    Starts dictionary imports on a thread pool, one at a time, and turns
    their outcome into a status line for the view.
    """

    import_completed = Signal(object)  # ImportSummary

    def __init__(self, view, importer: DictionaryImporter, thread_pool: Optional[QThreadPool] = None):
        super().__init__()
        self.view = view
        self.importer = importer
        self.thread_pool = thread_pool or QThreadPool.globalInstance()
        self._worker: Optional[DictionaryImportWorker] = None

    @property
    def is_running(self) -> bool:
        return self._worker is not None

    def start_import(self, archive_path: Path) -> bool:
        """Queue an import; returns False when one is already running."""
        if self._worker is not None:
            self.view.set_import_status("A dictionary import is already running.")
            return False

        worker = DictionaryImportWorker(self.importer, Path(archive_path))
        worker.signals.result.connect(self._on_result)
        worker.signals.error.connect(self._on_error)
        worker.signals.cancelled.connect(self._on_cancelled)
        worker.signals.finished.connect(self._on_finished)
        self._worker = worker
        self.view.set_import_status(f"Importing {Path(archive_path).name}...")
        self.thread_pool.start(worker)
        return True

    def cancel_import(self) -> None:
        if self._worker is not None:
            self._worker.cancel()

    @Slot(object)
    def _on_result(self, summary: ImportSummary):
        self.view.set_import_status(
            f"Dictionary imported successfully! ({summary.entries} terms, {summary.definitions} definitions)"
        )
        self.import_completed.emit(summary)

    @Slot(str)
    def _on_error(self, message: str):
        logger.error("Dictionary import failed: %s", message)
        self.view.set_import_status(f"Error importing dictionary: {message}")

    @Slot()
    def _on_cancelled(self):
        self.view.set_import_status("Dictionary import cancelled.")

    @Slot()
    def _on_finished(self):
        self._worker = None
