"""Coordinators - Orchestration layer connecting views with the core."""

from .dictionary_import_coordinator import DictionaryImportCoordinator
from .library_coordinator import LibraryCoordinator
from .reader_controller import ReaderController

__all__ = [
    "DictionaryImportCoordinator",
    "LibraryCoordinator",
    "ReaderController",
]
