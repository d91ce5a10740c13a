"""Services layer - business logic over the I/O layer."""

from epub_reader.services.dictionary_importer import DictionaryImporter
from epub_reader.services.dictionary_index import DictionaryIndex
from epub_reader.services.section_navigator import SectionNavigator
from epub_reader.services.settings_manager import SettingsManager

# Text processing services
from epub_reader.services.text_processing import definitions_from_glossary, normalize_text, walk_structured_content

# Background workers
from epub_reader.services.api_workers import (
    BookImportWorker,
    DictionaryImportWorker,
    WorkerSignals,
)

__all__ = [
    "BookImportWorker",
    "DictionaryImportWorker",
    "DictionaryImporter",
    "DictionaryIndex",
    "SectionNavigator",
    "SettingsManager",
    "WorkerSignals",
    "definitions_from_glossary",
    "normalize_text",
    "walk_structured_content",
]
