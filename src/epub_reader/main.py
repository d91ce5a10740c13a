"""Composition root for the reader core.

Views are supplied by the embedding UI; this is the only place that knows
how to instantiate and wire the core components.
"""

from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QThreadPool

from epub_reader.coordinators import DictionaryImportCoordinator, LibraryCoordinator, ReaderController
from epub_reader.io import BookImporter, BookLoader, DictionaryStore, LibraryRepository
from epub_reader.services import DictionaryImporter, DictionaryIndex, SettingsManager


@dataclass
class ReaderApplication:
    settings: SettingsManager
    dictionary_store: DictionaryStore
    library: LibraryCoordinator
    reader: ReaderController
    dictionary_import: DictionaryImportCoordinator

    def shutdown(self) -> None:
        self.reader.close_book()
        self.dictionary_store.close()


def build_application(
    main_window,
    reader_view,
    library_screen,
    dictionary_view,
    settings: Optional[SettingsManager] = None,
    thread_pool: Optional[QThreadPool] = None,
) -> ReaderApplication:
    """
    Wire the core behind the given views.

    The views are plain objects exposing the calls the coordinators make
    (``show_error``, ``render_section``, ``display_books``, ...).
    """
    # 1. Configuration and logging
    settings = settings or SettingsManager()
    settings.configure_logging()

    # 2. Infrastructure
    library_repository = LibraryRepository(settings.get_library_path())
    dictionary_store = DictionaryStore(settings.get_dictionary_db_path()).open()
    book_importer = BookImporter(library_repository, settings.get_books_dir())

    # 3. Coordinators (Dependency Injection)
    reader = ReaderController(
        main_window=main_window,
        reader_view=reader_view,
        book_loader=BookLoader(),
        library_repository=library_repository,
        dictionary_index=DictionaryIndex(dictionary_store),
    )
    library = LibraryCoordinator(
        library_screen=library_screen,
        library_repository=library_repository,
        book_importer=book_importer,
        main_window=main_window,
        thread_pool=thread_pool,
    )
    dictionary_import = DictionaryImportCoordinator(
        view=dictionary_view,
        importer=DictionaryImporter(dictionary_store, settings.get_dictionary_language()),
        thread_pool=thread_pool,
    )

    # 4. Signal wiring
    library.book_selected.connect(reader.open_book)

    return ReaderApplication(
        settings=settings,
        dictionary_store=dictionary_store,
        library=library,
        reader=reader,
        dictionary_import=dictionary_import,
    )
