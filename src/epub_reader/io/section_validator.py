"""Section Validator - keeps readable sections, falls back to filesystem scans."""

import logging
from typing import List, Optional, Sequence

from epub_reader.core import path_resolver
from epub_reader.core.cancellation import CancellationToken, check_cancelled
from epub_reader.core.errors import NoReadableContent
from epub_reader.core.section import Section, generic_title
from epub_reader.io.file_store import FileStore

logger = logging.getLogger(__name__)

MARKUP_EXTENSIONS = (".xhtml", ".html", ".htm")
TEXT_EXTENSIONS = (".txt",)


class SectionValidator:
    """Filters sections to existing, readable files.

    When nothing survives, the book directory is scanned for markup files and
    then for plain-text files; sections are synthesized in path order.
    """

    def __init__(self, store: FileStore) -> None:
        self.store = store

    def validate(
        self,
        sections: Sequence[Section],
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[Section]:
        """Return the readable sections, renumbered in order.

        Raises:
            NoReadableContent: If neither the sections nor the scans yield anything.
        """
        readable: List[Section] = []
        for section in sections:
            check_cancelled(cancel_token)
            if not self.store.is_readable(section.path):
                logger.warning("Dropping section '%s': %s is missing or unreadable", section.title, section.path)
                continue
            readable.append(Section(path=section.path, title=section.title, order=len(readable)))
        if readable:
            return readable

        for extensions in (MARKUP_EXTENSIONS, TEXT_EXTENSIONS):
            scanned = self.scan(extensions, cancel_token)
            if scanned:
                logger.warning(
                    "No package section is readable, using %d %s files found on disk",
                    len(scanned),
                    "/".join(extensions),
                )
                return scanned

        raise NoReadableContent("Book contains no readable sections")

    def scan(
        self,
        extensions: Sequence[str],
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[Section]:
        paths = sorted(
            path
            for path in self.store.list_files(cancel_token)
            if path_resolver.extension_of(path) in extensions and self.store.is_readable(path)
        )
        return [Section(path=path, title=generic_title(index), order=index) for index, path in enumerate(paths)]
