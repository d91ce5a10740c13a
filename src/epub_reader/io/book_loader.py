"""Book Loader - runs the open pipeline from package discovery to validation."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from epub_reader.core.cancellation import CancellationToken, ResourceGuard, check_cancelled, resource_guard
from epub_reader.core.errors import FileReadError, ManifestParseError
from epub_reader.core.package_document import PackageDocument
from epub_reader.core.section import Section, generic_title
from epub_reader.io.file_store import DirectoryFileStore, FileStore
from epub_reader.io.package_locator import PackageLocator
from epub_reader.io.package_parser import PackageParser
from epub_reader.io.section_validator import SectionValidator
from epub_reader.io.toc_resolver import TocResolver

logger = logging.getLogger(__name__)


@dataclass
class LoadedBook:
    """An opened book: its store, the parsed package and the final sections."""

    root: Path
    store: FileStore
    sections: List[Section]
    package: Optional[PackageDocument] = None
    container_path: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def title(self) -> Optional[str]:
        return self.package.metadata.title if self.package is not None else None


class BookLoader:
    """Opens an extracted book directory into an ordered section list.

    Only two outcomes are fatal: PackageNotFound (from the locator) and
    NoReadableContent (from the validator). An unparseable or unreadable
    package descriptor degrades to the validator's filesystem fallback.
    """

    def __init__(
        self,
        parser: Optional[PackageParser] = None,
        guard: Optional[ResourceGuard] = None,
    ) -> None:
        self.parser = parser or PackageParser()
        self.guard = guard or resource_guard

    def load(self, book_dir: Path, cancel_token: Optional[CancellationToken] = None) -> LoadedBook:
        """Open ``book_dir``; the section list is rebuilt on every call.

        Raises:
            PackageNotFound: If no package descriptor exists.
            NoReadableContent: If no readable section can be produced.
            ResourceBusyError: If the same directory is already being opened.
            OperationCancelled: If ``cancel_token`` is cancelled.
        """
        book_dir = Path(book_dir)
        with self.guard.hold(book_dir, "book open"):
            store = DirectoryFileStore(book_dir)
            logger.info("Opening book at %s", book_dir)
            location = PackageLocator(store).locate(cancel_token)
            if location.container_path is not None:
                logger.info("Package %s declared by %s", location.descriptor_path, location.container_path)

            loaded = LoadedBook(root=book_dir, store=store, sections=[], container_path=location.container_path)
            package = self._parse_package(store, location.descriptor_path, loaded, cancel_token)

            sections: List[Section] = []
            if package is not None:
                loaded.package = package
                sections = self._spine_sections(package)
                check_cancelled(cancel_token)
                sections = TocResolver(store).resolve(package, sections, cancel_token)

            loaded.sections = SectionValidator(store).validate(sections, cancel_token)
            logger.info("Opened %s with %d sections", book_dir, len(loaded.sections))
            return loaded

    def _parse_package(
        self,
        store: FileStore,
        descriptor_path: str,
        loaded: LoadedBook,
        cancel_token: Optional[CancellationToken],
    ) -> Optional[PackageDocument]:
        check_cancelled(cancel_token)
        try:
            return self.parser.parse(descriptor_path, store.read_bytes(descriptor_path))
        except (FileReadError, ManifestParseError) as e:
            logger.warning("Falling back to directory scan: %s", e)
            loaded.warnings.append(str(e))
            return None

    def _spine_sections(self, package: PackageDocument) -> List[Section]:
        sections: List[Section] = []
        seen: set[str] = set()
        for item in self.parser.reading_order(package):
            if item.path in seen:
                continue
            seen.add(item.path)
            sections.append(Section(path=item.path, title=generic_title(len(sections)), order=len(sections)))
        return sections
