"""Package Locator - finds the package descriptor inside an extracted book."""

import logging
from dataclasses import dataclass
from typing import Optional

from epub_reader.core import path_resolver
from epub_reader.core.cancellation import CancellationToken, check_cancelled
from epub_reader.core.errors import FileReadError, PackageNotFound
from epub_reader.io.file_store import FileStore
from epub_reader.io.xml_support import attribute, descendants, parse_xml

logger = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"
PACKAGE_EXTENSION = ".opf"
PACKAGE_MEDIA_TYPE = "application/oebps-package+xml"

CONVENTIONAL_LOCATIONS = (
    CONTAINER_PATH,
    "content.opf",
    "OEBPS/content.opf",
    "OPS/content.opf",
    "package.opf",
)


@dataclass(frozen=True)
class PackageLocation:
    descriptor_path: str
    container_path: Optional[str] = None


class PackageLocator:
    """Resolves the package descriptor path of a book.

    Conventional locations are tried first; a container descriptor among them
    is followed to its root file. When none match, the whole store is scanned
    for the first ``.opf`` file.
    """

    def __init__(self, store: FileStore) -> None:
        self.store = store

    def locate(self, cancel_token: Optional[CancellationToken] = None) -> PackageLocation:
        """Return the location of the package descriptor.

        Raises:
            PackageNotFound: If neither the conventional locations nor the
                directory scan yield a descriptor.
        """
        for candidate in CONVENTIONAL_LOCATIONS:
            check_cancelled(cancel_token)
            if not self.store.exists(candidate):
                continue
            if path_resolver.extension_of(candidate) == PACKAGE_EXTENSION:
                logger.debug("Package descriptor found at conventional location %s", candidate)
                return PackageLocation(descriptor_path=candidate)
            descriptor = self._follow_container(candidate)
            if descriptor is not None:
                return PackageLocation(descriptor_path=descriptor, container_path=candidate)

        for path in self.store.list_files(cancel_token):
            if path_resolver.extension_of(path) == PACKAGE_EXTENSION:
                logger.info("Package descriptor found by directory scan: %s", path)
                return PackageLocation(descriptor_path=path)

        raise PackageNotFound("No package descriptor (.opf) found in book directory")

    def _follow_container(self, container_path: str) -> Optional[str]:
        try:
            raw = self.store.read_bytes(container_path)
        except FileReadError as e:
            logger.warning("Skipping unreadable container %s: %s", container_path, e)
            return None

        root = parse_xml(raw)
        if root is None:
            logger.warning("Skipping unparseable container %s", container_path)
            return None

        rootfiles = [node for node in descendants(root, "rootfile") if attribute(node, "full-path")]
        if not rootfiles:
            logger.warning("Container %s references no root file", container_path)
            return None
        preferred = [node for node in rootfiles if attribute(node, "media-type") == PACKAGE_MEDIA_TYPE]
        full_path = path_resolver.unquote_href(attribute((preferred or rootfiles)[0], "full-path"))

        for candidate in self._rootfile_candidates(container_path, full_path):
            if self.store.exists(candidate):
                return candidate
        logger.warning("Container %s points at missing root file %s", container_path, full_path)
        return None

    @staticmethod
    def _rootfile_candidates(container_path: str, full_path: str) -> list[str]:
        # full-path is relative to the directory holding META-INF; the
        # container's own directory is accepted for non-conformant books.
        container_dir = path_resolver.directory_of(container_path)
        segments = container_dir.split(path_resolver.SEPARATOR) if container_dir else []
        if segments and segments[-1].upper() == "META-INF":
            container_root = path_resolver.SEPARATOR.join(segments[:-1])
        else:
            container_root = container_dir
        candidates = [path_resolver.join(container_root, full_path)]
        alternative = path_resolver.resolve(container_path, full_path)
        if alternative not in candidates:
            candidates.append(alternative)
        return candidates
