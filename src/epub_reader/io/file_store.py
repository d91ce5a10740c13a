"""File-store capability over an extracted book directory."""

import logging
import os
from pathlib import Path
from typing import List, Optional, Protocol

from epub_reader.core import path_resolver
from epub_reader.core.cancellation import CancellationToken, check_cancelled
from epub_reader.core.errors import FileReadError

logger = logging.getLogger(__name__)


class FileStore(Protocol):
    """Minimal read-only view of a book's resources.

    Paths are package-relative and normalized with ``path_resolver.normalize``.
    """

    def exists(self, path: str) -> bool: ...

    def is_readable(self, path: str) -> bool: ...

    def list_files(self, cancel_token: Optional[CancellationToken] = None) -> List[str]: ...

    def read_bytes(self, path: str) -> bytes: ...

    def read_text(self, path: str) -> str: ...


class DirectoryFileStore:
    """FileStore backed by a directory on disk."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _locate(self, path: str) -> Path:
        normalized = path_resolver.normalize(path)
        if not normalized:
            return self.root
        return self.root.joinpath(*normalized.split(path_resolver.SEPARATOR))

    def exists(self, path: str) -> bool:
        return self._locate(path).is_file()

    def is_readable(self, path: str) -> bool:
        target = self._locate(path)
        return target.is_file() and os.access(target, os.R_OK)

    def list_files(self, cancel_token: Optional[CancellationToken] = None) -> List[str]:
        """Return every file below the root, sorted by package path."""
        found: List[str] = []
        for directory, dirnames, filenames in os.walk(self.root):
            check_cancelled(cancel_token)
            dirnames.sort()
            base = Path(directory).relative_to(self.root).as_posix()
            for name in filenames:
                found.append(path_resolver.join(base, name))
        return sorted(found)

    def read_bytes(self, path: str) -> bytes:
        """Read a resource as raw bytes.

        Raises:
            FileReadError: If the file is missing or unreadable.
        """
        try:
            return self._locate(path).read_bytes()
        except OSError as e:
            raise FileReadError(f"Failed to read {path}: {e}") from e

    def read_text(self, path: str) -> str:
        """Read a resource as text.

        UTF-8 is tried first (a BOM is dropped); undecodable content falls back
        to a binary read decoded with replacement characters.

        Raises:
            FileReadError: If the file cannot be read at all.
        """
        target = self._locate(path)
        try:
            return target.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError:
            logger.warning("%s is not valid UTF-8, falling back to binary read", path)
        except OSError as e:
            raise FileReadError(f"Failed to read {path}: {e}") from e
        return self.read_bytes(path).decode("utf-8", errors="replace")
