"""Cancellation tokens and per-resource busy guards for long operations."""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from .errors import OperationCancelled, ResourceBusyError


class CancellationToken:
    """Cooperative cancellation flag checked at every suspension point."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("Operation cancelled")


def check_cancelled(token: Optional[CancellationToken]) -> None:
    """Raise OperationCancelled if ``token`` was cancelled; None never cancels."""
    if token is not None:
        token.raise_if_cancelled()


class ResourceGuard:
    """Allows at most one operation in flight per resource.

    Resources are keyed by their resolved path, so two guards for the same
    file or directory contend even when given different spellings.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._busy: Dict[str, str] = {}

    @staticmethod
    def _key(resource: Union[str, Path]) -> str:
        return str(Path(resource).expanduser().resolve())

    def is_busy(self, resource: Union[str, Path]) -> bool:
        with self._lock:
            return self._key(resource) in self._busy

    @contextmanager
    def hold(self, resource: Union[str, Path], operation: str = "operation") -> Iterator[None]:
        """Hold ``resource`` for the duration of the block.

        Raises:
            ResourceBusyError: If another operation already holds it.
        """
        key = self._key(resource)
        with self._lock:
            if key in self._busy:
                raise ResourceBusyError(
                    f"Cannot start {operation}: {self._busy[key]} already in progress for {key}"
                )
            self._busy[key] = operation
        try:
            yield
        finally:
            with self._lock:
                self._busy.pop(key, None)


# Book opens and dictionary imports share one process-wide guard.
resource_guard = ResourceGuard()
