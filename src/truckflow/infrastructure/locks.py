"""Per-truck keyed mutex registry.

Callers on the same truck are serialized across the whole
read-decide-write sequence; callers on different trucks never contend.
Entries are dropped once no thread holds or waits on them, so the
registry does not grow with the number of trucks ever seen.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class LockTimeoutError(Exception):
    """The per-truck lock could not be acquired within the timeout."""


@dataclass
class _Entry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class TruckLocks:
    """Registry of exclusive locks keyed by truck identifier."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    @contextmanager
    def hold(self, truck_id: str, *, timeout: float) -> Iterator[None]:
        """Hold the lock for *truck_id* for the duration of the block.

        Raises:
            LockTimeoutError: If the lock is not acquired within *timeout* seconds.
        """
        with self._guard:
            entry = self._entries.setdefault(truck_id, _Entry())
            entry.users += 1

        acquired = False
        try:
            acquired = entry.lock.acquire(timeout=timeout)
            if not acquired:
                logger.warning("Lock timeout for truck %s after %.1fs", truck_id, timeout)
                msg = f"Timed out waiting for truck '{truck_id}'"
                raise LockTimeoutError(msg)
            yield
        finally:
            if acquired:
                entry.lock.release()
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    self._entries.pop(truck_id, None)
