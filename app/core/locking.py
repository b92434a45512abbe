"""
In-process mutual exclusion keyed by entity.

Occupancy writes take one lock per touched entity (``room:<id>``,
``student:<id>``). Keys are always acquired in sorted order so two
operations touching the same pair of rooms cannot deadlock, and every wait
is bounded.
"""

import threading
import time
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Tuple

from app.core.exceptions import ConcurrencyConflictError
from app.core.logging import get_logger

logger = get_logger(__name__)


def room_key(room_id: str) -> str:
    return f"room:{room_id}"


def student_key(student_id: str) -> str:
    return f"student:{student_id}"


class _KeyLock:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class EntityLockRegistry:
    """
    Registry of per-entity locks shared by every request of the process.

    A key's lock lives only while some caller holds or waits on it.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, _KeyLock] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _checkout(self, key: str) -> _KeyLock:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _KeyLock()
            entry.users += 1
            return entry

    def _checkin(self, key: str, entry: _KeyLock) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    @contextmanager
    def acquire(self, keys: Iterable[str], timeout: float) -> Iterator[List[str]]:
        """
        Hold the locks of all ``keys`` for the duration of the block.

        Raises:
            ConcurrencyConflictError: if the locks could not all be taken
                within ``timeout`` seconds overall.
        """
        ordered = sorted({key for key in keys if key})
        deadline = time.monotonic() + timeout
        held: List[Tuple[str, _KeyLock]] = []

        try:
            for key in ordered:
                entry = self._checkout(key)
                remaining = max(0.0, deadline - time.monotonic())
                if not entry.lock.acquire(timeout=remaining):
                    self._checkin(key, entry)
                    logger.warning("Lock wait timed out", extra={"lock_key": key, "timeout": timeout})
                    raise ConcurrencyConflictError()
                held.append((key, entry))
            yield ordered
        finally:
            for key, entry in reversed(held):
                entry.lock.release()
                self._checkin(key, entry)


# One registry per process; all coordinators share it.
entity_locks = EntityLockRegistry()


__all__ = ["EntityLockRegistry", "entity_locks", "room_key", "student_key"]
