import threading
import logging
from contextlib import contextmanager
from typing import Dict, Generator, Hashable, Tuple

logger = logging.getLogger(__name__)

DayKey = Tuple[str, str]


class DayLockRegistry:
    """
    Mutual exclusion per (user_id, date).

    Every task mutation and submission for the same day runs inside `hold`, so
    the guard check, the write and the recompute never interleave with another
    request for that day. Different days never block each other.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._waiters: Dict[Hashable, int] = {}

    def _acquire_entry(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
                self._waiters[key] = 0
            self._waiters[key] += 1
            return lock

    def _release_entry(self, key: Hashable) -> None:
        with self._guard:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    @contextmanager
    def hold(self, *keys: DayKey) -> Generator[None, None, None]:
        # Sorted acquisition keeps two-day holders (date-moving updates) deadlock free
        ordered = sorted(set(keys))
        acquired = []
        try:
            for key in ordered:
                lock = self._acquire_entry(key)
                try:
                    lock.acquire()
                except BaseException:
                    self._release_entry(key)
                    raise
                acquired.append((key, lock))
            yield
        finally:
            for key, lock in reversed(acquired):
                lock.release()
                self._release_entry(key)

    def active_keys(self):
        with self._guard:
            return list(self._locks.keys())
