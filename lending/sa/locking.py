# lending/sa/locking.py
import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, List


class RowLockRegistry:
    """In-process exclusive locks keyed by row identity.

    Holding ``hold(key)`` gives single-writer-per-key semantics for the
    duration of the block. Keys that nobody holds or waits on are dropped so
    the map does not grow with the catalog.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, List] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1

        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
