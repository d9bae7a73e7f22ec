"""Per-session mutual exclusion for engine actions."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Hashable, Iterator, Set


class SessionLocks:
    """Non-blocking per-key locks; a busy key is reported instead of waited on.

    Only keys that are currently held are tracked, so the set shrinks back to
    empty once every action has finished.
    """

    def __init__(self) -> None:
        self._busy: Set[Hashable] = set()
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._busy)

    def _try_acquire(self, key: Hashable) -> bool:
        with self._guard:
            if key in self._busy:
                return False
            self._busy.add(key)
            return True

    def _release(self, key: Hashable) -> None:
        with self._guard:
            self._busy.discard(key)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[bool]:
        """Yield ``True`` while holding the lock for ``key``, ``False`` if it is taken."""

        acquired = self._try_acquire(key)
        try:
            yield acquired
        finally:
            if acquired:
                self._release(key)


__all__ = ["SessionLocks"]
