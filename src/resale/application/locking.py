"""Per-user mutual exclusion for cart mutations and checkout.

Carts are scoped to one user, so operations for different users never
contend. Within one user, checkout and cart edits run one at a time so a
cart cannot change underneath a checkout in progress.
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager

from resale.domain.exceptions import StorageError


class UserLockRegistry:

    def __init__(self, timeout: float = 5.0) -> None:
        self._timeout = timeout
        self._guard = threading.Lock()
        # Entries vanish once no caller holds or waits on the lock.
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )

    @contextmanager
    def hold(self, user_id: str) -> Iterator[None]:
        lock = self._lock_for(user_id)
        if not lock.acquire(timeout=self._timeout):
            raise StorageError(f"Timed out waiting for the cart lock of user {user_id!r}")
        try:
            yield
        finally:
            lock.release()

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.Lock()
            return lock
