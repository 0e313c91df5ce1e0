"""Process-wide JSON document store.

Holds the ``carts`` and ``orders`` collections in a single data file so a
checkout (order insert + cart clear) can be committed with one atomic
file replace. There is no window in which one write has landed and the
other has not.

Every document carries a ``version``. Updates name the version they
were read at; if the stored version has moved on, the whole change set
is rejected with ConcurrencyConflictError. Inserts fail the same way
when the key already exists, which is what keeps carts unique per user.

Commits from several processes sharing one data file are serialised by
a ``store.json.lock`` file lock held from re-read to replace.

With ``path=None`` the store is memory-only, which tests use.
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import structlog
from filelock import FileLock, Timeout

from resale.domain.exceptions import ConcurrencyConflictError, StorageError

logger = structlog.get_logger(__name__)

COLLECTIONS = ("carts", "orders")


@dataclass(frozen=True)
class Change:
    """One staged write.

    ``expected_version`` is None for inserts. An insert with ``key=None``
    gets the next integer from the collection's sequence.
    """

    collection: str
    key: str | None
    document: dict
    expected_version: int | None = None


@dataclass(frozen=True)
class Applied:
    key: str
    version: int


def _empty_state() -> dict:
    state: dict = {name: {} for name in COLLECTIONS}
    state["sequences"] = {name: 0 for name in COLLECTIONS}
    return state


class DocumentStore:

    def __init__(self, path: Path | None = None, lock_timeout: float = 5.0) -> None:
        self._path = path
        self._lock_timeout = lock_timeout
        self._lock = threading.RLock()
        self._file_lock = (
            FileLock(path.with_name(path.name + ".lock"), timeout=lock_timeout)
            if path is not None
            else None
        )
        self._state: dict | None = None
        self._stamp: tuple[int, int] | None = None

    # --- Lifecycle ------------------------------------------------------------

    def open(self) -> DocumentStore:
        with self._locked():
            if self._state is None:
                self._state = self._load()
                logger.debug("store_opened", path=str(self._path) if self._path else None)
        return self

    def close(self) -> None:
        with self._locked():
            self._state = None
            self._stamp = None

    @property
    def is_open(self) -> bool:
        return self._state is not None

    def __enter__(self) -> DocumentStore:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- Reads ----------------------------------------------------------------

    def get(self, collection: str, key: str) -> dict | None:
        with self._locked():
            doc = self._current()[collection].get(str(key))
            return copy.deepcopy(doc)

    def find(self, collection: str, predicate: Callable[[dict], bool]) -> list[dict]:
        with self._locked():
            docs = self._current()[collection].values()
            return [copy.deepcopy(d) for d in docs if predicate(d)]

    # --- Writes ---------------------------------------------------------------

    def apply(self, changes: list[Change]) -> list[Applied]:
        """Apply a change set atomically.

        Works on a copy of the current state; the copy only replaces the
        live state once it has been written to disk. The data file is
        re-read under the inter-process lock, so version checks see every
        commit made by other processes.
        """
        with self._locked(), self._file_locked():
            staged = copy.deepcopy(self._current(fresh=True))
            applied: list[Applied] = []

            for change in changes:
                docs = staged[change.collection]
                if change.expected_version is None:
                    key = change.key
                    document = dict(change.document)
                    if key is None:
                        staged["sequences"][change.collection] += 1
                        key = str(staged["sequences"][change.collection])
                        document["id"] = int(key)
                    if key in docs:
                        raise ConcurrencyConflictError(
                            f"{change.collection} document {key!r} already exists"
                        )
                    document["version"] = 1
                else:
                    key = str(change.key)
                    current = docs.get(key)
                    if current is None or current.get("version") != change.expected_version:
                        raise ConcurrencyConflictError(
                            f"{change.collection} document {key!r} was modified concurrently"
                        )
                    document = dict(change.document)
                    document["version"] = change.expected_version + 1

                docs[key] = document
                applied.append(Applied(key=key, version=document["version"]))

            self._write(staged)
            self._state = staged
            return applied

    # --- Internal helpers -----------------------------------------------------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self._lock_timeout):
            raise StorageError("Timed out waiting for the storage lock")
        try:
            yield
        finally:
            self._lock.release()

    @contextmanager
    def _file_locked(self) -> Iterator[None]:
        if self._file_lock is None:
            yield
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._file_lock.acquire()
        except Timeout as exc:
            raise StorageError(f"Timed out waiting for the lock on {self._path}") from exc
        except OSError as exc:
            raise StorageError(f"Cannot write data file {self._path}: {exc}") from exc
        try:
            yield
        finally:
            self._file_lock.release()

    def _current(self, fresh: bool = False) -> dict:
        if self._state is None:
            raise StorageError("Document store is not open")
        # Pick up writes from other processes sharing the data file.
        if self._path is not None and (fresh or self._file_stamp() != self._stamp):
            self._state = self._load()
        return self._state

    def _file_stamp(self) -> tuple[int, int] | None:
        try:
            st = self._path.stat()
        except (FileNotFoundError, NotADirectoryError):
            return None
        return (st.st_mtime_ns, st.st_size)

    def _load(self) -> dict:
        if self._path is None or not self._path.exists():
            self._stamp = None
            return _empty_state()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read data file {self._path}: {exc}") from exc

        state = _empty_state()
        for name in COLLECTIONS:
            state[name].update(raw.get(name, {}))
            state["sequences"][name] = raw.get("sequences", {}).get(name, 0)
        self._stamp = self._file_stamp()
        return state

    def _write(self, state: dict) -> None:
        if self._path is None:
            return
        try:
            payload = json.dumps(state, indent=2, sort_keys=True) + "\n"
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Cannot write data file {self._path}: {exc}") from exc
        self._stamp = self._file_stamp()
