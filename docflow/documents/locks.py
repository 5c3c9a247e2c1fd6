import threading
from collections.abc import Iterator
from contextlib import contextmanager


class DocumentLocks:
    """Per-document mutexes for read-modify-write sections.

    Entries are reference counted and dropped once no thread holds or waits
    for them.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}
        self._users: dict[int, int] = {}

    @contextmanager
    def hold(self, document_id: int) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(document_id, threading.Lock())
            self._users[document_id] = self._users.get(document_id, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[document_id] -= 1
                if self._users[document_id] == 0:
                    del self._users[document_id]
                    del self._locks[document_id]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
