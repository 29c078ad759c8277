"""In-process work queue for tests and single-process development."""

import threading
from collections import deque

from productsearch.buffer.port import WorkQueue
from productsearch.errors import WorkQueueError


class InMemoryWorkQueue(WorkQueue):
    def __init__(self) -> None:
        self._entries: deque[str] = deque()
        self._lock = threading.Lock()
        self.should_succeed = True

    def configure(self, should_succeed: bool = True) -> None:
        self.should_succeed = should_succeed

    def append(self, ids: list[str]) -> None:
        if not self.should_succeed:
            raise WorkQueueError("Work queue unavailable")
        with self._lock:
            self._entries.extend(ids)

    def pop(self) -> str | None:
        if not self.should_succeed:
            raise WorkQueueError("Work queue unavailable")
        with self._lock:
            return self._entries.popleft() if self._entries else None

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def snapshot(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
