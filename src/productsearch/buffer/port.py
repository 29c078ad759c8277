"""Work queue port: a FIFO list of pending product ids under one key."""

from abc import ABC, abstractmethod


class WorkQueue(ABC):
    """Abstract interface for work queue adapters."""

    @abstractmethod
    def append(self, ids: list[str]) -> None:
        """Append ids to the tail, in order, duplicates included."""
        ...

    @abstractmethod
    def pop(self) -> str | None:
        """Atomically remove and return the head entry; None when empty.

        Two concurrent callers never receive the same entry.
        """
        ...

    @abstractmethod
    def size(self) -> int: ...
