"""Search index port.

Writes are keyed by product id. Reads take a prepared query plus sort and
``search_after`` values and return hits with their sort values, which the
pagination layer turns into cursors.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SearchRequest:
    query: dict
    sort: list[dict]
    size: int
    search_after: list | None = None

    def to_body(self) -> dict:
        body = {"query": self.query, "sort": self.sort, "size": self.size, "track_total_hits": True}
        if self.search_after:
            body["search_after"] = list(self.search_after)
        return body


@dataclass(frozen=True)
class SearchHit:
    id: int
    source: dict
    sort: list = field(default_factory=list)


@dataclass(frozen=True)
class SearchHits:
    hits: list[SearchHit]
    total: int


class SearchIndex(ABC):
    """Abstract interface for search index adapters."""

    @abstractmethod
    def upsert(self, product_id: int, document: dict) -> None:
        """Create or replace the document.

        Raises:
            IndexWriteError: the index rejected the write.
        """
        ...

    @abstractmethod
    def delete(self, product_id: int) -> bool:
        """Delete the document; True if it existed.

        Raises:
            IndexWriteError: the index rejected the delete.
        """
        ...

    @abstractmethod
    def search(self, request: SearchRequest) -> SearchHits: ...

    @abstractmethod
    def get_many(self, product_ids: list[int]) -> dict[int, dict]:
        """Fetch documents by id. Ids not in the index are absent from the result."""
        ...
