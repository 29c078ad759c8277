"""Error types raised across the indexer.

Handlers and writers let these propagate; only the buffer flusher and the
bulk reindex path catch them per item.
"""


class ProductSearchError(Exception):
    """Base class for indexer errors."""


class ChangeEventDecodeError(ProductSearchError):
    """A CDC message could not be decoded into a valid change event."""

    def __init__(self, message: str, topic: str | None = None):
        super().__init__(message)
        self.topic = topic


class AssemblyError(ProductSearchError):
    """Document assembly failed (as opposed to resolving to absent)."""

    def __init__(self, message: str, product_id: int | None = None, stage: str | None = None):
        super().__init__(message)
        self.product_id = product_id
        self.stage = stage


class StageTimeoutError(AssemblyError):
    """A stage's background read did not finish in time."""


class IncompleteDocumentError(AssemblyError):
    """The builder was asked to build without a required field."""


class IndexWriteError(ProductSearchError):
    """Upsert or delete against the search index failed."""

    def __init__(self, message: str, product_id: int | None = None):
        super().__init__(message)
        self.product_id = product_id


class EventPublishError(ProductSearchError):
    """Publishing to the event bus failed."""


class WorkQueueError(ProductSearchError):
    """The work queue store rejected an operation."""


class InvalidCursorError(ProductSearchError):
    """A pagination cursor is malformed or belongs to a different query."""


class RankingNotFoundError(ProductSearchError):
    """No ranking specification exists for the requested path."""


class SourceReadError(ProductSearchError):
    """The relational source could not be read."""


class InvalidQueryError(ProductSearchError):
    """A search request names an unsupported ordering or size."""
