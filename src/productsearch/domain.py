"""Domain composition root for the product search indexer.

The domain owns message-broker wiring: the event bus publishes reindex
signals through its default broker and the Engine runs the subscribers
that turn those signals into index writes.
"""

from protean.domain import Domain

from productsearch.utils.logging import configure_logging

configure_logging(log_dir="logs", log_file_prefix="productsearch")

productsearch = Domain(name="productsearch")
