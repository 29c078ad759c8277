"""Full and partial reindex.

Both paths only buffer ids; the flusher and the index subscriber do the
actual work, so a migration is paced by the same batching as live changes.
"""

from collections.abc import Iterable

import structlog

from productsearch.buffer.event_buffer import ProductEventBuffer
from productsearch.cdc.handlers import DEFAULT_PAGE_SIZE, buffer_id_pages
from productsearch.source.port import SourceGateway

logger = structlog.get_logger(__name__)


class MigrationService:
    def __init__(self, gateway: SourceGateway, buffer: ProductEventBuffer):
        self.gateway = gateway
        self.buffer = buffer

    def migrate_all(self, page_size: int = DEFAULT_PAGE_SIZE) -> int:
        """Buffer every product id in the source, paging by id."""
        total = buffer_id_pages(self.buffer, self.gateway.find_product_ids_after, page_size)
        logger.info("Full migration buffered", count=total, page_size=page_size)
        return total

    def migrate_by_ids(self, product_ids: Iterable[int]) -> int:
        ids = list(product_ids)
        self.buffer.add(ids)
        logger.info("Partial migration buffered", count=len(ids))
        return len(ids)

    def flush_event_buffer(self, count: int) -> int:
        return self.buffer.flush(count)


def get_migration_service() -> MigrationService:
    from productsearch.buffer import get_event_buffer
    from productsearch.source import get_gateway

    return MigrationService(get_gateway(), get_event_buffer())
