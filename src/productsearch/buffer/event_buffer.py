"""Product event buffer.

CDC handlers ``add`` product ids as fast as changes arrive; ``flush`` later
drains a bounded batch, collapses duplicates and publishes one
product-updated event per id. A product touched by ten source rows in a
burst is therefore reassembled once.
"""

from collections.abc import Iterable

import structlog

from productsearch.buffer.port import WorkQueue
from productsearch.messaging.producers import ProductEventProducer

logger = structlog.get_logger(__name__)


class ProductEventBuffer:
    def __init__(self, queue: WorkQueue, producer: ProductEventProducer) -> None:
        self.queue = queue
        self.producer = producer

    def add(self, product_ids: Iterable[int | str]) -> None:
        """Append ids to the queue as-is. Store errors propagate."""
        entries = [str(product_id) for product_id in product_ids]
        if not entries:
            return
        self.queue.append(entries)
        logger.debug("Buffered product ids", count=len(entries))

    def flush(self, count: int) -> int:
        """Pop up to ``count`` entries and publish each distinct id once.

        A failed publish is logged and the id is dropped from this cycle;
        the rest of the batch is still published. Returns the number of ids
        published.
        """
        popped = []
        while len(popped) < count:
            entry = self.queue.pop()
            if entry is None:
                break
            popped.append(entry)

        if not popped:
            return 0

        product_ids: dict[int, None] = {}
        for entry in popped:
            try:
                product_ids[int(entry)] = None
            except ValueError:
                logger.warning("Skipping malformed buffer entry", entry=entry)

        published = 0
        for product_id in product_ids:
            try:
                self.producer.send_updated(product_id)
                published += 1
            except Exception as e:
                logger.error("Failed to publish product update", product_id=product_id, error=str(e))

        logger.info("Flushed event buffer", popped=len(popped), unique=len(product_ids), published=published)
        return published

    def pending(self) -> int:
        return self.queue.size()
