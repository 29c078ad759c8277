"""Event buffer factory.

The work queue is chosen by WORK_QUEUE_ADAPTER ("memory" by default,
"redis" in production).
"""

import os

from productsearch.buffer.event_buffer import ProductEventBuffer
from productsearch.buffer.port import WorkQueue

_current_buffer: ProductEventBuffer | None = None


def _build_queue() -> WorkQueue:
    adapter = os.environ.get("WORK_QUEUE_ADAPTER", "memory")
    if adapter == "memory":
        from productsearch.buffer.memory_adapter import InMemoryWorkQueue

        return InMemoryWorkQueue()
    if adapter == "redis":
        from productsearch.buffer.redis_adapter import RedisWorkQueue
        from productsearch.config import get_settings

        return RedisWorkQueue(get_settings().redis_url)
    raise ValueError(f"Unknown work queue adapter: {adapter}")


def get_event_buffer() -> ProductEventBuffer:
    """Return the process-wide event buffer."""
    global _current_buffer
    if _current_buffer is None:
        from productsearch.messaging import get_event_bus
        from productsearch.messaging.producers import ProductEventProducer

        _current_buffer = ProductEventBuffer(_build_queue(), ProductEventProducer(get_event_bus()))
    return _current_buffer


def set_event_buffer(buffer: ProductEventBuffer) -> None:
    global _current_buffer
    _current_buffer = buffer


def reset_event_buffer() -> None:
    global _current_buffer
    _current_buffer = None
