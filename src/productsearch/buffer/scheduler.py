"""Periodic flush loop."""

import threading

import structlog

from productsearch.buffer.event_buffer import ProductEventBuffer

logger = structlog.get_logger(__name__)


def run_flush_loop(
    buffer: ProductEventBuffer,
    count: int,
    interval: float,
    stop_event: threading.Event,
) -> int:
    """Flush every ``interval`` seconds until ``stop_event`` is set.

    A full batch is followed immediately by another flush. Returns the total
    number of ids published.
    """
    total = 0
    logger.info("Starting flush loop", count=count, interval=interval)
    while not stop_event.is_set():
        try:
            published = buffer.flush(count)
        except Exception as e:
            logger.error("Flush cycle failed", error=str(e))
            published = 0
        total += published
        if published < count:
            stop_event.wait(interval)
    logger.info("Flush loop stopped", total=total)
    return total
