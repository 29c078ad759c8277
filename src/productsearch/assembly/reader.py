"""Timed source reads for assembly stages.

Gateway calls are blocking, so they run on the reader's own worker threads
rather than the event loop's default executor. ``asyncio.run`` joins the
default executor on exit, which would hold a timed-out run until the stuck
read returned. Every read is bounded by the stage timeout; hitting it fails
the run rather than dropping the product. A stuck read keeps its worker
until the gateway call returns.
"""

import asyncio
import functools
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from productsearch.document.builder import IndexContext
from productsearch.errors import StageTimeoutError
from productsearch.source.port import SourceGateway

DEFAULT_READ_WORKERS = 16


class SourceReader:
    def __init__(self, gateway: SourceGateway, timeout: float, max_workers: int = DEFAULT_READ_WORKERS) -> None:
        self.gateway = gateway
        self.timeout = timeout
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="assembly-read")

    async def fetch(self, context: IndexContext, stage: str, read: Callable[..., Any], *args) -> Any:
        """Read now and wait for the result."""
        return await self.collect(context, stage, self.launch(read, *args))

    def launch(self, read: Callable[..., Any], *args) -> asyncio.Future:
        """Start a read in the background."""
        loop = asyncio.get_running_loop()
        return loop.run_in_executor(self.executor, functools.partial(read, *args))

    async def collect(self, context: IndexContext, stage: str, task: asyncio.Future) -> Any:
        """Wait for a launched read."""
        try:
            return await asyncio.wait_for(task, self.timeout)
        except TimeoutError as e:
            raise StageTimeoutError(
                f"Stage {stage} read timed out after {self.timeout}s for product {context.product_id}",
                product_id=context.product_id,
                stage=stage,
            ) from e

    def close(self) -> None:
        """Stop accepting reads; queued reads are dropped, running ones are not joined."""
        self.executor.shutdown(wait=False, cancel_futures=True)
