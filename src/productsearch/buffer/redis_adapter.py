"""Redis list work queue (RPUSH to append, LPOP to pop)."""

import redis

from productsearch.buffer.port import WorkQueue
from productsearch.errors import WorkQueueError

PRODUCT_BUFFER_KEY = "buffer:event:products"


class RedisWorkQueue(WorkQueue):
    def __init__(self, url: str | None = None, key: str = PRODUCT_BUFFER_KEY, client: redis.Redis | None = None):
        self.client = client or redis.from_url(url, decode_responses=True, socket_connect_timeout=5)
        self.key = key

    def append(self, ids: list[str]) -> None:
        if not ids:
            return
        try:
            self.client.rpush(self.key, *ids)
        except redis.RedisError as e:
            raise WorkQueueError(f"RPUSH {self.key} failed: {e}") from e

    def pop(self) -> str | None:
        try:
            return self.client.lpop(self.key)
        except redis.RedisError as e:
            raise WorkQueueError(f"LPOP {self.key} failed: {e}") from e

    def size(self) -> int:
        try:
            return self.client.llen(self.key)
        except redis.RedisError as e:
            raise WorkQueueError(f"LLEN {self.key} failed: {e}") from e
