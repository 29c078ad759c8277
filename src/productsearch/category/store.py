"""Key-value store holding the flattened category list."""

from abc import ABC, abstractmethod

import redis


class CacheStore(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> None: ...


class InMemoryCacheStore(CacheStore):
    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)


class RedisCacheStore(CacheStore):
    def __init__(self, url: str | None = None, client: redis.Redis | None = None) -> None:
        self.client = client or redis.from_url(url, decode_responses=True, socket_connect_timeout=5)

    def get(self, key: str) -> str | None:
        return self.client.get(key)

    def set(self, key: str, value: str) -> None:
        self.client.set(key, value)

    def delete(self, key: str) -> None:
        self.client.delete(key)
