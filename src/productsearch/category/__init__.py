"""Category service factory.

The cache store is chosen by CACHE_ADAPTER ("memory" by default, "redis"
in production).
"""

import os

from productsearch.category.service import CategoryService
from productsearch.category.store import CacheStore

_current_service: CategoryService | None = None


def _build_store() -> CacheStore:
    adapter = os.environ.get("CACHE_ADAPTER", "memory")
    if adapter == "memory":
        from productsearch.category.store import InMemoryCacheStore

        return InMemoryCacheStore()
    if adapter == "redis":
        from productsearch.category.store import RedisCacheStore
        from productsearch.config import get_settings

        return RedisCacheStore(get_settings().redis_url)
    raise ValueError(f"Unknown cache adapter: {adapter}")


def get_category_service() -> CategoryService:
    """Return the process-wide category service."""
    global _current_service
    if _current_service is None:
        from productsearch.source import get_gateway

        _current_service = CategoryService(get_gateway(), _build_store())
    return _current_service


def set_category_service(service: CategoryService) -> None:
    global _current_service
    _current_service = service


def reset_category_service() -> None:
    global _current_service
    _current_service = None
