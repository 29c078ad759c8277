"""Read-through category cache.

The flattened category list lives in the cache store under a single key so
every worker shares it; each process rebuilds the linked tree locally and
keeps it for as long as the stored blob is unchanged.
"""

import json
import threading
from dataclasses import asdict

import structlog

from productsearch.category.store import CacheStore
from productsearch.category.tree import Category, build_category_tree, categories_with_ancestors
from productsearch.source.port import CategoryRecord, SourceGateway

logger = structlog.get_logger(__name__)

CATEGORY_CACHE_KEY = "cache:categories:map"


class CategoryService:
    def __init__(self, gateway: SourceGateway, store: CacheStore, cache_key: str = CATEGORY_CACHE_KEY) -> None:
        self.gateway = gateway
        self.store = store
        self.cache_key = cache_key
        self._lock = threading.Lock()
        self._blob: str | None = None
        self._tree: dict[int, Category] = {}

    def get_with_ancestors(self, category_ids: list[int]) -> list[Category]:
        """Return the categories and all their ancestors, each once.

        Unknown ids are skipped.
        """
        if not category_ids:
            return []
        return categories_with_ancestors(self._current_tree(), category_ids)

    def get(self, category_id: int) -> Category | None:
        return self._current_tree().get(category_id)

    def load_cache(self) -> int:
        """Reload categories from the source and replace the stored blob.

        Returns the number of categories cached.
        """
        rows = self.gateway.find_all_categories()
        blob = self._serialize(rows)
        self.store.set(self.cache_key, blob)
        with self._lock:
            self._blob = blob
            self._tree = build_category_tree(rows)
        logger.info("Category cache loaded", count=len(rows))
        return len(rows)

    def clear(self) -> None:
        self.store.delete(self.cache_key)
        with self._lock:
            self._blob = None
            self._tree = {}

    def _current_tree(self) -> dict[int, Category]:
        blob = self.store.get(self.cache_key)
        if blob is None:
            logger.info("Category cache miss, loading from source")
            self.load_cache()
            with self._lock:
                return self._tree

        with self._lock:
            if blob != self._blob:
                self._tree = build_category_tree(self._deserialize(blob))
                self._blob = blob
            return self._tree

    @staticmethod
    def _serialize(rows: list[CategoryRecord]) -> str:
        return json.dumps([asdict(row) for row in rows], separators=(",", ":"), ensure_ascii=False)

    @staticmethod
    def _deserialize(blob: str) -> list[CategoryRecord]:
        return [CategoryRecord(**item) for item in json.loads(blob)]
