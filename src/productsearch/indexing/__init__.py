"""Search index factory.

Provides get_search_index() / set_search_index() to swap implementations:
- InMemorySearchIndex for development and testing
- OpenSearchIndex for production (SEARCH_INDEX_ADAPTER=opensearch)

get_index_service() wires the index to the product assembler.
"""

import os

from productsearch.indexing.port import SearchIndex
from productsearch.indexing.service import ProductIndexService

_current_index: SearchIndex | None = None
_current_service: ProductIndexService | None = None


def get_search_index() -> SearchIndex:
    global _current_index
    if _current_index is None:
        adapter = os.environ.get("SEARCH_INDEX_ADAPTER", "memory")
        if adapter == "memory":
            from productsearch.indexing.fake_adapter import InMemorySearchIndex

            _current_index = InMemorySearchIndex()
        elif adapter == "opensearch":
            from productsearch.config import get_settings
            from productsearch.indexing.opensearch_adapter import OpenSearchIndex

            settings = get_settings()
            _current_index = OpenSearchIndex(settings.opensearch_url, index_name=settings.index_name)
        else:
            raise ValueError(f"Unknown search index adapter: {adapter}")
    return _current_index


def set_search_index(index: SearchIndex) -> None:
    """Override the active search index (useful for tests)."""
    global _current_index, _current_service
    _current_index = index
    _current_service = None


def get_index_service() -> ProductIndexService:
    global _current_service
    if _current_service is None:
        from productsearch.assembly import get_assembler

        _current_service = ProductIndexService(get_assembler(), get_search_index())
    return _current_service


def reset_search_index() -> None:
    """Reset to default index and service."""
    global _current_index, _current_service
    _current_index = None
    _current_service = None
