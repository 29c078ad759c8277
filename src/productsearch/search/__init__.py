"""Product search service factory."""

from productsearch.search.service import ProductSearchService


def get_search_service() -> ProductSearchService:
    from productsearch.indexing import get_search_index
    from productsearch.source import get_gateway

    return ProductSearchService(get_search_index(), get_gateway())
