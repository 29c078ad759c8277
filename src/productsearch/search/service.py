"""Read side: paged product listings over the search index."""

from dataclasses import dataclass, replace

import structlog

from productsearch.errors import InvalidQueryError, RankingNotFoundError
from productsearch.indexing.port import SearchIndex
from productsearch.search.cursor import (
    decode_cursor,
    decode_scope_cursor,
    encode_cursor,
    encode_scope_cursor,
    sort_shape,
)
from productsearch.search.query_builder import SearchFilter, build_request
from productsearch.source.port import SourceGateway

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class SearchPage:
    """One page of documents.

    ``total_hits`` is the index-wide match count for searches. Ranking and
    like pages are driven by the source tables, so there it counts only the
    documents on this page.
    """

    documents: list[dict]
    total_hits: int
    next_cursor: str | None = None

    def as_response(self) -> dict:
        return {"count": self.total_hits, "results": self.documents, "next": self.next_cursor}


def _check_size(size: int) -> None:
    if not 1 <= size <= MAX_PAGE_SIZE:
        raise InvalidQueryError(f"Page size must be between 1 and {MAX_PAGE_SIZE}, got {size}")


class ProductSearchService:
    """Cursor-paged product queries.

    Every query asks for one hit more than the page size; the extra hit
    only signals that a next page exists and is never returned. The cursor
    carries the sort values of the last returned hit.
    """

    def __init__(self, index: SearchIndex, gateway: SourceGateway):
        self.index = index
        self.gateway = gateway

    def search(
        self,
        search_filter: SearchFilter,
        size: int = DEFAULT_PAGE_SIZE,
        cursor: str | None = None,
        ordering: str | None = None,
    ) -> SearchPage:
        _check_size(size)
        request = build_request(search_filter, size + 1, ordering)
        shape = sort_shape(request.sort, type(search_filter).__name__)
        if cursor:
            request = replace(request, search_after=decode_cursor(cursor, shape))

        result = self.index.search(request)
        hits = result.hits[:size]
        next_cursor = encode_cursor(hits[-1].sort, shape) if len(result.hits) > size else None

        logger.debug(
            "Search executed",
            search_filter=type(search_filter).__name__,
            returned=len(hits),
            total=result.total,
        )
        return SearchPage(documents=[hit.source for hit in hits], total_hits=result.total, next_cursor=next_cursor)

    def best_ranking(self, path: str, size: int = DEFAULT_PAGE_SIZE, cursor: str | None = None) -> SearchPage:
        """Products of a ranking, best rank first."""
        _check_size(size)
        specification_id = self.gateway.find_ranking_specification_id(path)
        if specification_id is None:
            raise RankingNotFoundError(f"No ranking for path {path!r}")

        scope = f"ranking:{path}"
        after_rank = decode_scope_cursor(cursor, scope) if cursor else None
        ranked = self.gateway.find_ranked_products(specification_id, after_rank, size + 1)
        kept = ranked[:size]
        next_cursor = encode_scope_cursor(kept[-1].rank, scope) if len(ranked) > size else None
        return self._documents_in_order([item.product_id for item in kept], next_cursor)

    def liked_products(self, customer_id: int, size: int = DEFAULT_PAGE_SIZE, cursor: str | None = None) -> SearchPage:
        """A customer's liked products, most recent like first."""
        _check_size(size)
        scope = f"likes:{customer_id}"
        before_like_id = decode_scope_cursor(cursor, scope) if cursor else None
        liked = self.gateway.find_liked_products(customer_id, before_like_id, size + 1)
        kept = liked[:size]
        next_cursor = encode_scope_cursor(kept[-1].like_id, scope) if len(liked) > size else None
        return self._documents_in_order([item.product_id for item in kept], next_cursor)

    def _documents_in_order(self, product_ids: list[int], next_cursor: str | None) -> SearchPage:
        # Ids missing from the index are dropped, so the page count can be below the size
        found = self.index.get_many(product_ids)
        documents = [found[pid] for pid in product_ids if pid in found]
        if len(documents) < len(product_ids):
            logger.info("Dropped ids missing from index", requested=len(product_ids), found=len(documents))
        return SearchPage(documents=documents, total_hits=len(documents), next_cursor=next_cursor)
