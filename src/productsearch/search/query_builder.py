"""Translate search filters and orderings into index requests."""

import re
from dataclasses import dataclass

from productsearch.errors import InvalidQueryError
from productsearch.indexing.port import SearchRequest

RELEASED_DESC = "-released"
SCORE_DESC = "-score"

KEYWORD_FIELDS = ["name^3", "english_name^2", "code^2", "seller.name", "seller.brand_name"]
TEXT_SORT_FIELDS = {"name", "seller.name"}

_FIELD_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*(\.[a-z_][a-z0-9_]*)*$")

COMMON_FILTERS = [{"exists": {"field": "display"}}]
COMMON_EXCLUSIONS = [{"exists": {"field": "deleted"}}]
TIE_BREAKER = {"id": {"order": "asc"}}


class SearchFilter:
    """One way of selecting products. Subclasses contribute query clauses."""

    default_ordering: str = RELEASED_DESC

    def filters(self) -> list[dict]:
        return []

    def must(self) -> list[dict]:
        return []


@dataclass(frozen=True)
class KeywordFilter(SearchFilter):
    keyword: str
    default_ordering = SCORE_DESC

    def must(self) -> list[dict]:
        return [{"multi_match": {"query": self.keyword, "fields": KEYWORD_FIELDS}}]


@dataclass(frozen=True)
class CategorySlugFilter(SearchFilter):
    slug: str

    def filters(self) -> list[dict]:
        return [{"nested": {"path": "categories", "query": {"term": {"categories.slug": self.slug}}}}]


@dataclass(frozen=True)
class CategoryIdFilter(SearchFilter):
    category_id: int

    def filters(self) -> list[dict]:
        return [{"nested": {"path": "categories", "query": {"term": {"categories.id": self.category_id}}}}]


@dataclass(frozen=True)
class SellerSlugFilter(SearchFilter):
    slug: str

    def filters(self) -> list[dict]:
        return [{"term": {"seller.slug": self.slug}}]


@dataclass(frozen=True)
class ProductIdsFilter(SearchFilter):
    product_ids: tuple[int, ...]

    def filters(self) -> list[dict]:
        return [{"ids": {"values": [str(pid) for pid in self.product_ids]}}]


@dataclass(frozen=True)
class DisplayGroupFilter(SearchFilter):
    group_id: int

    def filters(self) -> list[dict]:
        return [{"term": {"display_group.id": self.group_id}}]


def parse_ordering(ordering: str | None, default: str = RELEASED_DESC) -> list[dict]:
    """Turn ``"-price,name"`` into a sort list ending with the id tie-breaker.

    ``score`` sorts by relevance. Text fields sort on their keyword subfield.
    """
    sort = []
    seen = set()
    for term in (ordering or default).split(","):
        term = term.strip()
        if not term:
            continue
        order = "desc" if term.startswith("-") else "asc"
        field = term.lstrip("-+")
        if not _FIELD_PATTERN.match(field):
            raise InvalidQueryError(f"Unsupported ordering field: {field!r}")
        if field in seen:
            continue
        seen.add(field)

        if field in ("score", "_score"):
            sort.append({"_score": {"order": order}})
        elif field == "id":
            sort.append({"id": {"order": order}})
        else:
            name = f"{field}.keyword" if field in TEXT_SORT_FIELDS else field
            sort.append({name: {"order": order, "unmapped_type": "long"}})

    if "id" not in seen:
        sort.append(TIE_BREAKER)
    return sort


def build_request(
    search_filter: SearchFilter,
    size: int,
    ordering: str | None = None,
    search_after: list | None = None,
) -> SearchRequest:
    query = {
        "bool": {
            "filter": [*COMMON_FILTERS, *search_filter.filters()],
            "must": search_filter.must(),
            "must_not": list(COMMON_EXCLUSIONS),
        }
    }
    sort = parse_ordering(ordering, search_filter.default_ordering)
    return SearchRequest(query=query, sort=sort, size=size, search_after=search_after)
