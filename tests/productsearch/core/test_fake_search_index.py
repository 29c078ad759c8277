"""Tests for the in-memory search index."""

import pytest

from productsearch.errors import IndexWriteError
from productsearch.indexing.fake_adapter import InMemorySearchIndex, matches
from productsearch.indexing.port import SearchRequest

DOC = {
    "id": 1,
    "name": "Linen Shirt",
    "display": "2024-03-01T10:00:00Z",
    "deleted": None,
    "seller": {"slug": "kiln", "name": "Studio Kiln"},
    "categories": [{"id": 2, "slug": "tops"}, {"id": 1, "slug": "women"}],
}


class TestMatches:
    @pytest.mark.parametrize(
        "query, expected",
        [
            ({"match_all": {}}, True),
            ({"term": {"seller.slug": "kiln"}}, True),
            ({"term": {"seller.slug": {"value": "other"}}}, False),
            ({"terms": {"categories.id": [5, 1]}}, True),
            ({"exists": {"field": "display"}}, True),
            ({"exists": {"field": "deleted"}}, False),
            ({"ids": {"values": ["1"]}}, True),
            ({"nested": {"path": "categories", "query": {"term": {"categories.slug": "tops"}}}}, True),
            ({"match": {"name": "linen"}}, True),
            ({"multi_match": {"query": "kiln", "fields": ["name^3", "seller.name"]}}, True),
            ({"multi_match": {"query": "wool", "fields": ["name^3", "seller.name"]}}, False),
        ],
    )
    def test_clauses(self, query, expected):
        assert matches(DOC, query) is expected

    def test_bool(self):
        query = {
            "bool": {
                "filter": [{"exists": {"field": "display"}}],
                "must": [],
                "must_not": [{"exists": {"field": "deleted"}}],
                "should": [{"term": {"seller.slug": "x"}}, {"term": {"seller.slug": "kiln"}}],
            }
        }
        assert matches(DOC, query) is True

    def test_unsupported_clause(self):
        with pytest.raises(ValueError):
            matches(DOC, {"geo_distance": {}})


class TestInMemorySearchIndex:
    def setup_method(self):
        self.index = InMemorySearchIndex()
        for pid, price in [(1, 300.0), (2, 100.0), (3, 200.0), (4, None)]:
            self.index.upsert(pid, {"id": pid, "price": price})

    def _search(self, sort, size=10, search_after=None):
        request = SearchRequest(query={"match_all": {}}, sort=sort, size=size, search_after=search_after)
        return self.index.search(request)

    def test_sorts_with_missing_values_last(self):
        hits = self._search([{"price": {"order": "desc"}}, {"id": {"order": "asc"}}]).hits
        assert [hit.id for hit in hits] == [1, 3, 2, 4]
        hits = self._search([{"price": {"order": "asc"}}, {"id": {"order": "asc"}}]).hits
        assert [hit.id for hit in hits] == [2, 3, 1, 4]

    def test_search_after_continues_from_sort_values(self):
        sort = [{"price": {"order": "asc"}}, {"id": {"order": "asc"}}]
        first = self._search(sort, size=2)
        rest = self._search(sort, size=10, search_after=first.hits[-1].sort)
        assert [hit.id for hit in first.hits] == [2, 3]
        assert [hit.id for hit in rest.hits] == [1, 4]
        assert first.total == 4

    def test_upsert_replaces_and_delete_reports_existence(self):
        self.index.upsert(1, {"id": 1, "price": 5.0})
        assert self.index.documents[1]["price"] == 5.0
        assert self.index.delete(1) is True
        assert self.index.delete(1) is False

    def test_get_many_skips_unknown(self):
        assert set(self.index.get_many([1, 99, 2])) == {1, 2}

    def test_configured_failure(self):
        self.index.configure(should_succeed=False, failure_reason="cluster red")
        with pytest.raises(IndexWriteError, match="cluster red"):
            self.index.upsert(9, {"id": 9})
        with pytest.raises(IndexWriteError):
            self.index.delete(1)

    def test_reset(self):
        self.index.configure(should_succeed=False)
        self.index.reset()
        assert self.index.documents == {}
        assert self.index.should_succeed is True
