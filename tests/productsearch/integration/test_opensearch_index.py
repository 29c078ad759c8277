"""Integration tests for the OpenSearch index adapter against a mocked client."""

from unittest.mock import MagicMock

import pytest
from opensearchpy.exceptions import ConnectionError as OpenSearchConnectionError

from productsearch.errors import IndexWriteError
from productsearch.indexing.opensearch_adapter import PRODUCT_INDEX_BODY, OpenSearchIndex
from productsearch.indexing.port import SearchRequest


@pytest.fixture()
def client():
    client = MagicMock()
    client.index.return_value = {"result": "created", "_shards": {"total": 2, "successful": 2, "failed": 0}}
    return client


@pytest.fixture()
def index(client):
    return OpenSearchIndex(client=client, index_name="products-test")


class TestWrites:
    def test_upsert_uses_product_id_as_document_id(self, index, client):
        index.upsert(42, {"id": 42, "name": "Linen Shirt"})
        client.index.assert_called_once_with(index="products-test", id="42", body={"id": 42, "name": "Linen Shirt"})

    def test_upsert_transport_error(self, index, client):
        client.index.side_effect = OpenSearchConnectionError("N/A", "connection refused", Exception())
        with pytest.raises(IndexWriteError) as exc_info:
            index.upsert(42, {"id": 42})
        assert exc_info.value.product_id == 42

    def test_upsert_shard_failure(self, index, client):
        client.index.return_value = {"result": "updated", "_shards": {"total": 2, "successful": 1, "failed": 1}}
        with pytest.raises(IndexWriteError, match="shard"):
            index.upsert(42, {"id": 42})

    def test_delete_existing(self, index, client):
        client.delete.return_value = {"result": "deleted"}
        assert index.delete(42) is True
        client.delete.assert_called_once_with(index="products-test", id="42", ignore=[404])

    def test_delete_missing(self, index, client):
        client.delete.return_value = {"result": "not_found"}
        assert index.delete(42) is False

    def test_delete_transport_error(self, index, client):
        client.delete.side_effect = OpenSearchConnectionError("N/A", "connection refused", Exception())
        with pytest.raises(IndexWriteError):
            index.delete(42)


class TestReads:
    def test_search_parses_hits_and_total(self, index, client):
        client.search.return_value = {
            "hits": {
                "total": {"value": 7, "relation": "eq"},
                "hits": [
                    {"_id": "3", "_source": {"id": 3}, "sort": ["2024-03-01T00:00:00Z", 3]},
                    {"_id": "1", "_source": {"id": 1}, "sort": ["2024-02-01T00:00:00Z", 1]},
                ],
            }
        }
        request = SearchRequest(query={"match_all": {}}, sort=[{"id": {"order": "asc"}}], size=2)

        result = index.search(request)

        assert result.total == 7
        assert [hit.id for hit in result.hits] == [3, 1]
        assert result.hits[0].sort == ["2024-03-01T00:00:00Z", 3]
        client.search.assert_called_once_with(index="products-test", body=request.to_body())

    def test_search_legacy_integer_total(self, index, client):
        client.search.return_value = {"hits": {"total": 0, "hits": []}}
        result = index.search(SearchRequest(query={"match_all": {}}, sort=[], size=1))
        assert result.total == 0
        assert result.hits == []

    def test_get_many_skips_missing(self, index, client):
        client.mget.return_value = {
            "docs": [
                {"_id": "1", "found": True, "_source": {"id": 1}},
                {"_id": "2", "found": False},
            ]
        }
        assert index.get_many([1, 2]) == {1: {"id": 1}}
        client.mget.assert_called_once_with(index="products-test", body={"ids": ["1", "2"]})

    def test_get_many_without_ids(self, index, client):
        assert index.get_many([]) == {}
        client.mget.assert_not_called()


class TestEnsureIndex:
    def test_creates_missing_index_with_product_mapping(self, index, client):
        client.indices.exists.return_value = False
        assert index.ensure_index() is True
        client.indices.create.assert_called_once_with(index="products-test", body=PRODUCT_INDEX_BODY)

    def test_existing_index_is_left_alone(self, index, client):
        client.indices.exists.return_value = True
        assert index.ensure_index() is False
        client.indices.create.assert_not_called()

    def test_categories_are_nested(self):
        properties = PRODUCT_INDEX_BODY["mappings"]["properties"]
        assert properties["categories"]["type"] == "nested"
