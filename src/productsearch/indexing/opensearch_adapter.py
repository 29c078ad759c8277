"""OpenSearch-backed product index."""

import structlog
from opensearchpy import OpenSearch
from opensearchpy.exceptions import OpenSearchException

from productsearch.errors import IndexWriteError
from productsearch.indexing.port import SearchHit, SearchHits, SearchIndex, SearchRequest

logger = structlog.get_logger(__name__)

_KEYWORD_TEXT = {"type": "text", "fields": {"keyword": {"type": "keyword", "ignore_above": 256}}}

PRODUCT_INDEX_BODY = {
    "settings": {"number_of_shards": 1, "number_of_replicas": 1},
    "mappings": {
        "properties": {
            "id": {"type": "long"},
            "code": {"type": "keyword"},
            "name": _KEYWORD_TEXT,
            "description": {"type": "text"},
            "price": {"type": "double"},
            "released": {"type": "date"},
            "display": {"type": "date"},
            "deleted": {"type": "date"},
            "english_name": _KEYWORD_TEXT,
            "is_selling": {"type": "boolean"},
            "express": {"type": "boolean"},
            "seller": {
                "properties": {
                    "id": {"type": "long"},
                    "name": _KEYWORD_TEXT,
                    "brand_name": _KEYWORD_TEXT,
                    "slug": {"type": "keyword"},
                    "type": {"type": "keyword"},
                }
            },
            "categories": {
                "type": "nested",
                "properties": {
                    "id": {"type": "long"},
                    "name": _KEYWORD_TEXT,
                    "slug": {"type": "keyword"},
                },
            },
            "display_group": {"properties": {"id": {"type": "long"}, "product_seq": {"type": "integer"}}},
            "info": {"type": "object", "enabled": False},
        }
    },
}


def _check_shards(product_id: int, response: dict) -> None:
    if response.get("_shards", {}).get("failed", 0):
        raise IndexWriteError(f"Write for product {product_id} failed on a shard", product_id=product_id)


class OpenSearchIndex(SearchIndex):
    def __init__(self, url: str | None = None, index_name: str = "zelda-products", client: OpenSearch | None = None):
        self.client = client or OpenSearch(hosts=[url])
        self.index_name = index_name

    def ensure_index(self, body: dict | None = None) -> bool:
        """Create the index if it does not exist yet. Returns True when created."""
        if self.client.indices.exists(index=self.index_name):
            return False
        self.client.indices.create(index=self.index_name, body=body or PRODUCT_INDEX_BODY)
        logger.info("Search index created", index=self.index_name)
        return True

    def upsert(self, product_id: int, document: dict) -> None:
        try:
            response = self.client.index(index=self.index_name, id=str(product_id), body=document)
        except OpenSearchException as exc:
            raise IndexWriteError(f"Upsert {product_id}: {exc}", product_id=product_id) from exc
        _check_shards(product_id, response)

    def delete(self, product_id: int) -> bool:
        try:
            response = self.client.delete(index=self.index_name, id=str(product_id), ignore=[404])
        except OpenSearchException as exc:
            raise IndexWriteError(f"Delete {product_id}: {exc}", product_id=product_id) from exc
        return response.get("result") == "deleted"

    def search(self, request: SearchRequest) -> SearchHits:
        response = self.client.search(index=self.index_name, body=request.to_body())
        hits = [
            SearchHit(id=int(hit["_id"]), source=hit["_source"], sort=hit.get("sort", []))
            for hit in response["hits"]["hits"]
        ]
        total = response["hits"]["total"]
        return SearchHits(hits=hits, total=total["value"] if isinstance(total, dict) else int(total))

    def get_many(self, product_ids: list[int]) -> dict[int, dict]:
        if not product_ids:
            return {}
        response = self.client.mget(index=self.index_name, body={"ids": [str(pid) for pid in product_ids]})
        return {int(doc["_id"]): doc["_source"] for doc in response["docs"] if doc.get("found")}
