"""Tests for in-memory adapters used in development and tests."""

import pytest

from productsearch.buffer.memory_adapter import InMemoryWorkQueue
from productsearch.category.store import InMemoryCacheStore
from productsearch.errors import EventPublishError, SourceReadError, WorkQueueError
from productsearch.messaging.fake_adapter import FakeEventBus
from productsearch.source.fake_adapter import FakeSourceGateway
from productsearch.source.port import LikedProduct, ProductRecord, RankedProduct


class TestFakeSourceGateway:
    def setup_method(self):
        self.gateway = FakeSourceGateway()
        for pid in (3, 1, 2):
            self.gateway.add_product(ProductRecord(id=pid, code=f"C{pid}", seller_id=9, display=None))

    def test_records_calls(self):
        self.gateway.find_product(1)
        assert self.gateway.calls == [{"method": "find_product", "product_id": 1}]

    def test_id_scan_is_ordered_and_limited(self):
        assert self.gateway.find_product_ids_after(0, 2) == [1, 2]
        assert self.gateway.find_product_ids_after(2, 2) == [3]

    def test_seller_scan(self):
        assert self.gateway.find_product_ids_by_seller(9, 1, 10) == [2, 3]

    def test_failure_all_reads(self):
        self.gateway.configure(should_succeed=False, failure_reason="db down")
        with pytest.raises(SourceReadError, match="db down"):
            self.gateway.find_product(1)

    def test_failure_limited_to_methods(self):
        self.gateway.configure(failing_methods=["find_style_tags"])
        assert self.gateway.find_product(1) is not None
        with pytest.raises(SourceReadError):
            self.gateway.find_style_tags(9)

    def test_ranked_products_after_rank(self):
        self.gateway.rankings[1] = [RankedProduct(product_id=3, rank=2), RankedProduct(product_id=1, rank=1)]
        assert [r.product_id for r in self.gateway.find_ranked_products(1, None, 10)] == [1, 3]
        assert [r.product_id for r in self.gateway.find_ranked_products(1, 1, 10)] == [3]

    def test_liked_products_only_visible(self):
        self.gateway.likes[5] = [LikedProduct(like_id=10, product_id=1)]
        assert self.gateway.find_liked_products(5, None, 10) == []

    def test_reset(self):
        self.gateway.configure(should_succeed=False)
        self.gateway.reset()
        assert self.gateway.products == {}
        assert self.gateway.should_succeed is True


class TestFakeEventBus:
    def setup_method(self):
        self.bus = FakeEventBus()

    def test_publish_records_message(self):
        self.bus.publish("t", "1", {"id": 1})
        assert self.bus.ids("t") == [1]
        assert self.bus.messages("other") == []

    def test_failure(self):
        self.bus.configure(should_succeed=False, failure_reason="no leader")
        with pytest.raises(EventPublishError, match="no leader"):
            self.bus.publish("t", "1", {"id": 1})
        assert self.bus.published == []
        assert self.bus.attempts == 1

    def test_reset(self):
        self.bus.publish("t", "1", {"id": 1})
        self.bus.reset()
        assert self.bus.published == []
        assert self.bus.attempts == 0


class TestInMemoryWorkQueue:
    def test_fifo(self):
        queue = InMemoryWorkQueue()
        queue.append(["1", "2"])
        assert queue.pop() == "1"
        assert queue.pop() == "2"
        assert queue.pop() is None

    def test_failure(self):
        queue = InMemoryWorkQueue()
        queue.configure(should_succeed=False)
        with pytest.raises(WorkQueueError):
            queue.pop()


class TestInMemoryCacheStore:
    def test_get_set_delete(self):
        store = InMemoryCacheStore()
        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"
        store.delete("k")
        assert store.get("k") is None
