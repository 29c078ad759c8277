"""Application tests for cursor-paged product search."""

from datetime import UTC, datetime, timedelta

import pytest

from productsearch.errors import InvalidCursorError, InvalidQueryError, RankingNotFoundError
from productsearch.search.cursor import encode_scope_cursor
from productsearch.search.query_builder import CategorySlugFilter, KeywordFilter, SellerSlugFilter
from productsearch.search.service import ProductSearchService
from productsearch.source.port import LikedProduct, RankedProduct

BASE = datetime(2024, 1, 1, tzinfo=UTC)


def _document(product_id, category="shoes", seller="kiln", released=None, **extra):
    document = {
        "id": product_id,
        "name": f"Product {product_id}",
        "code": f"P{product_id}",
        "price": 1000.0 + product_id,
        "display": BASE.isoformat(),
        "deleted": None,
        "released": (released or BASE + timedelta(days=product_id)).isoformat(),
        "seller": {"slug": seller, "name": "Studio Kiln"},
        "categories": [{"id": 1, "slug": category}],
    }
    document.update(extra)
    return document


@pytest.fixture()
def search_service(search_index, gateway):
    return ProductSearchService(search_index, gateway)


def _fill(search_index, count, **kwargs):
    for pid in range(1, count + 1):
        search_index.upsert(pid, _document(pid, **kwargs))


def _collect_pages(search_service, search_filter, size, ordering=None):
    pages = []
    cursor = None
    while True:
        page = search_service.search(search_filter, size=size, cursor=cursor, ordering=ordering)
        pages.append(page)
        cursor = page.next_cursor
        if cursor is None:
            return pages


class TestSearchPaging:
    def test_exactly_size_matches_has_no_next_cursor(self, search_service, search_index):
        _fill(search_index, 20)
        page = search_service.search(CategorySlugFilter("shoes"), size=20)
        assert len(page.documents) == 20
        assert page.total_hits == 20
        assert page.next_cursor is None

    def test_one_more_than_size_pages_to_the_last_document(self, search_service, search_index):
        _fill(search_index, 21)
        first = search_service.search(CategorySlugFilter("shoes"), size=20)
        assert len(first.documents) == 20
        assert first.next_cursor is not None

        second = search_service.search(CategorySlugFilter("shoes"), size=20, cursor=first.next_cursor)
        assert [document["id"] for document in second.documents] == [1]
        assert second.next_cursor is None

    def test_newest_first_by_default(self, search_service, search_index):
        _fill(search_index, 3)
        page = search_service.search(CategorySlugFilter("shoes"), size=10)
        assert [document["id"] for document in page.documents] == [3, 2, 1]

    def test_pages_never_repeat_or_skip_with_tied_sort_values(self, search_service, search_index):
        for pid in range(1, 24):
            search_index.upsert(pid, _document(pid, released=BASE))

        pages = _collect_pages(search_service, CategorySlugFilter("shoes"), size=5)
        ids = [document["id"] for page in pages for document in page.documents]
        assert ids == list(range(1, 24))
        assert len(pages) == 5

    def test_next_page_starts_right_after_previous(self, search_service, search_index):
        _fill(search_index, 12)
        full = search_service.search(CategorySlugFilter("shoes"), size=12, ordering="-price")
        first = search_service.search(CategorySlugFilter("shoes"), size=4, ordering="-price")
        second = search_service.search(CategorySlugFilter("shoes"), size=4, ordering="-price", cursor=first.next_cursor)
        assert second.documents[0]["id"] == full.documents[4]["id"]

    def test_filters_exclude_hidden_and_deleted(self, search_service, search_index):
        _fill(search_index, 3)
        search_index.upsert(4, _document(4, display=None))
        search_index.upsert(5, _document(5, deleted=BASE.isoformat()))
        search_index.upsert(6, _document(6, category="tops"))
        page = search_service.search(CategorySlugFilter("shoes"), size=10)
        assert sorted(document["id"] for document in page.documents) == [1, 2, 3]
        assert page.total_hits == 3

    def test_seller_and_keyword_filters(self, search_service, search_index):
        search_index.upsert(1, _document(1, seller="kiln", name="Linen Shirt"))
        search_index.upsert(2, _document(2, seller="other", name="Wool Coat"))
        assert [d["id"] for d in search_service.search(SellerSlugFilter("other")).documents] == [2]
        assert [d["id"] for d in search_service.search(KeywordFilter("linen")).documents] == [1]

    def test_cursor_from_another_ordering_is_rejected(self, search_service, search_index):
        _fill(search_index, 5)
        page = search_service.search(CategorySlugFilter("shoes"), size=2, ordering="price")
        with pytest.raises(InvalidCursorError):
            search_service.search(CategorySlugFilter("shoes"), size=2, ordering="-price", cursor=page.next_cursor)

    def test_cursor_from_another_query_kind_is_rejected(self, search_service, search_index):
        _fill(search_index, 5)
        page = search_service.search(CategorySlugFilter("shoes"), size=2)
        with pytest.raises(InvalidCursorError):
            search_service.search(SellerSlugFilter("kiln"), size=2, cursor=page.next_cursor)

    def test_garbage_cursor_is_rejected(self, search_service):
        with pytest.raises(InvalidCursorError):
            search_service.search(CategorySlugFilter("shoes"), cursor="garbage")

    @pytest.mark.parametrize("size", [0, 101])
    def test_size_is_bounded(self, search_service, size):
        with pytest.raises(InvalidQueryError):
            search_service.search(CategorySlugFilter("shoes"), size=size)

    def test_requests_one_extra_hit(self, search_service, search_index):
        search_service.search(CategorySlugFilter("shoes"), size=20)
        assert search_index.requests[-1].size == 21

    def test_response_shape(self, search_service, search_index):
        _fill(search_index, 1)
        response = search_service.search(CategorySlugFilter("shoes")).as_response()
        assert set(response) == {"count", "results", "next"}


class TestBestRanking:
    @pytest.fixture()
    def ranked(self, gateway, search_index):
        gateway.ranking_specifications["best/weekly"] = 1
        gateway.rankings[1] = [RankedProduct(product_id=pid, rank=rank) for rank, pid in enumerate([5, 3, 9, 1, 7], 1)]
        for pid in (5, 3, 1, 7):
            search_index.upsert(pid, _document(pid))

    def test_pages_in_rank_order(self, search_service, ranked):
        first = search_service.best_ranking("best/weekly", size=2)
        assert [document["id"] for document in first.documents] == [5, 3]

        second = search_service.best_ranking("best/weekly", size=2, cursor=first.next_cursor)
        assert [document["id"] for document in second.documents] == [1]
        assert second.next_cursor is not None

        third = search_service.best_ranking("best/weekly", size=2, cursor=second.next_cursor)
        assert [document["id"] for document in third.documents] == [7]
        assert third.next_cursor is None

    def test_count_is_page_length(self, search_service, ranked):
        first = search_service.best_ranking("best/weekly", size=2)
        assert first.total_hits == 2
        assert first.as_response()["count"] == 2

        # 9 is ranked but not indexed
        second = search_service.best_ranking("best/weekly", size=2, cursor=first.next_cursor)
        assert second.total_hits == 1

    def test_unknown_path(self, search_service):
        with pytest.raises(RankingNotFoundError):
            search_service.best_ranking("nope")

    def test_cursor_scoped_to_path(self, search_service, ranked, gateway):
        gateway.ranking_specifications["best/daily"] = 2
        first = search_service.best_ranking("best/weekly", size=2)
        with pytest.raises(InvalidCursorError):
            search_service.best_ranking("best/daily", size=2, cursor=first.next_cursor)


class TestLikedProducts:
    def test_newest_like_first(self, search_service, search_index, gateway, seed):
        for pid in (1, 2, 3):
            seed.product(pid)
            search_index.upsert(pid, _document(pid))
        gateway.likes[77] = [
            LikedProduct(like_id=10, product_id=1),
            LikedProduct(like_id=30, product_id=3),
            LikedProduct(like_id=20, product_id=2),
        ]

        first = search_service.liked_products(77, size=2)
        assert [document["id"] for document in first.documents] == [3, 2]

        second = search_service.liked_products(77, size=2, cursor=first.next_cursor)
        assert [document["id"] for document in second.documents] == [1]
        assert second.next_cursor is None
        assert (first.total_hits, second.total_hits) == (2, 1)

    def test_cursor_scoped_to_customer(self, search_service):
        with pytest.raises(InvalidCursorError):
            search_service.liked_products(1, cursor=encode_scope_cursor(10, "likes:2"))
