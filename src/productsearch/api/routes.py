"""FastAPI endpoints for product search and index operations."""

from typing import Annotated

from fastapi import APIRouter, Query

from productsearch.api.schemas import (
    BulkIndexResponse,
    CountResponse,
    DeleteResultResponse,
    IndexResultResponse,
    MigrateAllRequest,
    ProductIdsRequest,
    SearchPageResponse,
)
from productsearch.indexing import get_index_service
from productsearch.migration.service import get_migration_service
from productsearch.search import get_search_service
from productsearch.search.query_builder import (
    CategorySlugFilter,
    DisplayGroupFilter,
    KeywordFilter,
    SellerSlugFilter,
)
from productsearch.search.service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

search_router = APIRouter(tags=["search"])
operations_router = APIRouter(tags=["operations"])

PageSize = Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)]


# --- Search endpoints ---


@search_router.get("/products/search", response_model=SearchPageResponse)
def search_products(
    keyword: str = Query(..., min_length=1),
    size: PageSize = DEFAULT_PAGE_SIZE,
    cursor: str | None = None,
    ordering: str | None = None,
) -> SearchPageResponse:
    page = get_search_service().search(KeywordFilter(keyword), size=size, cursor=cursor, ordering=ordering)
    return SearchPageResponse(**page.as_response())


@search_router.get("/products/categories/{slug}", response_model=SearchPageResponse)
def products_by_category(
    slug: str, size: PageSize = DEFAULT_PAGE_SIZE, cursor: str | None = None, ordering: str | None = None
) -> SearchPageResponse:
    page = get_search_service().search(CategorySlugFilter(slug), size=size, cursor=cursor, ordering=ordering)
    return SearchPageResponse(**page.as_response())


@search_router.get("/products/sellers/{slug}", response_model=SearchPageResponse)
def products_by_seller(
    slug: str, size: PageSize = DEFAULT_PAGE_SIZE, cursor: str | None = None, ordering: str | None = None
) -> SearchPageResponse:
    page = get_search_service().search(SellerSlugFilter(slug), size=size, cursor=cursor, ordering=ordering)
    return SearchPageResponse(**page.as_response())


@search_router.get("/products/display-groups/{group_id}", response_model=SearchPageResponse)
def products_by_display_group(
    group_id: int, size: PageSize = DEFAULT_PAGE_SIZE, cursor: str | None = None, ordering: str | None = None
) -> SearchPageResponse:
    page = get_search_service().search(DisplayGroupFilter(group_id), size=size, cursor=cursor, ordering=ordering)
    return SearchPageResponse(**page.as_response())


@search_router.get("/products/rankings", response_model=SearchPageResponse)
def best_ranking(
    path: str = Query(..., min_length=1), size: PageSize = DEFAULT_PAGE_SIZE, cursor: str | None = None
) -> SearchPageResponse:
    page = get_search_service().best_ranking(path, size=size, cursor=cursor)
    return SearchPageResponse(**page.as_response())


@search_router.get("/customers/{customer_id}/likes", response_model=SearchPageResponse)
def liked_products(
    customer_id: int, size: PageSize = DEFAULT_PAGE_SIZE, cursor: str | None = None
) -> SearchPageResponse:
    page = get_search_service().liked_products(customer_id, size=size, cursor=cursor)
    return SearchPageResponse(**page.as_response())


# --- Index operations ---


@operations_router.post("/index/products/bulk", response_model=BulkIndexResponse)
def bulk_index_products(body: ProductIdsRequest) -> BulkIndexResponse:
    result = get_index_service().bulk_update_products(body.product_ids)
    return BulkIndexResponse(**result.as_dict())


@operations_router.post("/index/products/{product_id}", response_model=IndexResultResponse)
def index_product(product_id: int) -> IndexResultResponse:
    result = get_index_service().update_product(product_id)
    return IndexResultResponse(product_id=product_id, result=result)


@operations_router.delete("/index/products/{product_id}", response_model=DeleteResultResponse)
def delete_indexed_product(product_id: int) -> DeleteResultResponse:
    existed = get_index_service().delete_product(product_id)
    return DeleteResultResponse(product_id=product_id, existed=existed)


@operations_router.post("/migration/all", status_code=202, response_model=CountResponse)
def migrate_all(body: MigrateAllRequest | None = None) -> CountResponse:
    page_size = body.page_size if body else MigrateAllRequest().page_size
    return CountResponse(count=get_migration_service().migrate_all(page_size=page_size))


@operations_router.post("/migration/products", status_code=202, response_model=CountResponse)
def migrate_products(body: ProductIdsRequest) -> CountResponse:
    return CountResponse(count=get_migration_service().migrate_by_ids(body.product_ids))


@operations_router.post("/buffer/flush", response_model=CountResponse)
def flush_buffer(count: int = Query(500, ge=1, le=10000)) -> CountResponse:
    return CountResponse(count=get_migration_service().flush_event_buffer(count))
