"""Pydantic request/response schemas for the search and operations API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Search Response Schemas ---


class SearchPageResponse(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "count": 42,
                    "results": [{"id": 1001, "code": "P001ABCD", "name": "Linen Shirt", "price": 39000.0}],
                    "next": "eyJ2IjpbMTAwMV0sInMiOiJhYmMifQ",
                }
            ]
        }
    }

    count: int = Field(
        ...,
        description="Total matches for searches; for rankings and likes, the number of results on this page",
    )
    results: list[dict]
    next: str | None = None


# --- Operations Request Schemas ---


class ProductIdsRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_ids": [1001, 1002, 1003]}]}}

    product_ids: list[int] = Field(..., min_length=1, max_length=10000)


class MigrateAllRequest(BaseModel):
    page_size: int = Field(1000, ge=1, le=10000)


# --- Operations Response Schemas ---


class IndexResultResponse(BaseModel):
    product_id: int
    result: str


class DeleteResultResponse(BaseModel):
    product_id: int
    existed: bool


class BulkIndexResponse(BaseModel):
    upserted: int
    deleted: int
    failed: int
    failed_ids: list[int] = Field(default_factory=list)


class CountResponse(BaseModel):
    count: int
