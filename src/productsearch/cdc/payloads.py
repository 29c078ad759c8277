"""Row shapes per source table.

Only the columns the handlers route on are declared; everything else in
the row image is ignored. Foreign keys are optional because delete events
may carry only the primary key, depending on the table's replica identity.
"""

from pydantic import BaseModel, ConfigDict, Field


class _Row(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ProductPayload(_Row):
    id: int


class ProductGuideImagePayload(_Row):
    id: int


class CategoryPayload(_Row):
    id: int


class SellerPayload(_Row):
    id: int | None = None


class ProductReferencePayload(_Row):
    """Rows that carry a ``product_id`` column."""

    id: int | None = None
    product_id: int | None = None


class ProductIconSetPayload(ProductReferencePayload):
    icon_id: int | None = None


class ProductImageSetPayload(ProductReferencePayload):
    attachment_id: int | None = None


class ProductVariantPayload(ProductReferencePayload):
    pass


class OptionPayload(ProductReferencePayload):
    pass


class ProductCategorySetPayload(ProductReferencePayload):
    category_id: int | None = None


class DisplayGroupProductPayload(ProductReferencePayload):
    group_id: int | None = None


class ProductBenefitSetPayload(ProductReferencePayload):
    benefit_id: int | None = None


class ProductBestOrderPayload(_Row):
    product_id: int | None = None


class ProductRelatedProductsPayload(_Row):
    id: int | None = None
    from_product_id: int | None = None
    to_product_id: int | None = None


class ProductVariantOptionSetPayload(_Row):
    id: int | None = None
    variant_id: int | None = Field(default=None, alias="productvariant_id")
    option_id: int | None = None


class StockPayload(_Row):
    id: int | None = None
    variant_id: int | None = Field(default=None, alias="product_variant_id")
    quantity: int | None = None


class SellerStatPayload(_Row):
    id: int | None = None
    seller_id: int | None = None


class LikePayload(_Row):
    id: int
    target: str | None = None
    product_id: int | None = None
    seller_id: int | None = None
