"""Search-index document shapes.

Field names are the index field names. Models are declared (not dicts) so that
serialization order is fixed and two assemblies of the same source state
produce identical JSON.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Document(BaseModel):
    model_config = ConfigDict(extra="forbid")


class AttachmentDocument(_Document):
    id: int
    mime_type: str | None = None
    file: str | None = None
    seq: int | None = None


class GuideImageDocument(_Document):
    id: int
    name: str | None = None
    image: AttachmentDocument | None = None


class BestOrderDocument(_Document):
    order_count: int = 0
    like_count: int = 0
    cart_count: int = 0
    view_count: int = 0
    review_average: float | None = None
    review_count: int = 0
    total_like_count: int = 0
    sales_amount: int = 0
    discounted_price: float = 0.0


class OptionDocument(_Document):
    id: int
    name: str | None = None
    value: str | None = None
    hexcode: str | None = None
    search_name: str | None = None
    model: bool | None = None
    name_seq: int | None = None
    value_seq: int | None = None


class VariantDocument(_Document):
    id: int
    code: str | None = None
    use_inventory: bool = False
    display_soldout: bool = False
    inventory_type: str | None = None
    quantity_check_type: str | None = None
    quantity: int = 0
    safety_quantity: int = 0
    barcode: str | None = None
    external_barcode: str | None = None
    deleted: datetime | None = None
    option_ids: list[int] = Field(default_factory=list)
    options: Any = None
    additional_price: float = 0.0
    price: float = 0.0
    display: datetime | None = None
    selling: datetime | None = None
    sold_out: bool = False
    express: bool = False
    available_stock_quantities: int = 0


class StockDocument(_Document):
    id: int
    product_variant_id: int
    quantity: int = 0
    warehouse_id: int | None = None
    warehouse_name: str | None = None
    retail_store_name: str | None = None
    is_quick_delivery: bool = False


class CategoryDocument(_Document):
    id: int
    parent_id: int | None = None
    name: str | None = None
    display_name: str | None = None
    slug: str | None = None
    is_visible: bool = True
    is_leaf: bool = False


class DisplayGroupDocument(_Document):
    id: int
    product_seq: int = 0


class SellerDocument(_Document):
    id: int
    partner_id: int | None = None
    name: str = ""
    code: str | None = None
    type: str = ""
    target_gender: str = ""
    slug: str | None = None
    segment: str | None = None
    brand_name: str = ""
    brand_name_jp: str | None = None
    status: str = ""
    is_official_brand: bool = False
    profile_image: AttachmentDocument | None = None
    instagram: str | None = None
    tiktok: str | None = None
    created: datetime | None = None
    updated: datetime | None = None
    open_at: datetime | None = None
    expired_date: datetime | None = None
    display: bool = False
    new_product_begin: datetime | None = None
    new_product_end: datetime | None = None
    influencer_name: str = ""
    influencer_name_jp: str = ""
    height: int | None = None
    weight: int | None = None
    body_frame_type: str | None = None
    top_size: str | None = None
    bottom_size: str | None = None
    shoe_size: str | None = None
    style_tags: list[str] = Field(default_factory=list)
    extra_tags: list[str] = Field(default_factory=list)
    keywords: str | None = None
    keyword_array: list[str] = Field(default_factory=list)


class ProductDocument(_Document):
    id: int
    code: str
    custom_code: str | None = None
    slug: str | None = None
    name: str | None = None
    english_name: str | None = None
    internal_name: str | None = None
    model_name: str | None = None
    description: str | None = None
    title: str | None = None
    label: list[str] = Field(default_factory=list)
    express: bool = False
    annotation: str | None = None
    brand_id: int | None = None
    trend_id: int | None = None
    image: AttachmentDocument | None = None
    images: list[str] = Field(default_factory=list)
    guide_image: GuideImageDocument | None = None
    # Opaque JSON from the source row
    info: Any = None
    size_info: str | None = None
    price: float
    material: str | None = None
    cloth_fabric: str | None = None
    weight: float | None = None
    season: str | None = None
    origin_id: int | None = None
    manufacturer_id: int | None = None
    option_type: str = ""
    member_only: bool = False
    quantity_limit_type: str = ""
    quantity_limit: int | None = None
    repurchasable: bool = False
    display: datetime | None = None
    selling: datetime | None = None
    is_selling: bool = False
    released: datetime | None = None
    deleted: datetime | None = None
    best_order: BestOrderDocument | None = None
    seller: SellerDocument
    options: list[OptionDocument] = Field(default_factory=list)
    variants: list[VariantDocument] = Field(default_factory=list)
    stock: list[StockDocument] = Field(default_factory=list)
    is_original: bool = False
    has_shoe_category: bool = False
    categories: list[CategoryDocument] = Field(default_factory=list)
    display_group: list[DisplayGroupDocument] = Field(default_factory=list)
    related_product_ids: list[int] = Field(default_factory=list)

    def to_index_body(self) -> dict:
        """JSON-compatible body for the search index."""
        return self.model_dump(mode="json")
