"""Source-record gateway port: read-only access to the relational store.

The assembly stages, CDC handlers and pagination services program against
this interface. Every method is a read; none of them write.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ProductRecord:
    id: int
    code: str | None = None
    custom_code: str | None = None
    slug: str | None = None
    name: str | None = None
    english_name: str | None = None
    internal_name: str | None = None
    model_name: str | None = None
    description: str | None = None
    title: str | None = None
    annotation: str | None = None
    brand_id: int | None = None
    trend_id: int | None = None
    info: str | None = None
    size_info: str | None = None
    price: float | None = None
    material: str | None = None
    cloth_fabric: str | None = None
    weight: float | None = None
    season: str | None = None
    origin_id: int | None = None
    manufacturer_id: int | None = None
    option_type: str | None = None
    quantity_limit: int | None = None
    quantity_limit_type: str | None = None
    member_only: bool | None = None
    repurchasable: bool | None = None
    display: datetime | None = None
    selling: datetime | None = None
    released: datetime | None = None
    deleted: datetime | None = None
    seller_id: int | None = None
    image_id: int | None = None
    guide_image_id: int | None = None


@dataclass(frozen=True)
class SellerRecord:
    id: int
    partner_id: int | None = None
    name: str | None = None
    code: str | None = None
    type: str | None = None
    target_gender: str | None = None
    slug: str | None = None
    segment: str | None = None
    brand_name: str | None = None
    brand_name_jp: str | None = None
    status: str | None = None
    is_official_brand: bool | None = None
    profile_image_id: int | None = None
    instagram: str | None = None
    tiktok: str | None = None
    created: datetime | None = None
    updated: datetime | None = None
    open_at: datetime | None = None
    expired_date: datetime | None = None
    display: bool | None = None
    new_product_begin: datetime | None = None
    new_product_end: datetime | None = None
    influencer_name: str | None = None
    influencer_name_jp: str | None = None
    height: int | None = None
    weight: int | None = None
    body_frame_type: str | None = None
    top_size: str | None = None
    bottom_size: str | None = None
    shoe_size: str | None = None
    keywords: str | None = None


@dataclass(frozen=True)
class AttachmentRecord:
    id: int
    mimetype: str | None = None
    file: str | None = None
    seq: int | None = None


@dataclass(frozen=True)
class VariantRecord:
    id: int
    product_id: int
    code: str | None = None
    barcode: str | None = None
    external_barcode: str | None = None
    display: datetime | None = None
    selling: datetime | None = None
    deleted: datetime | None = None
    options: str | None = None
    additional_price: float | None = None
    use_inventory: bool | None = None
    display_soldout: bool | None = None
    inventory_type: str | None = None
    quantity_check_type: str | None = None
    quantity: int | None = None
    safety_quantity: int | None = None


@dataclass(frozen=True)
class CategoryRecord:
    id: int
    parent_id: int | None = None
    name: str | None = None
    display_name: str | None = None
    slug: str | None = None
    is_visible: bool = True


@dataclass(frozen=True)
class DisplayGroupMembership:
    group_id: int
    group_seq: int = 0
    product_seq: int = 0


@dataclass(frozen=True)
class GuideImageRecord:
    id: int
    name: str | None = None
    image: AttachmentRecord | None = None


@dataclass(frozen=True)
class BestOrderRecord:
    product_id: int
    order_count: int | None = None
    like_count: int | None = None
    cart_count: int | None = None
    view_count: int | None = None
    review_average: float | None = None
    review_count: int | None = None
    total_like_count: int | None = None
    sales_amount: int | None = None
    discounted_price: float | None = None


@dataclass(frozen=True)
class OptionRecord:
    id: int
    product_id: int
    name: str | None = None
    value: str | None = None
    hexcode: str | None = None
    search_name: str | None = None
    model: bool | None = None
    name_seq: int | None = None
    value_seq: int | None = None


@dataclass(frozen=True)
class StockRecord:
    id: int
    product_variant_id: int
    quantity: int = 0
    warehouse_id: int | None = None
    warehouse_name: str | None = None
    retail_store_name: str | None = None
    quick: bool = False


@dataclass(frozen=True)
class RankedProduct:
    product_id: int
    rank: int


@dataclass(frozen=True)
class LikedProduct:
    like_id: int
    product_id: int


class SourceGateway(ABC):
    """Abstract interface for relational source reads."""

    # Point lookups

    @abstractmethod
    def find_product(self, product_id: int) -> ProductRecord | None: ...

    @abstractmethod
    def find_seller(self, seller_id: int) -> SellerRecord | None: ...

    @abstractmethod
    def find_guide_image(self, guide_image_id: int) -> GuideImageRecord | None: ...

    @abstractmethod
    def find_best_order(self, product_id: int) -> BestOrderRecord | None: ...

    @abstractmethod
    def find_product_id_by_guide_image(self, guide_image_id: int) -> int | None:
        """Return the product that owns a guide image, if any."""
        ...

    @abstractmethod
    def find_product_id_by_variant(self, variant_id: int) -> int | None:
        """Return the product a variant belongs to, if the variant exists."""
        ...

    # List lookups

    @abstractmethod
    def find_attachments(self, attachment_ids: list[int]) -> list[AttachmentRecord]:
        """Return attachments for the given ids, ordered by seq."""
        ...

    @abstractmethod
    def find_product_images(self, product_id: int) -> list[AttachmentRecord]:
        """Return the product's gallery attachments, ordered by seq."""
        ...

    @abstractmethod
    def find_style_tags(self, seller_id: int) -> list[str]: ...

    @abstractmethod
    def find_variants(self, product_id: int) -> list[VariantRecord]: ...

    @abstractmethod
    def find_variant_option_ids(self, variant_ids: list[int]) -> dict[int, list[int]]:
        """Return option ids keyed by variant id. Variants without options are omitted."""
        ...

    @abstractmethod
    def find_category_ids(self, product_id: int) -> list[int]: ...

    @abstractmethod
    def find_all_categories(self) -> list[CategoryRecord]: ...

    @abstractmethod
    def find_display_groups(self, product_id: int) -> list[DisplayGroupMembership]: ...

    @abstractmethod
    def find_icon_names(self, product_id: int) -> list[str | None]: ...

    @abstractmethod
    def find_related_product_ids(self, product_id: int) -> list[int]: ...

    @abstractmethod
    def find_options(self, product_id: int) -> list[OptionRecord]: ...

    @abstractmethod
    def find_stocks(self, variant_ids: list[int]) -> list[StockRecord]: ...

    # Cursor-paged id scans: ids strictly greater than after_id, ascending, at most limit

    @abstractmethod
    def find_product_ids_after(self, after_id: int, limit: int) -> list[int]: ...

    @abstractmethod
    def find_product_ids_by_category(self, category_id: int, after_id: int, limit: int) -> list[int]: ...

    @abstractmethod
    def find_product_ids_by_seller(self, seller_id: int, after_id: int, limit: int) -> list[int]: ...

    # Ranking and likes

    @abstractmethod
    def find_ranking_specification_id(self, path: str) -> int | None: ...

    @abstractmethod
    def find_ranked_products(self, specification_id: int, after_rank: int | None, limit: int) -> list[RankedProduct]:
        """Return ranked products with rank > after_rank, rank ascending."""
        ...

    @abstractmethod
    def find_liked_products(self, customer_id: int, before_like_id: int | None, limit: int) -> list[LikedProduct]:
        """Return a customer's liked products, newest like first.

        Only displayed, non-deleted products are returned.
        """
        ...
