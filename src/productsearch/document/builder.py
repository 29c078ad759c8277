"""Mutable document builder threaded through one assembly run."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from productsearch.document.models import (
    AttachmentDocument,
    BestOrderDocument,
    CategoryDocument,
    DisplayGroupDocument,
    GuideImageDocument,
    OptionDocument,
    ProductDocument,
    SellerDocument,
    StockDocument,
    VariantDocument,
)
from productsearch.errors import IncompleteDocumentError


@dataclass
class ProductDocumentBuilder:
    """In-progress ProductDocument.

    Owned by exactly one assembly run. Each stage writes its own fields; the
    only field written by two stages is ``variants`` (Variants creates the
    entries, Stock updates them afterwards).
    """

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
    info: Any = None
    size_info: str | None = None
    price: float | None = None
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

    # Source references used by later stages
    seller_id: int | None = None
    image_id: int | None = None
    guide_image_id: int | None = None

    seller: SellerDocument | None = None
    variants: list[VariantDocument] = field(default_factory=list)
    categories: list[CategoryDocument] = field(default_factory=list)
    is_original: bool = False
    has_shoe_category: bool = False
    display_group: list[DisplayGroupDocument] = field(default_factory=list)
    image: AttachmentDocument | None = None
    images: list[str] = field(default_factory=list)
    label: list[str] = field(default_factory=list)
    guide_image: GuideImageDocument | None = None
    best_order: BestOrderDocument | None = None
    related_product_ids: list[int] = field(default_factory=list)
    options: list[OptionDocument] = field(default_factory=list)
    stock: list[StockDocument] = field(default_factory=list)
    express: bool = False

    def build(self) -> ProductDocument:
        missing = [name for name in ("code", "seller", "price") if getattr(self, name) is None]
        if missing:
            raise IncompleteDocumentError(
                f"Cannot build product {self.id}: missing {', '.join(missing)}",
                product_id=self.id,
            )

        return ProductDocument(
            id=self.id,
            code=self.code,
            custom_code=self.custom_code,
            slug=self.slug,
            name=self.name,
            english_name=self.english_name,
            internal_name=self.internal_name,
            model_name=self.model_name,
            description=self.description,
            title=self.title,
            label=list(self.label),
            express=self.express,
            annotation=self.annotation,
            brand_id=self.brand_id,
            trend_id=self.trend_id,
            image=self.image,
            images=list(self.images),
            guide_image=self.guide_image,
            info=self.info,
            size_info=self.size_info,
            price=self.price,
            material=self.material,
            cloth_fabric=self.cloth_fabric,
            weight=self.weight,
            season=self.season,
            origin_id=self.origin_id,
            manufacturer_id=self.manufacturer_id,
            option_type=self.option_type,
            member_only=self.member_only,
            quantity_limit_type=self.quantity_limit_type,
            quantity_limit=self.quantity_limit,
            repurchasable=self.repurchasable,
            display=self.display,
            selling=self.selling,
            is_selling=self.is_selling,
            released=self.released,
            deleted=self.deleted,
            best_order=self.best_order,
            seller=self.seller,
            options=list(self.options),
            variants=list(self.variants),
            stock=list(self.stock),
            is_original=self.is_original,
            has_shoe_category=self.has_shoe_category,
            categories=list(self.categories),
            display_group=list(self.display_group),
            related_product_ids=list(self.related_product_ids),
        )


@dataclass
class IndexContext:
    """Per-run wrapper passed by reference through the chain."""

    builder: ProductDocumentBuilder
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def product_id(self) -> int:
        return self.builder.id
