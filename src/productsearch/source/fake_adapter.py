"""In-memory source gateway for development and testing.

Seed it with ``add_*`` helpers. ``configure()`` makes reads fail or stall so
tests can drive the error and timeout paths of the assembly pipeline.
"""

import time

from productsearch.errors import SourceReadError
from productsearch.source.port import (
    AttachmentRecord,
    BestOrderRecord,
    CategoryRecord,
    DisplayGroupMembership,
    GuideImageRecord,
    LikedProduct,
    OptionRecord,
    ProductRecord,
    RankedProduct,
    SellerRecord,
    SourceGateway,
    StockRecord,
    VariantRecord,
)


class FakeSourceGateway(SourceGateway):
    """Dictionary-backed gateway."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Source unavailable"
        self.failing_methods: set[str] = set()
        self.delays: dict[str, float] = {}
        self.calls: list[dict] = []

        self.products: dict[int, ProductRecord] = {}
        self.sellers: dict[int, SellerRecord] = {}
        self.attachments: dict[int, AttachmentRecord] = {}
        self.product_images: dict[int, list[int]] = {}
        self.style_tags: dict[int, list[str]] = {}
        self.variants: dict[int, VariantRecord] = {}
        self.variant_options: dict[int, list[int]] = {}
        self.categories: dict[int, CategoryRecord] = {}
        self.product_categories: dict[int, list[int]] = {}
        self.display_groups: dict[int, list[DisplayGroupMembership]] = {}
        self.icons: dict[int, list[str | None]] = {}
        self.guide_images: dict[int, GuideImageRecord] = {}
        self.best_orders: dict[int, BestOrderRecord] = {}
        self.related: dict[int, list[int]] = {}
        self.options: dict[int, list[OptionRecord]] = {}
        self.stocks: list[StockRecord] = []
        self.ranking_specifications: dict[str, int] = {}
        self.rankings: dict[int, list[RankedProduct]] = {}
        self.likes: dict[int, list[LikedProduct]] = {}

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Source unavailable",
        failing_methods: list[str] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        """Configure read behavior.

        ``failing_methods`` limits failures to the named reads; when empty and
        ``should_succeed`` is False every read fails. ``delays`` maps method
        names to seconds to sleep before answering.
        """
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.failing_methods = set(failing_methods or [])
        self.delays = dict(delays or {})

    def _read(self, method: str, **params) -> None:
        self.calls.append({"method": method, **params})
        if method in self.delays:
            time.sleep(self.delays[method])
        if method in self.failing_methods or (not self.should_succeed and not self.failing_methods):
            raise SourceReadError(f"{method}: {self.failure_reason}")

    # Seeding helpers

    def add_product(self, product: ProductRecord) -> None:
        self.products[product.id] = product

    def add_seller(self, seller: SellerRecord) -> None:
        self.sellers[seller.id] = seller

    def add_attachment(self, attachment: AttachmentRecord) -> None:
        self.attachments[attachment.id] = attachment

    def add_variant(self, variant: VariantRecord, option_ids: list[int] | None = None) -> None:
        self.variants[variant.id] = variant
        if option_ids:
            self.variant_options[variant.id] = list(option_ids)

    def add_category(self, category: CategoryRecord) -> None:
        self.categories[category.id] = category

    def add_stock(self, stock: StockRecord) -> None:
        self.stocks.append(stock)

    # Point lookups

    def find_product(self, product_id: int) -> ProductRecord | None:
        self._read("find_product", product_id=product_id)
        return self.products.get(product_id)

    def find_seller(self, seller_id: int) -> SellerRecord | None:
        self._read("find_seller", seller_id=seller_id)
        return self.sellers.get(seller_id)

    def find_guide_image(self, guide_image_id: int) -> GuideImageRecord | None:
        self._read("find_guide_image", guide_image_id=guide_image_id)
        return self.guide_images.get(guide_image_id)

    def find_best_order(self, product_id: int) -> BestOrderRecord | None:
        self._read("find_best_order", product_id=product_id)
        return self.best_orders.get(product_id)

    def find_product_id_by_guide_image(self, guide_image_id: int) -> int | None:
        self._read("find_product_id_by_guide_image", guide_image_id=guide_image_id)
        owners = sorted(p.id for p in self.products.values() if p.guide_image_id == guide_image_id)
        return owners[0] if owners else None

    def find_product_id_by_variant(self, variant_id: int) -> int | None:
        self._read("find_product_id_by_variant", variant_id=variant_id)
        variant = self.variants.get(variant_id)
        return variant.product_id if variant else None

    # List lookups

    def find_attachments(self, attachment_ids: list[int]) -> list[AttachmentRecord]:
        self._read("find_attachments", attachment_ids=list(attachment_ids))
        found = [self.attachments[i] for i in attachment_ids if i in self.attachments]
        return sorted(found, key=lambda a: (a.seq or 0, a.id))

    def find_product_images(self, product_id: int) -> list[AttachmentRecord]:
        self._read("find_product_images", product_id=product_id)
        ids = self.product_images.get(product_id, [])
        found = [self.attachments[i] for i in ids if i in self.attachments]
        return sorted(found, key=lambda a: (a.seq or 0, a.id))

    def find_style_tags(self, seller_id: int) -> list[str]:
        self._read("find_style_tags", seller_id=seller_id)
        return list(self.style_tags.get(seller_id, []))

    def find_variants(self, product_id: int) -> list[VariantRecord]:
        self._read("find_variants", product_id=product_id)
        return sorted((v for v in self.variants.values() if v.product_id == product_id), key=lambda v: v.id)

    def find_variant_option_ids(self, variant_ids: list[int]) -> dict[int, list[int]]:
        self._read("find_variant_option_ids", variant_ids=list(variant_ids))
        return {vid: list(self.variant_options[vid]) for vid in variant_ids if self.variant_options.get(vid)}

    def find_category_ids(self, product_id: int) -> list[int]:
        self._read("find_category_ids", product_id=product_id)
        return list(self.product_categories.get(product_id, []))

    def find_all_categories(self) -> list[CategoryRecord]:
        self._read("find_all_categories")
        return sorted(self.categories.values(), key=lambda c: c.id)

    def find_display_groups(self, product_id: int) -> list[DisplayGroupMembership]:
        self._read("find_display_groups", product_id=product_id)
        return list(self.display_groups.get(product_id, []))

    def find_icon_names(self, product_id: int) -> list[str | None]:
        self._read("find_icon_names", product_id=product_id)
        return list(self.icons.get(product_id, []))

    def find_related_product_ids(self, product_id: int) -> list[int]:
        self._read("find_related_product_ids", product_id=product_id)
        return list(self.related.get(product_id, []))

    def find_options(self, product_id: int) -> list[OptionRecord]:
        self._read("find_options", product_id=product_id)
        return list(self.options.get(product_id, []))

    def find_stocks(self, variant_ids: list[int]) -> list[StockRecord]:
        self._read("find_stocks", variant_ids=list(variant_ids))
        wanted = set(variant_ids)
        return [s for s in self.stocks if s.product_variant_id in wanted]

    # Cursor-paged id scans

    def find_product_ids_after(self, after_id: int, limit: int) -> list[int]:
        self._read("find_product_ids_after", after_id=after_id, limit=limit)
        return sorted(pid for pid in self.products if pid > after_id)[:limit]

    def find_product_ids_by_category(self, category_id: int, after_id: int, limit: int) -> list[int]:
        self._read("find_product_ids_by_category", category_id=category_id, after_id=after_id, limit=limit)
        ids = (pid for pid, cats in self.product_categories.items() if category_id in cats and pid > after_id)
        return sorted(ids)[:limit]

    def find_product_ids_by_seller(self, seller_id: int, after_id: int, limit: int) -> list[int]:
        self._read("find_product_ids_by_seller", seller_id=seller_id, after_id=after_id, limit=limit)
        ids = (p.id for p in self.products.values() if p.seller_id == seller_id and p.id > after_id)
        return sorted(ids)[:limit]

    # Ranking and likes

    def find_ranking_specification_id(self, path: str) -> int | None:
        self._read("find_ranking_specification_id", path=path)
        return self.ranking_specifications.get(path)

    def find_ranked_products(self, specification_id: int, after_rank: int | None, limit: int) -> list[RankedProduct]:
        self._read("find_ranked_products", specification_id=specification_id, after_rank=after_rank, limit=limit)
        ranked = sorted(self.rankings.get(specification_id, []), key=lambda r: r.rank)
        if after_rank is not None:
            ranked = [r for r in ranked if r.rank > after_rank]
        return ranked[:limit]

    def find_liked_products(self, customer_id: int, before_like_id: int | None, limit: int) -> list[LikedProduct]:
        self._read("find_liked_products", customer_id=customer_id, before_like_id=before_like_id, limit=limit)
        liked = sorted(self.likes.get(customer_id, []), key=lambda like: like.like_id, reverse=True)
        if before_like_id is not None:
            liked = [like for like in liked if like.like_id < before_like_id]
        visible = []
        for like in liked:
            product = self.products.get(like.product_id)
            if product and product.display is not None and product.deleted is None:
                visible.append(like)
        return visible[:limit]
