"""SQLAlchemy source gateway against the ``shopping_*`` tables.

Each read checks out its own pooled connection, so the gateway is safe to
call from the worker threads the assembly stages fan out to.
"""

from decimal import Decimal

import structlog
from sqlalchemy import bindparam, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

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

logger = structlog.get_logger(__name__)

_PRODUCT_COLUMNS = """
    id, code, custom_code, slug, name, english_name, internal_name, model_name,
    description, title, annotation, brand_id, trend_id, info, size_info, price,
    material, cloth_fabric, weight, season, origin_id, manufacturer_id, option_type,
    quantity_limit, quantity_limit_type, member_only, repurchasable,
    display, selling, released, deleted, seller_id, image_id, guide_image_id
"""

_SELLER_COLUMNS = """
    id, partner_id, name, code, type, target_gender, slug, segment, brand_name,
    brand_name_jp, status, is_official_brand, profile_image_id, instagram, tiktok,
    created, updated, open_at, expired_date, display, new_product_begin,
    new_product_end, influencer_name, influencer_name_jp, height, weight,
    body_frame_type, top_size, bottom_size, shoe_size, keywords
"""

_VARIANT_COLUMNS = """
    id, product_id, code, barcode, external_barcode, display, selling, deleted,
    options, additional_price, use_inventory, display_soldout, inventory_type,
    quantity_check_type, quantity, safety_quantity
"""


def _plain(row) -> dict:
    """Row mapping with NUMERIC columns converted to float."""
    return {key: float(value) if isinstance(value, Decimal) else value for key, value in row.items()}


class SqlSourceGateway(SourceGateway):
    """Reads source records with SQLAlchemy Core."""

    def __init__(self, database_url: str | None = None, engine: Engine | None = None) -> None:
        if engine is None:
            if not database_url:
                raise ValueError("SqlSourceGateway needs a database_url or an engine")
            engine = create_engine(database_url, pool_pre_ping=True)
        self._engine = engine

    def _fetch_all(self, sql, **params) -> list[dict]:
        try:
            with self._engine.connect() as conn:
                return [_plain(row) for row in conn.execute(sql, params).mappings().all()]
        except SQLAlchemyError as e:
            logger.error("Source read failed", error=str(e))
            raise SourceReadError(str(e)) from e

    def _fetch_one(self, sql, **params) -> dict | None:
        rows = self._fetch_all(sql, **params)
        return rows[0] if rows else None

    def _fetch_ids(self, sql, **params) -> list[int]:
        return [row["id"] for row in self._fetch_all(sql, **params)]

    # Point lookups

    def find_product(self, product_id: int) -> ProductRecord | None:
        row = self._fetch_one(
            text(f"SELECT {_PRODUCT_COLUMNS} FROM shopping_product WHERE id = :id"),
            id=product_id,
        )
        return ProductRecord(**row) if row else None

    def find_seller(self, seller_id: int) -> SellerRecord | None:
        row = self._fetch_one(
            text(f"SELECT {_SELLER_COLUMNS} FROM shopping_seller WHERE id = :id"),
            id=seller_id,
        )
        return SellerRecord(**row) if row else None

    def find_guide_image(self, guide_image_id: int) -> GuideImageRecord | None:
        row = self._fetch_one(
            text(
                """
                SELECT g.id, g.type AS name,
                       a.id AS image_id, a.mimetype AS image_mimetype, a.file AS image_file, a.seq AS image_seq
                FROM shopping_productguideimage g
                LEFT JOIN shopping_attachment a ON a.id = g.image_id
                WHERE g.id = :id AND g.deleted IS NULL
                """
            ),
            id=guide_image_id,
        )
        if row is None:
            return None
        image = None
        if row["image_id"] is not None:
            image = AttachmentRecord(
                id=row["image_id"],
                mimetype=row["image_mimetype"],
                file=row["image_file"],
                seq=row["image_seq"],
            )
        return GuideImageRecord(id=row["id"], name=row["name"], image=image)

    def find_best_order(self, product_id: int) -> BestOrderRecord | None:
        row = self._fetch_one(
            text(
                """
                SELECT product_id, order_count, like_count, cart_count, view_count, review_average,
                       review_count, total_like_count, sales_amount, discounted_price
                FROM shopping_productbestorder WHERE product_id = :product_id
                """
            ),
            product_id=product_id,
        )
        return BestOrderRecord(**row) if row else None

    def find_product_id_by_guide_image(self, guide_image_id: int) -> int | None:
        row = self._fetch_one(
            text("SELECT id FROM shopping_product WHERE guide_image_id = :id ORDER BY id LIMIT 1"),
            id=guide_image_id,
        )
        return row["id"] if row else None

    def find_product_id_by_variant(self, variant_id: int) -> int | None:
        row = self._fetch_one(
            text("SELECT product_id FROM shopping_productvariant WHERE id = :id"),
            id=variant_id,
        )
        return row["product_id"] if row else None

    # List lookups

    def find_attachments(self, attachment_ids: list[int]) -> list[AttachmentRecord]:
        if not attachment_ids:
            return []
        rows = self._fetch_all(
            text("SELECT id, mimetype, file, seq FROM shopping_attachment WHERE id IN :ids ORDER BY seq, id")
            .bindparams(bindparam("ids", expanding=True)),
            ids=list(attachment_ids),
        )
        return [AttachmentRecord(**row) for row in rows]

    def find_product_images(self, product_id: int) -> list[AttachmentRecord]:
        rows = self._fetch_all(
            text(
                """
                SELECT a.id, a.mimetype, a.file, a.seq
                FROM shopping_attachment a
                JOIN shopping_product_image_set pis ON pis.attachment_id = a.id
                WHERE pis.product_id = :product_id
                ORDER BY a.seq, a.id
                """
            ),
            product_id=product_id,
        )
        return [AttachmentRecord(**row) for row in rows]

    def find_style_tags(self, seller_id: int) -> list[str]:
        rows = self._fetch_all(
            text(
                """
                SELECT st.name
                FROM nugustyling_styletag st
                JOIN shopping_sellerstyletag sst ON sst.style_tag_id = st.id
                WHERE sst.seller_id = :seller_id
                ORDER BY st.id
                """
            ),
            seller_id=seller_id,
        )
        return [row["name"] for row in rows if row["name"]]

    def find_variants(self, product_id: int) -> list[VariantRecord]:
        rows = self._fetch_all(
            text(f"SELECT {_VARIANT_COLUMNS} FROM shopping_productvariant WHERE product_id = :product_id ORDER BY id"),
            product_id=product_id,
        )
        return [VariantRecord(**row) for row in rows]

    def find_variant_option_ids(self, variant_ids: list[int]) -> dict[int, list[int]]:
        if not variant_ids:
            return {}
        rows = self._fetch_all(
            text(
                """
                SELECT productvariant_id AS variant_id, option_id
                FROM shopping_productvariant_option_set
                WHERE productvariant_id IN :ids
                ORDER BY id
                """
            ).bindparams(bindparam("ids", expanding=True)),
            ids=list(variant_ids),
        )
        option_ids: dict[int, list[int]] = {}
        for row in rows:
            option_ids.setdefault(row["variant_id"], []).append(row["option_id"])
        return option_ids

    def find_category_ids(self, product_id: int) -> list[int]:
        rows = self._fetch_all(
            text("SELECT category_id FROM shopping_product_category_set WHERE product_id = :product_id ORDER BY id"),
            product_id=product_id,
        )
        return [row["category_id"] for row in rows]

    def find_all_categories(self) -> list[CategoryRecord]:
        rows = self._fetch_all(
            text("SELECT id, parent_id, name, display_name, slug, is_visible FROM shopping_category ORDER BY id")
        )
        return [CategoryRecord(**{**row, "is_visible": row["is_visible"] is not False}) for row in rows]

    def find_display_groups(self, product_id: int) -> list[DisplayGroupMembership]:
        rows = self._fetch_all(
            text(
                """
                SELECT dg.id AS group_id, COALESCE(dg.seq, 0) AS group_seq, COALESCE(dgp.seq, 0) AS product_seq
                FROM shopping_displaygroup dg
                JOIN shopping_displaygroupproduct dgp ON dg.id = dgp.group_id
                WHERE dgp.product_id = :product_id
                  AND dg.deleted IS NULL
                  AND dg.type = 'manual'
                ORDER BY dg.seq, dg.id
                """
            ),
            product_id=product_id,
        )
        return [DisplayGroupMembership(**row) for row in rows]

    def find_icon_names(self, product_id: int) -> list[str | None]:
        rows = self._fetch_all(
            text(
                """
                SELECT i.name
                FROM shopping_icon i
                JOIN shopping_product_icon_set pis ON pis.icon_id = i.id
                WHERE pis.product_id = :product_id
                ORDER BY i.seq, i.id
                """
            ),
            product_id=product_id,
        )
        return [row["name"] for row in rows]

    def find_related_product_ids(self, product_id: int) -> list[int]:
        rows = self._fetch_all(
            text(
                """
                SELECT to_product_id FROM shopping_product_related_products
                WHERE from_product_id = :product_id ORDER BY id
                """
            ),
            product_id=product_id,
        )
        return [row["to_product_id"] for row in rows]

    def find_options(self, product_id: int) -> list[OptionRecord]:
        rows = self._fetch_all(
            text(
                """
                SELECT id, product_id, name, value, hexcode, search_name, model, name_seq, value_seq
                FROM shopping_option WHERE product_id = :product_id
                ORDER BY name_seq, value_seq, id
                """
            ),
            product_id=product_id,
        )
        return [OptionRecord(**row) for row in rows]

    def find_stocks(self, variant_ids: list[int]) -> list[StockRecord]:
        if not variant_ids:
            return []
        rows = self._fetch_all(
            text(
                """
                SELECT s.id, s.product_variant_id, COALESCE(s.quantity, 0) AS quantity, s.warehouse_id,
                       w.name AS warehouse_name, r.name AS retail_store_name, COALESCE(w.quick, FALSE) AS quick
                FROM shopping_stock s
                JOIN shopping_warehouse w ON w.id = s.warehouse_id
                LEFT JOIN shopping_retailstore r ON r.warehouse_id = w.id
                WHERE s.product_variant_id IN :ids
                ORDER BY s.id
                """
            ).bindparams(bindparam("ids", expanding=True)),
            ids=list(variant_ids),
        )
        return [StockRecord(**row) for row in rows]

    # Cursor-paged id scans

    def find_product_ids_after(self, after_id: int, limit: int) -> list[int]:
        return self._fetch_ids(
            text("SELECT id FROM shopping_product WHERE id > :after_id ORDER BY id LIMIT :limit"),
            after_id=after_id,
            limit=limit,
        )

    def find_product_ids_by_category(self, category_id: int, after_id: int, limit: int) -> list[int]:
        return self._fetch_ids(
            text(
                """
                SELECT DISTINCT product_id AS id FROM shopping_product_category_set
                WHERE category_id = :category_id AND product_id > :after_id
                ORDER BY product_id
                LIMIT :limit
                """
            ),
            category_id=category_id,
            after_id=after_id,
            limit=limit,
        )

    def find_product_ids_by_seller(self, seller_id: int, after_id: int, limit: int) -> list[int]:
        return self._fetch_ids(
            text(
                """
                SELECT id FROM shopping_product
                WHERE seller_id = :seller_id AND id > :after_id
                ORDER BY id
                LIMIT :limit
                """
            ),
            seller_id=seller_id,
            after_id=after_id,
            limit=limit,
        )

    # Ranking and likes

    def find_ranking_specification_id(self, path: str) -> int | None:
        row = self._fetch_one(text("SELECT id FROM shopping_rankingspecification WHERE path = :path"), path=path)
        return row["id"] if row else None

    def find_ranked_products(self, specification_id: int, after_rank: int | None, limit: int) -> list[RankedProduct]:
        rows = self._fetch_all(
            text(
                """
                SELECT product_id, rank FROM shopping_productranking
                WHERE specification_id = :specification_id
                  AND (CAST(:after_rank AS integer) IS NULL OR rank > :after_rank)
                ORDER BY rank
                LIMIT :limit
                """
            ),
            specification_id=specification_id,
            after_rank=after_rank,
            limit=limit,
        )
        return [RankedProduct(**row) for row in rows]

    def find_liked_products(self, customer_id: int, before_like_id: int | None, limit: int) -> list[LikedProduct]:
        rows = self._fetch_all(
            text(
                """
                SELECT l.id AS like_id, l.product_id
                FROM shopping_like l
                JOIN shopping_product p ON p.id = l.product_id
                WHERE l.customer_id = :customer_id
                  AND l.target = 'product'
                  AND p.display IS NOT NULL
                  AND p.deleted IS NULL
                  AND (CAST(:before_like_id AS bigint) IS NULL OR l.id < :before_like_id)
                ORDER BY l.id DESC
                LIMIT :limit
                """
            ),
            customer_id=customer_id,
            before_like_id=before_like_id,
            limit=limit,
        )
        return [LikedProduct(**row) for row in rows]
