"""Base-record stage: the product row itself.

Every exclusion rule lives here or in the seller stage; anything that
makes the product unfit for the index resolves the whole run to ABSENT.
"""

import structlog

from productsearch.assembly.chain import Outcome, Proceed
from productsearch.assembly.reader import SourceReader
from productsearch.assembly.values import parse_json, strip_html
from productsearch.document.builder import IndexContext, ProductDocumentBuilder
from productsearch.source.port import ProductRecord

logger = structlog.get_logger(__name__)

# Operational placeholder products that must never be searchable
DENYLISTED_CODES = frozenset({"P000EJGJ", "DERBJU5043", "DKEBSZ5325"})


def exclusion_reason(product: ProductRecord | None) -> str | None:
    """Return why a product row cannot be indexed, or None if it can."""
    if product is None:
        return "not_found"
    if not product.code:
        return "missing_code"
    if product.code in DENYLISTED_CODES:
        return "denylisted_code"
    if product.deleted is not None:
        return "deleted"
    if product.seller_id is None:
        return "missing_seller"
    if product.price is None:
        return "missing_price"
    return None


class BaseRecordStage:
    name = "base_record"

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        product = await self.reader.fetch(context, self.name, self.reader.gateway.find_product, context.product_id)

        reason = exclusion_reason(product)
        if reason is not None:
            logger.info("Product excluded from index", product_id=context.product_id, reason=reason)
            context.metadata["absent_reason"] = reason
            return Outcome.ABSENT

        _copy_product(product, context.builder)
        return await proceed()


def _copy_product(product: ProductRecord, builder: ProductDocumentBuilder) -> None:
    builder.code = product.code
    builder.custom_code = product.custom_code
    builder.slug = product.slug
    builder.name = product.name
    builder.english_name = product.english_name
    builder.internal_name = product.internal_name
    builder.model_name = product.model_name
    builder.description = strip_html(product.description)
    builder.title = product.title
    builder.annotation = product.annotation
    builder.brand_id = product.brand_id
    builder.trend_id = product.trend_id
    builder.info = parse_json(product.info, product_id=product.id, column="info")
    builder.size_info = product.size_info
    builder.price = product.price
    builder.material = product.material
    builder.cloth_fabric = product.cloth_fabric
    builder.weight = product.weight
    builder.season = product.season
    builder.origin_id = product.origin_id
    builder.manufacturer_id = product.manufacturer_id
    builder.option_type = product.option_type or ""
    builder.member_only = bool(product.member_only)
    builder.quantity_limit_type = product.quantity_limit_type or ""
    builder.quantity_limit = product.quantity_limit
    builder.repurchasable = bool(product.repurchasable)
    builder.display = product.display
    builder.selling = product.selling
    builder.is_selling = product.selling is not None
    builder.released = product.released
    builder.deleted = product.deleted
    builder.seller_id = product.seller_id
    builder.image_id = product.image_id
    builder.guide_image_id = product.guide_image_id
