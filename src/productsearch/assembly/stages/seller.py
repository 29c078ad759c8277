"""Seller stage: embeds the seller snapshot into the product document."""

import structlog

from productsearch.assembly.chain import Outcome, Proceed, discard, overlap
from productsearch.assembly.reader import SourceReader
from productsearch.document.builder import IndexContext
from productsearch.document.models import AttachmentDocument, SellerDocument
from productsearch.errors import SourceReadError
from productsearch.source.port import SellerRecord

logger = structlog.get_logger(__name__)

K_BRAND = "k_brand"
J_BRAND = "j_brand"
TREND_SHOPPINGMALL = "trend_shoppingmall"
DIRECTOR = "director"

EXTRA_TAG_SELLER_TYPES = frozenset({DIRECTOR, TREND_SHOPPINGMALL})

BODY_FRAME_TYPES_JP = {
    "straight": "ストレート",
    "natural": "ナチュラル",
    "wave": "ウェーブ",
}


def extra_tags(seller: SellerRecord) -> list[str]:
    if seller.type not in EXTRA_TAG_SELLER_TYPES:
        return []
    tags = []
    if seller.influencer_name:
        tags.append(seller.influencer_name)
    if seller.height is not None:
        tags.append(f"{seller.height}cm")
    if seller.body_frame_type:
        body_frame = BODY_FRAME_TYPES_JP.get(seller.body_frame_type.lower())
        if body_frame:
            tags.append(body_frame)
    return tags


def keyword_array(keywords: str | None) -> list[str]:
    if not keywords:
        return []
    return [keyword.strip() for keyword in keywords.split(",") if keyword.strip()]


class SellerStage:
    name = "seller"

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        builder = context.builder
        if builder.seller_id is None:
            return Outcome.ABSENT

        gateway = self.reader.gateway
        seller = await self.reader.fetch(context, self.name, gateway.find_seller, builder.seller_id)
        if seller is None:
            logger.info("Seller not found, product excluded", product_id=builder.id, seller_id=builder.seller_id)
            context.metadata["absent_reason"] = "seller_not_found"
            return Outcome.ABSENT

        image_task = None
        if seller.profile_image_id is not None:
            image_task = self.reader.launch(gateway.find_attachments, [seller.profile_image_id])
        tags_task = self.reader.launch(gateway.find_style_tags, seller.id)

        outcome = await overlap([image_task, tags_task], proceed)
        if outcome is Outcome.ABSENT:
            return outcome

        try:
            profile_image = None
            if image_task is not None:
                attachments = await self.reader.collect(context, self.name, image_task)
                if attachments:
                    first = attachments[0]
                    profile_image = AttachmentDocument(
                        id=first.id, mime_type=first.mimetype, file=first.file, seq=first.seq
                    )

            try:
                style_tags = await self.reader.collect(context, self.name, tags_task)
            except SourceReadError:
                logger.warning("Style tag lookup failed", product_id=builder.id, seller_id=seller.id)
                style_tags = []
        finally:
            # Unread if the image lookup failed
            discard([tags_task])

        builder.seller = _seller_document(seller, profile_image, style_tags)
        return outcome


def _seller_document(
    seller: SellerRecord, profile_image: AttachmentDocument | None, style_tags: list[str]
) -> SellerDocument:
    return SellerDocument(
        id=seller.id,
        partner_id=seller.partner_id,
        name=seller.name or "",
        code=seller.code,
        type=seller.type or "",
        target_gender=seller.target_gender or "",
        slug=seller.slug,
        segment=seller.segment,
        brand_name=seller.brand_name or "",
        brand_name_jp=seller.brand_name_jp,
        status=seller.status or "",
        is_official_brand=bool(seller.is_official_brand),
        profile_image=profile_image,
        instagram=seller.instagram,
        tiktok=seller.tiktok,
        created=seller.created,
        updated=seller.updated,
        open_at=seller.open_at,
        expired_date=seller.expired_date,
        display=bool(seller.display),
        new_product_begin=seller.new_product_begin,
        new_product_end=seller.new_product_end,
        influencer_name=seller.influencer_name or "",
        influencer_name_jp=seller.influencer_name_jp or "",
        height=seller.height,
        weight=seller.weight,
        body_frame_type=seller.body_frame_type,
        top_size=seller.top_size,
        bottom_size=seller.bottom_size,
        shoe_size=seller.shoe_size,
        style_tags=list(style_tags),
        extra_tags=extra_tags(seller),
        keywords=seller.keywords,
        keyword_array=keyword_array(seller.keywords),
    )
