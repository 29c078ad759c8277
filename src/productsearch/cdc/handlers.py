"""Change handlers: map one source-table change to reindex work.

Every handler decodes the message and applies its effect, and lets any
failure propagate so the consumer redelivers the message. A lookup that
resolves to nothing is not a failure: the row may be mid-change upstream,
so it is logged and dropped.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

import structlog
from pydantic import BaseModel

from productsearch.buffer.event_buffer import ProductEventBuffer
from productsearch.category.service import CategoryService
from productsearch.cdc import payloads, topics
from productsearch.cdc.change_event import ChangeEvent, decode_change_event
from productsearch.messaging.producers import ProductEventProducer, SellerEventProducer
from productsearch.source.port import SourceGateway

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 1000


def buffer_id_pages(
    buffer: ProductEventBuffer,
    scan: Callable[[int, int], list[int]],
    page_size: int = DEFAULT_PAGE_SIZE,
) -> int:
    """Buffer every id a cursor-paged scan yields; returns how many.

    Stops at the first page shorter than ``page_size``.
    """
    after_id = 0
    total = 0
    while True:
        page = scan(after_id, page_size)
        if page:
            buffer.add(page)
            total += len(page)
            after_id = max(page)
        if len(page) < page_size:
            return total


class ChangeHandler(ABC):
    topic: str
    row_type: type[BaseModel]

    def handle(self, raw) -> None:
        event = decode_change_event(raw, self.row_type, topic=self.topic)
        self.apply(event)

    @abstractmethod
    def apply(self, event: ChangeEvent) -> None: ...


class ProductChangeHandler(ChangeHandler):
    """Base product table. Deletes skip the buffer and go out directly."""

    topic = topics.PRODUCT
    row_type = payloads.ProductPayload

    def __init__(self, buffer: ProductEventBuffer, product_events: ProductEventProducer) -> None:
        self.buffer = buffer
        self.product_events = product_events

    def apply(self, event: ChangeEvent) -> None:
        product_id = event.record.id
        if event.is_delete:
            self.product_events.send_deleted(product_id)
            logger.info("Product deleted at source", product_id=product_id)
            return
        self.buffer.add([product_id])


class ProductReferenceHandler(ChangeHandler):
    """Tables whose rows name their product directly."""

    def __init__(
        self,
        topic: str,
        row_type: type[BaseModel],
        buffer: ProductEventBuffer,
        product_id_field: str = "product_id",
    ) -> None:
        self.topic = topic
        self.row_type = row_type
        self.buffer = buffer
        self.product_id_field = product_id_field

    def apply(self, event: ChangeEvent) -> None:
        product_id = getattr(event.record, self.product_id_field)
        if product_id is None:
            logger.warning("Change row has no product reference", topic=self.topic, op=event.op.value)
            return
        self.buffer.add([product_id])


class GuideImageChangeHandler(ChangeHandler):
    topic = topics.PRODUCT_GUIDE_IMAGE
    row_type = payloads.ProductGuideImagePayload

    def __init__(self, buffer: ProductEventBuffer, gateway: SourceGateway) -> None:
        self.buffer = buffer
        self.gateway = gateway

    def apply(self, event: ChangeEvent) -> None:
        guide_image_id = event.record.id
        product_id = self.gateway.find_product_id_by_guide_image(guide_image_id)
        if product_id is None:
            logger.warning("No product owns guide image", guide_image_id=guide_image_id)
            return
        self.buffer.add([product_id])


class VariantReferenceHandler(ChangeHandler):
    """Tables that reference a variant; resolved to the variant's product."""

    def __init__(
        self,
        topic: str,
        row_type: type[BaseModel],
        buffer: ProductEventBuffer,
        gateway: SourceGateway,
    ) -> None:
        self.topic = topic
        self.row_type = row_type
        self.buffer = buffer
        self.gateway = gateway

    def apply(self, event: ChangeEvent) -> None:
        variant_id = event.record.variant_id
        if variant_id is None:
            logger.warning("Change row has no variant reference", topic=self.topic, op=event.op.value)
            return
        product_id = self.gateway.find_product_id_by_variant(variant_id)
        if product_id is None:
            logger.warning("Variant does not resolve to a product", topic=self.topic, variant_id=variant_id)
            return
        self.buffer.add([product_id])


class CategoryChangeHandler(ChangeHandler):
    """Refreshes the category cache and reindexes every product in the category."""

    topic = topics.CATEGORY
    row_type = payloads.CategoryPayload

    def __init__(
        self,
        buffer: ProductEventBuffer,
        gateway: SourceGateway,
        category_service: CategoryService,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.buffer = buffer
        self.gateway = gateway
        self.category_service = category_service
        self.page_size = page_size

    def apply(self, event: ChangeEvent) -> None:
        category_id = event.record.id
        self.category_service.load_cache()
        count = buffer_id_pages(
            self.buffer,
            lambda after_id, limit: self.gateway.find_product_ids_by_category(category_id, after_id, limit),
            self.page_size,
        )
        logger.info("Category change fanned out", category_id=category_id, products=count)


class SellerChangeHandler(ChangeHandler):
    """Signals the seller and reindexes every product it sells.

    Deletes are signalled as ``seller.updated`` as well; seller consumers
    re-read the row and see it gone.
    """

    topic = topics.SELLER
    row_type = payloads.SellerPayload

    def __init__(
        self,
        buffer: ProductEventBuffer,
        gateway: SourceGateway,
        seller_events: SellerEventProducer,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.buffer = buffer
        self.gateway = gateway
        self.seller_events = seller_events
        self.page_size = page_size

    def apply(self, event: ChangeEvent) -> None:
        seller_id = event.record.id
        if seller_id is None or seller_id <= 0:
            logger.warning("Ignoring seller change without a valid id", seller_id=seller_id)
            return

        self.seller_events.send_updated(seller_id)

        count = buffer_id_pages(
            self.buffer,
            lambda after_id, limit: self.gateway.find_product_ids_by_seller(seller_id, after_id, limit),
            self.page_size,
        )
        logger.info("Seller change fanned out", seller_id=seller_id, products=count)


class SellerStatChangeHandler(ChangeHandler):
    topic = topics.SELLER_STAT
    row_type = payloads.SellerStatPayload

    def __init__(self, seller_events: SellerEventProducer) -> None:
        self.seller_events = seller_events

    def apply(self, event: ChangeEvent) -> None:
        seller_id = event.record.seller_id
        if seller_id is None or seller_id <= 0:
            logger.warning("Ignoring seller stat without a valid seller id", seller_id=seller_id)
            return
        self.seller_events.send_updated(seller_id)


class LikeChangeHandler(ChangeHandler):
    """Seller likes change the seller's like count; product likes are ignored here."""

    topic = topics.LIKE
    row_type = payloads.LikePayload

    def __init__(self, seller_events: SellerEventProducer) -> None:
        self.seller_events = seller_events

    def apply(self, event: ChangeEvent) -> None:
        seller_id = event.record.seller_id
        if seller_id is not None and seller_id > 0:
            self.seller_events.send_updated(seller_id)
