"""Topic-to-handler wiring for the change feed."""

from productsearch.buffer.event_buffer import ProductEventBuffer
from productsearch.category.service import CategoryService
from productsearch.cdc import payloads, topics
from productsearch.cdc.handlers import (
    DEFAULT_PAGE_SIZE,
    CategoryChangeHandler,
    ChangeHandler,
    GuideImageChangeHandler,
    LikeChangeHandler,
    ProductChangeHandler,
    ProductReferenceHandler,
    SellerChangeHandler,
    SellerStatChangeHandler,
    VariantReferenceHandler,
)
from productsearch.messaging.producers import ProductEventProducer, SellerEventProducer
from productsearch.source.port import SourceGateway

# Tables whose rows carry the product id themselves
PRODUCT_REFERENCE_TABLES = [
    (topics.PRODUCT_ICON_SET, payloads.ProductIconSetPayload, "product_id"),
    (topics.PRODUCT_IMAGE_SET, payloads.ProductImageSetPayload, "product_id"),
    (topics.PRODUCT_VARIANT, payloads.ProductVariantPayload, "product_id"),
    (topics.OPTION, payloads.OptionPayload, "product_id"),
    (topics.PRODUCT_CATEGORY_SET, payloads.ProductCategorySetPayload, "product_id"),
    (topics.DISPLAY_GROUP_PRODUCT, payloads.DisplayGroupProductPayload, "product_id"),
    (topics.PRODUCT_BENEFIT_SET, payloads.ProductBenefitSetPayload, "product_id"),
    (topics.PRODUCT_BEST_ORDER, payloads.ProductBestOrderPayload, "product_id"),
    (topics.PRODUCT_RELATED_PRODUCTS, payloads.ProductRelatedProductsPayload, "from_product_id"),
]

VARIANT_REFERENCE_TABLES = [
    (topics.PRODUCT_VARIANT_OPTION_SET, payloads.ProductVariantOptionSetPayload),
    (topics.STOCK, payloads.StockPayload),
]


def build_handlers(
    buffer: ProductEventBuffer,
    gateway: SourceGateway,
    product_events: ProductEventProducer,
    seller_events: SellerEventProducer,
    category_service: CategoryService,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> dict[str, ChangeHandler]:
    handlers: list[ChangeHandler] = [
        ProductChangeHandler(buffer, product_events),
        GuideImageChangeHandler(buffer, gateway),
        CategoryChangeHandler(buffer, gateway, category_service, page_size),
        SellerChangeHandler(buffer, gateway, seller_events, page_size),
        SellerStatChangeHandler(seller_events),
        LikeChangeHandler(seller_events),
    ]
    handlers += [
        ProductReferenceHandler(topic, row_type, buffer, field) for topic, row_type, field in PRODUCT_REFERENCE_TABLES
    ]
    handlers += [
        VariantReferenceHandler(topic, row_type, buffer, gateway) for topic, row_type in VARIANT_REFERENCE_TABLES
    ]
    return {handler.topic: handler for handler in handlers}


def default_handlers() -> dict[str, ChangeHandler]:
    """Handlers wired to the configured buffer, gateway, bus and category cache."""
    from productsearch.buffer import get_event_buffer
    from productsearch.category import get_category_service
    from productsearch.config import get_settings
    from productsearch.messaging import get_event_bus
    from productsearch.source import get_gateway

    bus = get_event_bus()
    return build_handlers(
        get_event_buffer(),
        get_gateway(),
        ProductEventProducer(bus),
        SellerEventProducer(bus),
        get_category_service(),
        page_size=get_settings().fanout_page_size,
    )
