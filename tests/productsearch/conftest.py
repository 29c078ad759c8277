from datetime import UTC, datetime

import pytest

from productsearch.assembly import reset_assembler, set_assembler
from productsearch.assembly.assembler import ProductAssembler
from productsearch.buffer import reset_event_buffer, set_event_buffer
from productsearch.buffer.event_buffer import ProductEventBuffer
from productsearch.buffer.memory_adapter import InMemoryWorkQueue
from productsearch.category import reset_category_service, set_category_service
from productsearch.category.service import CategoryService
from productsearch.category.store import InMemoryCacheStore
from productsearch.indexing import get_index_service, reset_search_index, set_search_index
from productsearch.indexing.fake_adapter import InMemorySearchIndex
from productsearch.messaging import reset_event_bus, set_event_bus
from productsearch.messaging.fake_adapter import FakeEventBus
from productsearch.messaging.producers import ProductEventProducer, SellerEventProducer
from productsearch.source import reset_gateway, set_gateway
from productsearch.source.fake_adapter import FakeSourceGateway
from productsearch.source.port import (
    AttachmentRecord,
    CategoryRecord,
    ProductRecord,
    SellerRecord,
    StockRecord,
    VariantRecord,
)

RELEASED = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)
DISPLAYED = datetime(2024, 3, 1, 10, 0, tzinfo=UTC)


@pytest.fixture(scope="session")
def _productsearch_domain():
    """Initialize the productsearch domain once per session."""
    from productsearch.domain import productsearch

    productsearch.init(traverse=False)
    return productsearch


@pytest.fixture(autouse=True)
def run_around_tests(_productsearch_domain):
    """Push domain context before each test, reset every adapter after."""
    ctx = _productsearch_domain.domain_context()
    ctx.push()

    yield

    reset_gateway()
    reset_event_bus()
    reset_event_buffer()
    reset_category_service()
    reset_search_index()
    reset_assembler()
    ctx.pop()


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------
@pytest.fixture()
def gateway():
    fake = FakeSourceGateway()
    set_gateway(fake)
    return fake


@pytest.fixture()
def bus():
    fake = FakeEventBus()
    set_event_bus(fake)
    return fake


@pytest.fixture()
def queue():
    return InMemoryWorkQueue()


@pytest.fixture()
def product_events(bus):
    return ProductEventProducer(bus)


@pytest.fixture()
def seller_events(bus):
    return SellerEventProducer(bus)


@pytest.fixture()
def event_buffer(queue, product_events):
    buffer = ProductEventBuffer(queue, product_events)
    set_event_buffer(buffer)
    return buffer


@pytest.fixture()
def cache_store():
    return InMemoryCacheStore()


@pytest.fixture()
def category_service(gateway, cache_store):
    service = CategoryService(gateway, cache_store)
    set_category_service(service)
    return service


@pytest.fixture()
def assembler(gateway, category_service):
    assembler = ProductAssembler(gateway, category_service, stage_timeout=2.0)
    set_assembler(assembler)
    return assembler


@pytest.fixture()
def search_index():
    index = InMemorySearchIndex()
    set_search_index(index)
    return index


@pytest.fixture()
def index_service(assembler, search_index):
    return get_index_service()


# ---------------------------------------------------------------------------
# Source data
# ---------------------------------------------------------------------------
class CatalogSeeder:
    """Seeds the fake gateway with indexable products."""

    def __init__(self, gateway: FakeSourceGateway):
        self.gateway = gateway

    def seller(self, seller_id=10, **overrides):
        defaults = {
            "id": seller_id,
            "name": "Studio Kiln",
            "slug": f"seller-{seller_id}",
            "type": "k_brand",
            "brand_name": "Kiln",
            "status": "active",
            "display": True,
        }
        defaults.update(overrides)
        seller = SellerRecord(**defaults)
        self.gateway.add_seller(seller)
        return seller

    def product(self, product_id, seller_id=10, **overrides):
        if seller_id is not None and seller_id not in self.gateway.sellers:
            self.seller(seller_id)
        defaults = {
            "id": product_id,
            "code": f"P{product_id:07d}",
            "name": f"Product {product_id}",
            "price": 10000.0,
            "seller_id": seller_id,
            "display": DISPLAYED,
            "released": RELEASED,
        }
        defaults.update(overrides)
        product = ProductRecord(**defaults)
        self.gateway.add_product(product)
        return product

    def variant(self, variant_id, product_id, option_ids=(1,), **overrides):
        defaults = {"id": variant_id, "product_id": product_id, "code": f"V{variant_id}"}
        defaults.update(overrides)
        variant = VariantRecord(**defaults)
        self.gateway.add_variant(variant, list(option_ids))
        return variant

    def stock(self, stock_id, variant_id, quantity, quick=False, **overrides):
        stock = StockRecord(id=stock_id, product_variant_id=variant_id, quantity=quantity, quick=quick, **overrides)
        self.gateway.add_stock(stock)
        return stock

    def category(self, category_id, parent_id=None, name=None, slug=None, **overrides):
        category = CategoryRecord(
            id=category_id,
            parent_id=parent_id,
            name=name or f"Category {category_id}",
            slug=slug or f"category-{category_id}",
            **overrides,
        )
        self.gateway.add_category(category)
        return category

    def categorize(self, product_id, *category_ids):
        self.gateway.product_categories[product_id] = list(category_ids)

    def attachment(self, attachment_id, file=None, seq=0, mimetype="image/jpeg"):
        attachment = AttachmentRecord(id=attachment_id, mimetype=mimetype, file=file or f"{attachment_id}.jpg", seq=seq)
        self.gateway.add_attachment(attachment)
        return attachment


@pytest.fixture()
def seed(gateway):
    return CatalogSeeder(gateway)
