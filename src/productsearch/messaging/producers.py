"""Typed producers for product and seller signals."""

from productsearch.messaging.port import EventBus
from productsearch.messaging.topics import (
    PRODUCT_DELETED,
    PRODUCT_UPDATED,
    SELLER_DELETED,
    SELLER_UPDATED,
    id_payload,
    message_key,
)


class ProductEventProducer:
    def __init__(self, bus: EventBus) -> None:
        self.bus = bus

    def send_updated(self, product_id: int) -> None:
        self.bus.publish(PRODUCT_UPDATED, message_key(product_id), id_payload(product_id))

    def send_deleted(self, product_id: int) -> None:
        self.bus.publish(PRODUCT_DELETED, message_key(product_id), id_payload(product_id))


class SellerEventProducer:
    def __init__(self, bus: EventBus) -> None:
        self.bus = bus

    def send_updated(self, seller_id: int) -> None:
        self.bus.publish(SELLER_UPDATED, message_key(seller_id), id_payload(seller_id))

    def send_deleted(self, seller_id: int) -> None:
        self.bus.publish(SELLER_DELETED, message_key(seller_id), id_payload(seller_id))
