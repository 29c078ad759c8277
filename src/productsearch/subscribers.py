"""Broker subscribers that apply reindex signals to the search index.

``product.updated`` reassembles the product and upserts it (or removes it
when it is no longer searchable); ``product.deleted`` removes it outright.
Errors propagate so the Engine's subscription retries the message.
"""

import structlog

from productsearch.domain import productsearch
from productsearch.indexing import get_index_service
from productsearch.messaging.topics import PRODUCT_DELETED, PRODUCT_UPDATED

logger = structlog.get_logger(__name__)


def _product_id(payload: dict) -> int | None:
    try:
        return int(payload["id"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Reindex signal without a usable product id", payload=payload)
        return None


@productsearch.subscriber(stream=PRODUCT_UPDATED)
class ProductUpdatedSubscriber:
    def __call__(self, payload: dict) -> None:
        product_id = _product_id(payload)
        if product_id is None:
            return
        get_index_service().update_product(product_id)


@productsearch.subscriber(stream=PRODUCT_DELETED)
class ProductDeletedSubscriber:
    def __call__(self, payload: dict) -> None:
        product_id = _product_id(payload)
        if product_id is None:
            return
        get_index_service().delete_product(product_id)
