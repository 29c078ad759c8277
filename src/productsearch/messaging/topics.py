"""Event bus topics for reindex signals."""

PRODUCT_UPDATED = "nugu.product.updated"
PRODUCT_DELETED = "nugu.product.deleted"
SELLER_UPDATED = "nugu.seller.updated"
SELLER_DELETED = "nugu.seller.deleted"


def message_key(entity_id: int) -> str:
    return str(entity_id)


def id_payload(entity_id: int) -> dict:
    return {"id": entity_id}
