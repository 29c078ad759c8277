"""Index writer: turns product ids into index upserts and deletes."""

from dataclasses import dataclass, field

import structlog

from productsearch.assembly.assembler import ProductAssembler
from productsearch.errors import IndexWriteError
from productsearch.indexing.port import SearchIndex

logger = structlog.get_logger(__name__)

UPSERTED = "upserted"
DELETED = "deleted"


@dataclass
class BulkIndexResult:
    upserted: list[int] = field(default_factory=list)
    deleted: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "upserted": len(self.upserted),
            "deleted": len(self.deleted),
            "failed": len(self.failed),
            "failed_ids": self.failed,
        }


class ProductIndexService:
    """Keeps one index document per product in line with the source database.

    A product whose assembly comes back absent is removed from the index,
    so the same call serves both "product changed" and "product may no
    longer be searchable".
    """

    def __init__(self, assembler: ProductAssembler, index: SearchIndex):
        self.assembler = assembler
        self.index = index

    async def update_product_async(self, product_id: int) -> str:
        document = await self.assembler.assemble(product_id)
        return self._write(product_id, document)

    def update_product(self, product_id: int) -> str:
        document = self.assembler.assemble_sync(product_id)
        return self._write(product_id, document)

    def _write(self, product_id: int, document) -> str:
        if document is None:
            existed = self.index.delete(product_id)
            logger.info("Product removed from index", product_id=product_id, existed=existed)
            return DELETED

        self.index.upsert(product_id, document.to_index_body())
        logger.info("Product indexed", product_id=product_id)
        return UPSERTED

    def delete_product(self, product_id: int) -> bool:
        existed = self.index.delete(product_id)
        logger.info("Product deleted from index", product_id=product_id, existed=existed)
        return existed

    def bulk_update_products(self, product_ids) -> BulkIndexResult:
        """Index each product independently; one failure does not stop the batch."""
        result = BulkIndexResult()
        for product_id in product_ids:
            try:
                outcome = self.update_product(product_id)
            except IndexWriteError as exc:
                logger.error("Product index write failed", product_id=product_id, error=str(exc))
                result.failed.append(product_id)
                continue
            except Exception as exc:
                logger.exception("Product assembly failed", product_id=product_id, error=str(exc))
                result.failed.append(product_id)
                continue
            (result.upserted if outcome == UPSERTED else result.deleted).append(product_id)

        logger.info(
            "Bulk index completed",
            upserted=len(result.upserted),
            deleted=len(result.deleted),
            failed=len(result.failed),
        )
        return result
