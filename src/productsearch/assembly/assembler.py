"""Product document assembler.

Builds one ``ProductDocument`` per product id by running the stage chain,
or returns None when the product must not be in the index.
"""

import asyncio
from collections.abc import Coroutine
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import structlog

from productsearch.assembly.chain import AssemblyChain, Outcome, Stage
from productsearch.assembly.reader import SourceReader
from productsearch.assembly.stages.media import GuideImageStage, ImageGalleryStage, PrimaryImageStage
from productsearch.assembly.stages.merchandising import BestOrderStatsStage, OptionsStage, RelatedProductsStage
from productsearch.assembly.stages.product import BaseRecordStage
from productsearch.assembly.stages.seller import SellerStage
from productsearch.assembly.stages.taxonomy import CategoriesStage, DisplayGroupsStage, LabelsStage
from productsearch.assembly.stages.variants import StockStage, VariantsStage
from productsearch.category.service import CategoryService
from productsearch.document.builder import IndexContext, ProductDocumentBuilder
from productsearch.document.models import ProductDocument
from productsearch.source.port import SourceGateway

logger = structlog.get_logger(__name__)


def default_stages(reader: SourceReader, category_service: CategoryService) -> list[Stage]:
    """The production stage order. Stock must come after Variants."""
    return [
        BaseRecordStage(reader),
        SellerStage(reader),
        VariantsStage(reader),
        CategoriesStage(reader, category_service),
        DisplayGroupsStage(reader),
        PrimaryImageStage(reader),
        ImageGalleryStage(reader),
        LabelsStage(reader),
        GuideImageStage(reader),
        BestOrderStatsStage(reader),
        RelatedProductsStage(reader),
        OptionsStage(reader),
        StockStage(reader),
    ]


class ProductAssembler:
    def __init__(
        self,
        gateway: SourceGateway,
        category_service: CategoryService,
        stage_timeout: float = 10.0,
        stages: list[Stage] | None = None,
    ) -> None:
        self.reader = SourceReader(gateway, stage_timeout)
        self.chain = AssemblyChain(stages if stages is not None else default_stages(self.reader, category_service))

    async def assemble(self, product_id: int) -> ProductDocument | None:
        """Assemble the document for ``product_id``; None means absent."""
        context = IndexContext(builder=ProductDocumentBuilder(id=product_id))
        outcome = await self.chain.run(context)
        if outcome is Outcome.ABSENT:
            logger.debug(
                "Product assembled as absent",
                product_id=product_id,
                reason=context.metadata.get("absent_reason"),
            )
            return None
        return context.builder.build()

    def assemble_sync(self, product_id: int) -> ProductDocument | None:
        return run_sync(self.assemble(product_id))

    def close(self) -> None:
        self.reader.close()


def run_sync(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run a coroutine to completion from synchronous code.

    Subscribers are invoked from inside the Engine's event loop, where
    ``asyncio.run`` is not allowed; there the coroutine gets its own loop on
    a worker thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    with ThreadPoolExecutor(max_workers=1) as executor:
        return executor.submit(asyncio.run, coro).result()
