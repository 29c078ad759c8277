"""Order statistics, related products and option stages."""

from productsearch.assembly.chain import Outcome, Proceed, overlap
from productsearch.assembly.reader import SourceReader
from productsearch.document.builder import IndexContext
from productsearch.document.models import BestOrderDocument, OptionDocument


class BestOrderStatsStage:
    name = "best_order_stats"

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        record = await self.reader.fetch(context, self.name, self.reader.gateway.find_best_order, context.product_id)
        if record is not None:
            context.builder.best_order = BestOrderDocument(
                order_count=record.order_count or 0,
                like_count=record.like_count or 0,
                cart_count=record.cart_count or 0,
                view_count=record.view_count or 0,
                review_average=record.review_average,
                review_count=record.review_count or 0,
                total_like_count=record.total_like_count or 0,
                sales_amount=record.sales_amount or 0,
                discounted_price=record.discounted_price or 0.0,
            )
        return await proceed()


class RelatedProductsStage:
    name = "related_products"

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        task = self.reader.launch(self.reader.gateway.find_related_product_ids, context.product_id)
        outcome = await overlap([task], proceed)
        if outcome is Outcome.ABSENT:
            return outcome

        context.builder.related_product_ids = list(await self.reader.collect(context, self.name, task))
        return outcome


class OptionsStage:
    name = "options"

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        task = self.reader.launch(self.reader.gateway.find_options, context.product_id)
        outcome = await overlap([task], proceed)
        if outcome is Outcome.ABSENT:
            return outcome

        options = await self.reader.collect(context, self.name, task)
        context.builder.options = [
            OptionDocument(
                id=option.id,
                name=option.name,
                value=option.value,
                hexcode=option.hexcode,
                search_name=option.search_name,
                model=option.model,
                name_seq=option.name_seq,
                value_seq=option.value_seq,
            )
            for option in options
        ]
        return outcome
