"""Variant and stock stages.

Stock is the one stage that rewrites another stage's output: it merges
quick-delivery availability into the variants the Variants stage placed on
the builder, so it must stay registered after Variants.
"""

from productsearch.assembly.chain import Outcome, Proceed, overlap
from productsearch.assembly.reader import SourceReader
from productsearch.assembly.values import parse_json
from productsearch.document.builder import IndexContext, ProductDocumentBuilder
from productsearch.document.models import StockDocument, VariantDocument
from productsearch.source.port import StockRecord, VariantRecord


def is_sold_out(variant: VariantRecord) -> bool:
    return bool(variant.use_inventory) and (variant.quantity or 0) <= 0 and (variant.safety_quantity or 0) <= 0


class VariantsStage:
    name = "variants"

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        builder = context.builder
        gateway = self.reader.gateway

        variants = await self.reader.fetch(context, self.name, gateway.find_variants, builder.id)
        live = [variant for variant in variants if variant.deleted is None]
        option_ids = {}
        if live:
            option_ids = await self.reader.fetch(
                context, self.name, gateway.find_variant_option_ids, [variant.id for variant in live]
            )

        documents = []
        for variant in live:
            ids = option_ids.get(variant.id)
            if not ids:
                continue
            additional_price = variant.additional_price or 0.0
            documents.append(
                VariantDocument(
                    id=variant.id,
                    code=variant.code,
                    use_inventory=bool(variant.use_inventory),
                    display_soldout=bool(variant.display_soldout),
                    inventory_type=variant.inventory_type,
                    quantity_check_type=variant.quantity_check_type,
                    quantity=variant.quantity or 0,
                    safety_quantity=variant.safety_quantity or 0,
                    barcode=variant.barcode,
                    external_barcode=variant.external_barcode,
                    deleted=variant.deleted,
                    option_ids=list(ids),
                    options=parse_json(variant.options, product_id=builder.id, variant_id=variant.id),
                    additional_price=additional_price,
                    price=builder.price + additional_price,
                    display=variant.display,
                    selling=variant.selling,
                    sold_out=is_sold_out(variant),
                )
            )

        builder.variants = documents
        return await proceed()


class StockStage:
    """Attaches stock rows and folds quick-delivery stock into variants."""

    name = "stock"

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        builder = context.builder
        if not builder.variants:
            return await proceed()

        task = self.reader.launch(self.reader.gateway.find_stocks, [variant.id for variant in builder.variants])
        outcome = await overlap([task], proceed)
        if outcome is Outcome.ABSENT:
            return outcome

        stocks = await self.reader.collect(context, self.name, task)
        apply_stock(builder, stocks)
        return outcome


def apply_stock(builder: ProductDocumentBuilder, stocks: list[StockRecord]) -> None:
    # Rewrites builder.variants in place of the Variants stage output;
    # relies on Variants having run earlier in the chain.
    variants = {variant.id: variant for variant in builder.variants}
    for stock in stocks:
        if stock.quick and stock.quantity > 0:
            builder.express = True
            variant = variants.get(stock.product_variant_id)
            if variant is not None:
                variants[variant.id] = variant.model_copy(
                    update={
                        "express": True,
                        "sold_out": False,
                        "available_stock_quantities": variant.available_stock_quantities + stock.quantity,
                    }
                )
        builder.stock.append(
            StockDocument(
                id=stock.id,
                product_variant_id=stock.product_variant_id,
                quantity=stock.quantity,
                warehouse_id=stock.warehouse_id,
                warehouse_name=stock.warehouse_name,
                retail_store_name=stock.retail_store_name,
                is_quick_delivery=stock.quick,
            )
        )
    builder.variants = [variants[variant.id] for variant in builder.variants]
