"""Category, display-group and label stages."""

from productsearch.assembly.chain import Outcome, Proceed, overlap
from productsearch.assembly.reader import SourceReader
from productsearch.category.service import CategoryService
from productsearch.document.builder import IndexContext
from productsearch.document.models import DisplayGroupDocument

ORIGINAL_CATEGORY_NAME = "original"
SHOES_CATEGORY_NAME = "shoes"


class CategoriesStage:
    name = "categories"

    def __init__(self, reader: SourceReader, category_service: CategoryService) -> None:
        self.reader = reader
        self.category_service = category_service

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        builder = context.builder
        category_ids = await self.reader.fetch(context, self.name, self.reader.gateway.find_category_ids, builder.id)
        if category_ids:
            categories = await self.reader.fetch(
                context, self.name, self.category_service.get_with_ancestors, category_ids
            )
            builder.categories = [category.to_document() for category in categories]
            names = {(category.name or "").lower() for category in categories}
            builder.is_original = ORIGINAL_CATEGORY_NAME in names
            builder.has_shoe_category = SHOES_CATEGORY_NAME in names
        return await proceed()


class DisplayGroupsStage:
    name = "display_groups"

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        builder = context.builder
        memberships = await self.reader.fetch(context, self.name, self.reader.gateway.find_display_groups, builder.id)
        ordered = sorted(memberships, key=lambda m: (m.group_seq, m.group_id))
        builder.display_group = [DisplayGroupDocument(id=m.group_id, product_seq=m.product_seq) for m in ordered]
        return await proceed()


class LabelsStage:
    name = "labels"

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        task = self.reader.launch(self.reader.gateway.find_icon_names, context.product_id)
        outcome = await overlap([task], proceed)
        if outcome is Outcome.ABSENT:
            return outcome

        names = await self.reader.collect(context, self.name, task)
        context.builder.label = [name for name in names if name is not None]
        return outcome
