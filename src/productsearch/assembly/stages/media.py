"""Image stages: primary image, gallery and size-guide image."""

from productsearch.assembly.chain import Outcome, Proceed, overlap
from productsearch.assembly.reader import SourceReader
from productsearch.document.builder import IndexContext
from productsearch.document.models import AttachmentDocument, GuideImageDocument
from productsearch.source.port import AttachmentRecord


def attachment_document(record: AttachmentRecord) -> AttachmentDocument:
    return AttachmentDocument(id=record.id, mime_type=record.mimetype, file=record.file, seq=record.seq)


class PrimaryImageStage:
    name = "primary_image"

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        builder = context.builder
        if builder.image_id is not None:
            attachments = await self.reader.fetch(
                context, self.name, self.reader.gateway.find_attachments, [builder.image_id]
            )
            if attachments:
                builder.image = attachment_document(attachments[0])
        return await proceed()


class ImageGalleryStage:
    name = "image_gallery"

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        task = self.reader.launch(self.reader.gateway.find_product_images, context.product_id)
        outcome = await overlap([task], proceed)
        if outcome is Outcome.ABSENT:
            return outcome

        attachments = await self.reader.collect(context, self.name, task)
        context.builder.images = [attachment.file for attachment in attachments if attachment.file]
        return outcome


class GuideImageStage:
    name = "guide_image"

    def __init__(self, reader: SourceReader) -> None:
        self.reader = reader

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome:
        guide_image_id = context.builder.guide_image_id
        if guide_image_id is None:
            return await proceed()

        task = self.reader.launch(self.reader.gateway.find_guide_image, guide_image_id)
        outcome = await overlap([task], proceed)
        if outcome is Outcome.ABSENT:
            return outcome

        record = await self.reader.collect(context, self.name, task)
        if record is not None:
            context.builder.guide_image = GuideImageDocument(
                id=record.id,
                name=record.name,
                image=attachment_document(record.image) if record.image else None,
            )
        return outcome
