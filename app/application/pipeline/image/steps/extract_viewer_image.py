from __future__ import annotations

import logging

from app.application.interfaces import IBrowserPage, IViewerExtractor
from app.application.pipeline.base import PipelineContext, BaseStep
from app.core.exceptions import NoResultFound

logger = logging.getLogger(__name__)


class ExtractViewerImageStep(BaseStep):
    """Output: image_ref (ExtractedImageRef)"""

    name = "extract_viewer_image"
    required_keys = ["query"]

    def __init__(self, page: IBrowserPage, extractor: IViewerExtractor):
        self.page = page
        self.extractor = extractor

    async def run(self, context: PipelineContext) -> None:  # type: ignore[override]
        image_ref = await self.extractor.extract(self.page)
        if image_ref is None:
            raise NoResultFound(query=context.get("query"))
        context.set("image_ref", image_ref)
