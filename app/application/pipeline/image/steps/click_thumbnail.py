from __future__ import annotations

import logging

from app.application.interfaces import IBrowserPage
from app.application.pipeline.base import PipelineContext, BaseStep
from app.core.config import settings
from app.core.exceptions import UpstreamInteractionError

logger = logging.getLogger(__name__)


class ClickThumbnailStep(BaseStep):
    """Open the viewer overlay by clicking the first result with a landing page."""

    name = "click_thumbnail"
    required_keys = ["search_url"]

    def __init__(self, page: IBrowserPage):
        self.page = page

    async def run(self, context: PipelineContext) -> None:  # type: ignore[override]
        selector = settings.thumbnail_selector
        try:
            logger.info("Waiting for image thumbnails...")
            await self.page.wait_for_selector(selector, timeout=settings.thumbnail_timeout)

            logger.info("Clicking on first image thumbnail...")
            await self.page.click(selector)
        except Exception as e:  # noqa: BLE001
            logger.error(
                "Failed to click on image or load viewer (client=%s): %s",
                context.client_id,
                e,
            )
            raise UpstreamInteractionError(str(e), phase=self.name) from e
