from __future__ import annotations

import logging

from app.application.interfaces import IBrowserPage
from app.application.pipeline.base import PipelineContext, BaseStep
from app.core.config import settings
from app.core.exceptions import UpstreamInteractionError

logger = logging.getLogger(__name__)


class AwaitResultsStep(BaseStep):
    """Confirm the results grid rendered at least one image."""

    name = "await_results"
    required_keys = ["search_url"]

    def __init__(self, page: IBrowserPage):
        self.page = page

    async def run(self, context: PipelineContext) -> None:  # type: ignore[override]
        logger.info("Waiting for images to load...")
        try:
            await self.page.wait_for_selector(
                settings.results_selector, timeout=settings.results_timeout
            )
        except Exception as e:  # noqa: BLE001
            raise UpstreamInteractionError(str(e), phase=self.name) from e
