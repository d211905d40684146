from __future__ import annotations

import logging
from typing import Optional

from app.application.interfaces import IBrowserPage
from app.application.pipeline.base import PipelineContext, BaseStep
from app.core.config import settings
from app.core.exceptions import UpstreamInteractionError
from app.core.pyd_schemas import SearchOptions
from utils.search_url import build_image_search_url

logger = logging.getLogger(__name__)


def default_search_options() -> SearchOptions:
    return SearchOptions(
        size=settings.search_default_size,
        aspect=settings.search_default_aspect,
        color=settings.search_default_color,
    )


class NavigateSearchStep(BaseStep):
    name = "navigate_search"
    required_keys = ["query"]

    def __init__(self, page: IBrowserPage, options: Optional[SearchOptions] = None):
        self.page = page
        self.options = options or default_search_options()

    async def run(self, context: PipelineContext) -> None:  # type: ignore[override]
        search_url = build_image_search_url(
            context.get("query"), self.options, base_url=settings.search_base_url
        )
        context.set("search_url", search_url)

        logger.info("Navigating to image search: %s", search_url)
        try:
            await self.page.goto(
                search_url,
                wait_until="networkidle",
                timeout=settings.navigation_timeout,
            )
        except Exception as e:  # noqa: BLE001
            raise UpstreamInteractionError(str(e), phase=self.name) from e
