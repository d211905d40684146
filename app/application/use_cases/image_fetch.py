import logging
from typing import Optional

from app.application.interfaces import IImageFetchAdapters
from app.application.pipeline.base import PipelineContext, format_step_timings
from app.application.pipeline.image.builder import build_image_fetch_pipeline
from app.application.pipeline.image.steps.validate_query import ValidateQueryStep
from app.core.config import settings
from app.core.exceptions import (
    ImageFetchError,
    NoResultFound,
    UpstreamInteractionError,
)
from app.core.pyd_schemas import ImagePayload

logger = logging.getLogger(__name__)


class FetchImageUseCase:
    """Turn a search query into JPEG bytes using the shared browser page.

    Validation runs before the page lock is taken, so a bad request never
    waits behind a running search. Everything from navigation to transcoding
    runs under the lock: the page holds one navigation at a time.
    """

    def __init__(
        self,
        adapters: IImageFetchAdapters,
        *,
        reset_page_on_failure: Optional[bool] = None,
    ) -> None:
        self._adapters = adapters
        self._reset_page_on_failure = (
            settings.reset_page_on_failure
            if reset_page_on_failure is None
            else reset_page_on_failure
        )

    async def execute(self, query: Optional[str], *, client_id: str = "unknown") -> ImagePayload:
        ctx = PipelineContext(input={"query": query, "client_id": client_id})
        await ValidateQueryStep()(ctx)

        query = ctx.get("query")
        logger.info(
            "Processing image search request (client=%s, query=%r, request_id=%s)",
            client_id,
            query,
            ctx.get_request_id(),
        )

        async with self._adapters.page_lock:
            try:
                pipeline = build_image_fetch_pipeline(self._adapters)
                result = await pipeline.execute(ctx)
            except ImageFetchError as e:
                await self._after_failure(e)
                raise
            except Exception as e:  # noqa: BLE001
                await self._after_failure(e)
                raise ImageFetchError(str(e)) from e

        payload: ImagePayload = ctx.get("payload")
        logger.info(
            "Image successfully converted to JPG (client=%s, query=%r, size=%d) in %.3fs [%s]",
            client_id,
            query,
            payload.size,
            result["duration"],
            format_step_timings(result),
        )
        return payload

    async def _after_failure(self, error: Exception) -> None:
        # By default the page stays where it failed so it can be inspected.
        if not self._reset_page_on_failure:
            return
        if not isinstance(error, (UpstreamInteractionError, NoResultFound)):
            return
        try:
            logger.info("Resetting page to %s after failure", settings.browser_warmup_url)
            await self._adapters.page.goto(
                settings.browser_warmup_url,
                wait_until="networkidle",
                timeout=settings.navigation_timeout,
            )
        except Exception as e:  # noqa: BLE001
            logger.warning("Page reset failed: %s", e)
