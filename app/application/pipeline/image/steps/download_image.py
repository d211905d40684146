from __future__ import annotations

import logging

from app.application.interfaces import IImageDownloader
from app.application.pipeline.base import PipelineContext, BaseStep
from app.core.exceptions import DownloadError

logger = logging.getLogger(__name__)


class DownloadImageStep(BaseStep):
    """Input:  image_ref
    Output: payload (ImagePayload as served by the origin)
    """

    name = "download_image"
    required_keys = ["image_ref"]

    def __init__(self, downloader: IImageDownloader):
        self.downloader = downloader

    async def run(self, context: PipelineContext) -> None:  # type: ignore[override]
        url = context.get("image_ref").source_url
        logger.info("Downloading image from source: %s", url)
        try:
            payload = await self.downloader.download(url)
        except DownloadError:
            raise
        except Exception as e:  # noqa: BLE001
            raise DownloadError(str(e), url=url) from e

        logger.info(
            "Downloaded %d bytes (%s) from %s", payload.size, payload.content_type, url
        )
        context.set("payload", payload)
