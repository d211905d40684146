from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from app.application.interfaces import IImageDownloader
from app.core.config import settings
from app.core.exceptions import DownloadError
from app.core.pyd_schemas import ImagePayload

logger = logging.getLogger(__name__)


class AiohttpImageDownloader(IImageDownloader):
    """Download an image into memory with aiohttp.

    The response is never written to disk; it is transcoded and sent as-is.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = float(timeout if timeout is not None else settings.download_timeout)

    async def download(self, url: str) -> ImagePayload:
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url) as response:
                    if not 200 <= response.status < 300:
                        raise DownloadError(
                            f"Failed to download image: {response.status} {response.reason or ''}".rstrip(),
                            url=url,
                            status=response.status,
                        )
                    content = await response.read()
                    content_type = (
                        response.headers.get("Content-Type")
                        or settings.download_default_content_type
                    )
        except DownloadError:
            raise
        except aiohttp.ClientError as e:
            logger.error("Failed to download %s: %s", url, str(e))
            raise DownloadError(f"Failed to download {url}: {e}", url=url) from e
        except asyncio.TimeoutError as e:
            logger.error("Timed out downloading %s", url)
            raise DownloadError(f"Timed out downloading {url}", url=url) from e

        logger.debug("✅ Downloaded %s (%d bytes)", url, len(content))
        return ImagePayload(content=content, content_type=content_type)
