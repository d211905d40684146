from __future__ import annotations

from typing import Protocol

from app.core.pyd_schemas import ImagePayload


class IImageDownloader(Protocol):
    """Fetches image bytes from the origin that hosts them."""

    async def download(self, url: str) -> ImagePayload:
        """Return the body and declared content type; raise DownloadError on failure."""
        ...
