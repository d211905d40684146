from __future__ import annotations

from typing import Optional, Protocol

from app.core.pyd_schemas import ExtractedImageRef
from .browser_page import IBrowserPage


class IViewerExtractor(Protocol):
    async def extract(self, page: IBrowserPage) -> Optional[ExtractedImageRef]:
        """Return the first externally hosted viewer image, or None once retries run out."""
        ...
