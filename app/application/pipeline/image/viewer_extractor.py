"""
Locate the full-size image inside the search engine's image viewer.

The viewer mounts asynchronously after a thumbnail click and fills in its
images over several hundred milliseconds, so extraction is a bounded polling
loop rather than a single query.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urlsplit

from app.application.interfaces import IBrowserPage
from app.core.config import settings
from app.core.pyd_schemas import ExtractedImageRef

logger = logging.getLogger(__name__)

# Returns the src of every <img> inside the viewer, in document order,
# or null when the viewer is not in the DOM.
VIEWER_IMAGE_SOURCES_JS = """
(selector) => {
  const viewer = document.querySelector(selector);
  if (!viewer) return null;
  return Array.from(viewer.querySelectorAll("img")).map((img) => img.src);
}
"""


class ExtractionState(str, Enum):
    WAITING_FOR_VIEWER = "waiting_for_viewer"
    SCANNING = "scanning"
    FOUND = "found"
    NOT_FOUND = "not_found"
    TRANSIENT_FAILURE = "transient_failure"


def is_vendor_hosted(url: str, vendor_domains: Iterable[str]) -> bool:
    """True when the URL's hostname ends with one of the vendor domains.

    URLs that cannot be parsed, or have no hostname, are treated as external.
    """
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        return False
    if not hostname:
        return False
    return any(hostname.endswith(domain) for domain in vendor_domains)


def select_external_image(
    sources: Sequence[Optional[str]], vendor_domains: Iterable[str]
) -> Optional[str]:
    """Return the first downloadable source not hosted on a vendor domain.

    Empty sources and inline ``data:`` placeholders are skipped.
    """
    domains = list(vendor_domains)
    for src in sources:
        if not src or src.startswith("data:"):
            continue
        if not is_vendor_hosted(src, domains):
            return src
    return None


class ViewerExtractor:
    """Polls the viewer for its first externally hosted image.

    Each attempt waits for the viewer container, reads all image sources and
    picks the first external one. A missing viewer, a viewer with only vendor
    images, or any page error is a transient failure; only running out of
    attempts yields ``None``.
    """

    def __init__(
        self,
        *,
        max_attempts: Optional[int] = None,
        inter_attempt_delay: Optional[float] = None,
        viewer_timeout: Optional[float] = None,
        viewer_selector: Optional[str] = None,
        vendor_domains: Optional[List[str]] = None,
    ) -> None:
        self.max_attempts = max(
            1, int(max_attempts if max_attempts is not None else settings.extractor_max_attempts)
        )
        self.inter_attempt_delay = float(
            inter_attempt_delay
            if inter_attempt_delay is not None
            else settings.extractor_inter_attempt_delay
        )
        self.viewer_timeout = float(
            viewer_timeout if viewer_timeout is not None else settings.extractor_viewer_timeout
        )
        self.viewer_selector = viewer_selector or settings.viewer_selector
        self.vendor_domains = list(
            vendor_domains if vendor_domains is not None else settings.vendor_domains
        )
        self.state = ExtractionState.WAITING_FOR_VIEWER
        self.attempts = 0

    async def extract(self, page: IBrowserPage) -> Optional[ExtractedImageRef]:
        self.attempts = 0
        for attempt in range(1, self.max_attempts + 1):
            self.attempts = attempt
            src = await self._attempt(page)
            if src:
                self.state = ExtractionState.FOUND
                logger.info("Found non-vendor image URL: %s", src)
                return ExtractedImageRef(source_url=src)

            self.state = ExtractionState.TRANSIENT_FAILURE
            if attempt < self.max_attempts:
                logger.warning(
                    "Attempt %d/%d failed. Retrying in %.1fs...",
                    attempt,
                    self.max_attempts,
                    self.inter_attempt_delay,
                )
                await asyncio.sleep(self.inter_attempt_delay)

        self.state = ExtractionState.NOT_FOUND
        logger.warning("No non-vendor image found after %d attempts", self.max_attempts)
        return None

    async def _attempt(self, page: IBrowserPage) -> Optional[str]:
        self.state = ExtractionState.WAITING_FOR_VIEWER
        try:
            logger.info("Waiting for image viewer to load...")
            await page.wait_for_selector(
                self.viewer_selector, visible=True, timeout=self.viewer_timeout
            )

            self.state = ExtractionState.SCANNING
            sources = await page.evaluate(VIEWER_IMAGE_SOURCES_JS, self.viewer_selector)
        except Exception as e:  # noqa: BLE001
            logger.error("Failed to find viewer or non-vendor image: %s", e)
            return None

        if not sources:
            logger.warning("Viewer has no images yet")
            return None

        src = select_external_image(sources, self.vendor_domains)
        if not src:
            logger.warning("No non-vendor image among %d viewer images", len(sources))
        return src
