"""
Shared test configuration and fakes for the image fetch pipeline.
"""

import asyncio
import io
import logging
from datetime import datetime
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest
from PIL import Image

from app.application.pipeline.image.viewer_extractor import ViewerExtractor
from app.core.config import settings
from app.core.pyd_schemas import ImagePayload
from app.infrastructure.adapters.transcoder_pillow import PillowJpegTranscoder

logger = logging.getLogger(__name__)

EXTERNAL_IMAGE_URL = "https://images.example.org/cars/red-car.png"


def pytest_configure(config):  # pylint: disable=unused-argument
    """Quiet noisy libraries; keep app loggers verbose for diagnosis."""
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("app").setLevel(logging.DEBUG)


@pytest.fixture(autouse=True)
def log_test_name(request):
    """Log test name when test starts and finishes."""
    test_logger = logging.getLogger(request.node.nodeid)
    test_logger.info("🚀 Starting test: %s", request.node.name)
    start_time = datetime.now()

    def log_test_end():
        duration = (datetime.now() - start_time).total_seconds()
        test_logger.info("✅ Test finished after %.2fs", duration)

    request.addfinalizer(log_test_end)


def make_image_bytes(fmt: str = "PNG", mode: str = "RGBA", size=(32, 24)) -> bytes:
    color = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
    if mode == "L":
        color = 128
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format=fmt)
    return buf.getvalue()


class FakePage:
    """In-memory stand-in for the shared browser page.

    - ``viewer_sources``: one entry per extraction attempt; each entry is the
      list of ``img.src`` values in the viewer (the last entry repeats)
    - ``failures``: selector (or "goto"/"click"/"evaluate") -> exception to raise
    - ``viewer_missing_attempts``: number of first viewer waits that time out
    """

    def __init__(
        self,
        viewer_sources: Optional[List[List[Optional[str]]]] = None,
        failures: Optional[Dict[str, Exception]] = None,
        viewer_missing_attempts: int = 0,
    ) -> None:
        self.viewer_sources = viewer_sources if viewer_sources is not None else [[]]
        self.failures = dict(failures or {})
        self.viewer_missing_attempts = viewer_missing_attempts
        self.calls: List[tuple] = []
        self.viewer_waits = 0
        self.evaluations = 0

    def _maybe_fail(self, key: str) -> None:
        if key in self.failures:
            raise self.failures[key]

    async def goto(self, url: str, *, wait_until: str = "networkidle", timeout=None) -> None:
        self.calls.append(("goto", url, wait_until))
        self._maybe_fail("goto")

    async def wait_for_selector(self, selector: str, *, visible: bool = False, timeout=None) -> None:
        self.calls.append(("wait_for_selector", selector, visible, timeout))
        self._maybe_fail(selector)
        if selector == settings.viewer_selector:
            self.viewer_waits += 1
            if self.viewer_waits <= self.viewer_missing_attempts:
                raise TimeoutError(f"Timeout waiting for {selector}")

    async def click(self, selector: str) -> None:
        self.calls.append(("click", selector))
        self._maybe_fail("click")

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self.calls.append(("evaluate", arg))
        self._maybe_fail("evaluate")
        idx = min(self.evaluations, len(self.viewer_sources) - 1)
        self.evaluations += 1
        return self.viewer_sources[idx]

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG", "RGBA")


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage(
        viewer_sources=[
            [
                "https://encrypted-tbn0.gstatic.com/images?q=tbn:abc",
                EXTERNAL_IMAGE_URL,
                "https://other.example.net/second.jpg",
            ]
        ]
    )


@pytest.fixture
def fast_extractor() -> ViewerExtractor:
    return ViewerExtractor(max_attempts=2, inter_attempt_delay=0.0, viewer_timeout=0.01)


@pytest.fixture
def fake_downloader(png_bytes):
    """AsyncMock downloader returning a PNG payload for any URL."""

    class _DL:
        async def download(self, url: str) -> ImagePayload:
            return ImagePayload(content=png_bytes, content_type="image/png")

    dl = _DL()
    dl.download = AsyncMock(side_effect=dl.download)  # type: ignore[method-assign]
    return dl


@pytest.fixture
def fake_adapters(fake_page, fast_extractor, fake_downloader):
    """Adapters bundle with a fake page/downloader and the real Pillow transcoder."""
    return SimpleNamespace(
        page=fake_page,
        page_lock=asyncio.Lock(),
        extractor=fast_extractor,
        downloader=fake_downloader,
        transcoder=PillowJpegTranscoder(),
    )


@pytest.fixture
def page_factory():
    return FakePage


@pytest.fixture
def image_bytes_factory():
    return make_image_bytes


@pytest.fixture
def external_url() -> str:
    return EXTERNAL_IMAGE_URL
