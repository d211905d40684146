import asyncio
from types import SimpleNamespace

from app.application.interfaces import IImageFetchAdapters
from app.application.pipeline.image.viewer_extractor import ViewerExtractor
from app.infrastructure.adapters import AiohttpImageDownloader, PillowJpegTranscoder
from app.infrastructure.adapters.bundles.image import get_image_fetch_adapter_bundle


def test_bundle_shares_session_page_and_lock(fake_page):
    session = SimpleNamespace(page=fake_page, lock=asyncio.Lock())

    adapters = get_image_fetch_adapter_bundle(session)

    assert isinstance(adapters, IImageFetchAdapters)
    assert adapters.page is fake_page
    assert adapters.page_lock is session.lock
    assert isinstance(adapters.extractor, ViewerExtractor)
    assert isinstance(adapters.downloader, AiohttpImageDownloader)
    assert isinstance(adapters.transcoder, PillowJpegTranscoder)
