from __future__ import annotations

from types import SimpleNamespace

from app.application.interfaces import IBrowserSession, IImageFetchAdapters
from app.application.pipeline.image.viewer_extractor import ViewerExtractor
from app.infrastructure.adapters import AiohttpImageDownloader, PillowJpegTranscoder


def get_image_fetch_adapter_bundle(session: IBrowserSession) -> IImageFetchAdapters:
    """Assemble the adapters for one request around the shared browser session."""
    return SimpleNamespace(
        page=session.page,
        page_lock=session.lock,
        extractor=ViewerExtractor(),
        downloader=AiohttpImageDownloader(),
        transcoder=PillowJpegTranscoder(),
    )
