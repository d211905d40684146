from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from .browser_page import IBrowserPage
from .image_downloader import IImageDownloader
from .image_transcoder import IImageTranscoder
from .viewer_extractor import IViewerExtractor


@runtime_checkable
class IImageFetchAdapters(Protocol):
    page: IBrowserPage
    page_lock: asyncio.Lock
    extractor: IViewerExtractor
    downloader: IImageDownloader
    transcoder: IImageTranscoder
