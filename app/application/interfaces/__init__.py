from .browser_page import IBrowserPage, IBrowserSession
from .image_downloader import IImageDownloader
from .image_transcoder import IImageTranscoder
from .viewer_extractor import IViewerExtractor
from .image_fetch_adapters import IImageFetchAdapters

__all__ = [
    "IBrowserPage",
    "IBrowserSession",
    "IImageDownloader",
    "IImageTranscoder",
    "IViewerExtractor",
    "IImageFetchAdapters",
]
