from .browser_playwright import PlaywrightBrowserSession, PlaywrightPage
from .image_downloader_aiohttp import AiohttpImageDownloader
from .transcoder_pillow import PillowJpegTranscoder

__all__ = [
    "PlaywrightBrowserSession",
    "PlaywrightPage",
    "AiohttpImageDownloader",
    "PillowJpegTranscoder",
]
