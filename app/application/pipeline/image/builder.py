from __future__ import annotations

from typing import Optional

from app.application.interfaces import IImageFetchAdapters
from app.application.pipeline.base import Pipeline, make_logging_middleware
from app.application.pipeline.factory import PipelineFactory
from app.application.pipeline.image.steps.navigate_search import NavigateSearchStep
from app.application.pipeline.image.steps.await_results import AwaitResultsStep
from app.application.pipeline.image.steps.click_thumbnail import ClickThumbnailStep
from app.application.pipeline.image.steps.extract_viewer_image import (
    ExtractViewerImageStep,
)
from app.application.pipeline.image.steps.download_image import DownloadImageStep
from app.application.pipeline.image.steps.transcode_image import TranscodeImageStep
from app.core.pyd_schemas import SearchOptions


def build_image_fetch_pipeline(
    adapters: IImageFetchAdapters,
    *,
    options: Optional[SearchOptions] = None,
    enable_logging_middleware: bool = True,
) -> Pipeline:
    """Navigate → await results → click thumbnail → extract → download → transcode."""

    middlewares = [make_logging_middleware()] if enable_logging_middleware else []
    factory = PipelineFactory(middlewares=middlewares)
    factory.add(NavigateSearchStep(adapters.page, options))
    factory.add(AwaitResultsStep(adapters.page))
    factory.add(ClickThumbnailStep(adapters.page))
    factory.add(ExtractViewerImageStep(adapters.page, adapters.extractor))
    factory.add(DownloadImageStep(adapters.downloader))
    factory.add(TranscodeImageStep(adapters.transcoder))

    return factory.build()
