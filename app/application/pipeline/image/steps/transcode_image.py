from __future__ import annotations

import logging

from app.application.interfaces import IImageTranscoder
from app.application.pipeline.base import PipelineContext, BaseStep
from app.core.exceptions import TranscodeError

logger = logging.getLogger(__name__)


class TranscodeImageStep(BaseStep):
    """Replace the downloaded payload with its JPEG encoding, whatever the source format."""

    name = "transcode_image"
    required_keys = ["payload"]

    def __init__(self, transcoder: IImageTranscoder):
        self.transcoder = transcoder

    async def run(self, context: PipelineContext) -> None:  # type: ignore[override]
        source = context.get("payload")
        logger.info("Converting image to JPG format...")
        try:
            jpeg = await self.transcoder.transcode(source)
        except TranscodeError:
            raise
        except Exception as e:  # noqa: BLE001
            raise TranscodeError(str(e), content_type=source.content_type) from e
        context.set("payload", jpeg)
