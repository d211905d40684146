from __future__ import annotations

import asyncio
import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from app.application.interfaces import IImageTranscoder
from app.core.config import settings
from app.core.exceptions import TranscodeError
from app.core.pyd_schemas import ImagePayload

logger = logging.getLogger(__name__)

JPEG_CONTENT_TYPE = "image/jpeg"


def encode_jpeg(content: bytes, *, quality: int = 80, progressive: bool = True) -> bytes:
    """Decode any Pillow-readable image and encode it as JPEG.

    Alpha is flattened onto white; animated sources keep their first frame.
    """
    with Image.open(io.BytesIO(content)) as img:
        img.load()
        if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
            rgba = img.convert("RGBA")
            rgb = Image.new("RGB", rgba.size, (255, 255, 255))
            rgb.paste(rgba, mask=rgba.getchannel("A"))
        else:
            rgb = img.convert("RGB")

    out = io.BytesIO()
    rgb.save(out, format="JPEG", quality=quality, progressive=progressive)
    return out.getvalue()


class PillowJpegTranscoder(IImageTranscoder):
    def __init__(self, quality: Optional[int] = None, progressive: Optional[bool] = None):
        self.quality = int(quality if quality is not None else settings.jpeg_quality)
        self.progressive = bool(
            progressive if progressive is not None else settings.jpeg_progressive
        )

    async def transcode(self, payload: ImagePayload) -> ImagePayload:
        def _run() -> bytes:
            return encode_jpeg(
                payload.content, quality=self.quality, progressive=self.progressive
            )

        try:
            content = await asyncio.to_thread(_run)
        except (UnidentifiedImageError, OSError, ValueError, SyntaxError, EOFError) as e:
            logger.error("Failed to transcode %s image: %s", payload.content_type, e)
            raise TranscodeError(str(e), content_type=payload.content_type) from e

        logger.debug(
            "Transcoded %d bytes of %s into %d bytes of JPEG",
            payload.size,
            payload.content_type,
            len(content),
        )
        return ImagePayload(content=content, content_type=JPEG_CONTENT_TYPE)
