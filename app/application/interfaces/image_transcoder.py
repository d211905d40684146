from __future__ import annotations

from typing import Protocol

from app.core.pyd_schemas import ImagePayload


class IImageTranscoder(Protocol):
    async def transcode(self, payload: ImagePayload) -> ImagePayload:
        """Re-encode any supported image format as JPEG.
        Raise TranscodeError when the bytes cannot be decoded.
        """
        ...
