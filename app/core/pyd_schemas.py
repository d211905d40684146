from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, constr


class ImageSize(str, Enum):
    medium = "m"
    large = "l"
    extra_large = "xl"


class AspectRatio(str, Enum):
    wide = "w"
    tall = "t"
    square = "s"
    high = "h"


class ColorMode(str, Enum):
    color = "color"
    grayscale = "gray"
    transparent = "trans"


class SearchOptions(BaseModel):
    """Image search filters; absent fields are left out of the search URL."""

    model_config = ConfigDict(frozen=True)

    filetypes: Optional[Tuple[constr(strip_whitespace=True, min_length=1), ...]] = None
    size: Optional[ImageSize] = None
    aspect: Optional[AspectRatio] = None
    color: Optional[ColorMode] = None


class ExtractedImageRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_url: constr(min_length=1)


class ImagePayload(BaseModel):
    content: bytes
    content_type: str = "image/jpeg"

    @property
    def size(self) -> int:
        return len(self.content)


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
