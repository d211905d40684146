"""
Application configuration using Pydantic Settings
"""

from typing import List, Optional, Union
from pydantic_settings import BaseSettings
from pydantic import field_validator

from app.core.pyd_schemas import AspectRatio, ColorMode, ImageSize

_SEARCH_FILTER_ENUMS = {
    "search_default_size": ImageSize,
    "search_default_aspect": AspectRatio,
    "search_default_color": ColorMode,
}


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # API Settings
    api_title: str = "Image Fetch API"
    api_description: str = "Returns the first full-size image of a web image search as JPEG"
    api_version: str = "1.0.0"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False

    # Browser Settings
    browser_executable_path: str = ""  # empty = let Playwright pick its bundled Chromium
    browser_headless: bool = True
    browser_args: Union[List[str], str] = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
    ]
    browser_viewport_width: int = 1280
    browser_viewport_height: int = 800
    browser_warmup_url: str = "https://www.google.com"

    # Search Settings
    search_base_url: str = "https://www.google.com/search"
    search_default_size: Optional[ImageSize] = ImageSize.large
    search_default_aspect: Optional[AspectRatio] = AspectRatio.wide
    search_default_color: Optional[ColorMode] = ColorMode.color

    # Page interaction timeouts (seconds)
    navigation_timeout: float = 30.0
    results_timeout: float = 10.0
    thumbnail_timeout: float = 5.0

    # Selectors
    results_selector: str = "img"
    thumbnail_selector: str = "div[data-lpage]"
    viewer_selector: str = 'c-wiz[jsdata="deferred-vfe_uviewer_2"]'

    # Viewer Extractor Settings
    extractor_max_attempts: int = 4
    extractor_inter_attempt_delay: float = 1.0
    extractor_viewer_timeout: float = 5.0
    vendor_domains: Union[List[str], str] = [
        "gstatic.com",
        "google.com",
        "googleapis.com",
    ]

    # Leave the page where it failed so it can be inspected; set true to
    # navigate back to browser_warmup_url after a failed browser step.
    reset_page_on_failure: bool = False

    # Download Settings
    download_timeout: int = 30
    download_default_content_type: str = "image/jpeg"

    # Transcode Settings
    jpeg_quality: int = 80
    jpeg_progressive: bool = True

    @field_validator("browser_args", "vendor_domains")
    @classmethod
    def parse_comma_separated(cls, v):
        """Parse a comma-separated string into a list.

        Example:
            >>> parse_comma_separated("gstatic.com, google.com")
            ['gstatic.com', 'google.com']
        """
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator(
        "search_default_size", "search_default_aspect", "search_default_color", mode="before"
    )
    @classmethod
    def parse_search_filter(cls, v, info):
        """Accept a filter by name ("large") or engine code ("l"); empty disables it."""
        if not isinstance(v, str):
            return v
        v = v.strip()
        if not v:
            return None
        enum_cls = _SEARCH_FILTER_ENUMS[info.field_name]
        if v in enum_cls.__members__:
            return enum_cls[v]
        return v

    # Logging Settings
    log_level: str = "INFO"
    log_format: str = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    log_file: str = "data/app.log"  # empty disables the rotating file handler

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def viewport(self) -> dict:
        return {
            "width": self.browser_viewport_width,
            "height": self.browser_viewport_height,
        }


# Global settings instance
settings = Settings()
