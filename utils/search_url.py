"""
Search URL utilities.

Builds image-search URLs for the search engine driven by the browser.
"""

from typing import Optional
from urllib.parse import urlencode

from app.core.pyd_schemas import SearchOptions

DEFAULT_SEARCH_BASE_URL = "https://www.google.com/search"
IMAGE_SEARCH_MODE = "isch"


def build_filetype_clause(filetypes) -> str:
    """
    Join file types into a disjunction understood by the search engine.

    Example:
        >>> build_filetype_clause(["jpg", "png"])
        '(filetype:jpg|filetype:png)'
    """
    return "(" + "|".join(f"filetype:{ft}" for ft in filetypes) + ")"


def build_image_search_url(
    query: str,
    options: Optional[SearchOptions] = None,
    base_url: str = DEFAULT_SEARCH_BASE_URL,
) -> str:
    """
    Build a fully encoded image search URL.

    Args:
        query: Validated, non-empty search text
        options: Optional filters; unset filters are omitted from the URL
        base_url: Search endpoint

    Returns:
        Absolute URL with ``q``, ``tbm`` and any filter parameters
    """
    options = options or SearchOptions()

    query_text = query
    if options.filetypes:
        query_text = f"{query} {build_filetype_clause(options.filetypes)}"

    params = {"q": query_text, "tbm": IMAGE_SEARCH_MODE}
    if options.size:
        params["imgsz"] = options.size.value
    if options.aspect:
        params["imgar"] = options.aspect.value
    if options.color:
        params["imgc"] = options.color.value

    return f"{base_url}?{urlencode(params)}"
