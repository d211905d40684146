"""
Custom exception handlers and error types
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import traceback
from typing import Optional

from app.core.pyd_schemas import ErrorResponse

logger = logging.getLogger(__name__)

MISSING_QUERY_MESSAGE = "Missing query parameter 'q'"


class ImageFetchError(Exception):
    """Base exception for image fetch failures"""

    status_code: int = 500
    error: str = "Failed to fetch images"

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class ClientInputError(ImageFetchError):
    """Exception raised when the request is missing or has an invalid query"""

    status_code = 400

    def __init__(self, message: str = MISSING_QUERY_MESSAGE, param: Optional[str] = "q"):
        super().__init__(message, "CLIENT_INPUT_ERROR")
        self.param = param
        self.error = message


class NoResultFound(ImageFetchError):
    """Exception raised when the viewer never exposed an external image"""

    status_code = 404
    error = "No full-size image found"

    def __init__(self, message: str = "No full-size image found", query: Optional[str] = None):
        super().__init__(message, "NO_RESULT_FOUND")
        self.query = query


class UpstreamInteractionError(ImageFetchError):
    """Exception raised when navigating, waiting on or clicking the page fails
    Args:
        message (str): Error message from the browser
        phase (Optional[str]): Step that failed, e.g. "navigate" or "click_thumbnail"
    """

    def __init__(self, message: str, phase: Optional[str] = None):
        super().__init__(message, "UPSTREAM_INTERACTION_ERROR")
        self.phase = phase


class DownloadError(ImageFetchError):
    """Exception raised when the image origin fails or answers non-2xx"""

    error = "Failed to download image"

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message, "DOWNLOAD_ERROR")
        self.url = url
        self.status = status


class TranscodeError(ImageFetchError):
    """Exception raised when the downloaded bytes cannot be encoded as JPEG"""

    def __init__(self, message: str, content_type: Optional[str] = None):
        super().__init__(message, "TRANSCODE_ERROR")
        self.content_type = content_type


def get_client_id(request: Request) -> str:
    """Return X-Forwarded-For when present, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded
    return request.client.host if request.client is not None else "unknown"


def _error_response(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


async def image_fetch_exception_handler(request: Request, exc: ImageFetchError):
    """Handle image fetch errors"""
    client_id = get_client_id(request)
    query = request.query_params.get("q")

    if isinstance(exc, ClientInputError):
        logger.warning("Missing query parameter (client=%s, path=%s)", client_id, request.url.path)
        return _error_response(exc.status_code, exc.error)

    if isinstance(exc, NoResultFound):
        logger.warning("No full-size image found (client=%s, query=%r)", client_id, query)
        return _error_response(exc.status_code, exc.error)

    logger.error(
        "Image fetch failed [%s] (client=%s, query=%r): %s",
        exc.error_code,
        client_id,
        query,
        exc.message,
    )
    return _error_response(exc.status_code, exc.error, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes and unsupported methods all answer 404"""
    logger.warning(
        "Route not found (client=%s, path=%s, method=%s)",
        get_client_id(request),
        request.url.path,
        request.method,
    )
    if exc.status_code in (404, 405):
        return _error_response(404, "Not found")
    return _error_response(exc.status_code, str(exc.detail))


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.error(f"Unexpected error: {type(exc).__name__}: {str(exc)}")
    logger.error(f"Traceback: {traceback.format_exc()}")

    return _error_response(500, ImageFetchError.error, str(exc))
