"""
Custom middleware for request logging
"""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.exceptions import get_client_id

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all requests for monitoring"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        logger.info(
            "Request: %s %s from %s",
            request.method,
            request.url.path,
            get_client_id(request),
        )

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            "Response: %d %s in %.3fs",
            response.status_code,
            response.headers.get("content-type", "-"),
            process_time,
        )

        return response
