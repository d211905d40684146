import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Awaitable, Callable, Optional

from fastapi import FastAPI
import uvicorn
from contextlib import asynccontextmanager
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.application.interfaces import IBrowserSession
from app.core.config import settings
from app.core.exceptions import (
    ImageFetchError,
    general_exception_handler,
    http_exception_handler,
    image_fetch_exception_handler,
)
from app.core.middleware import RequestLoggingMiddleware
from app.infrastructure.adapters import PlaywrightBrowserSession
from app.presentation.api.routers import image


# Configure logging: console, plus a rotating file when log_file is set
log_handlers = [logging.StreamHandler()]
if settings.log_file:
    os.makedirs(os.path.dirname(settings.log_file) or ".", exist_ok=True)
    log_handlers.append(
        RotatingFileHandler(
            settings.log_file, maxBytes=5 * 1024 * 1024, backupCount=2, encoding="utf-8"
        )
    )
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format=settings.log_format,
    datefmt=settings.log_date_format,
    handlers=log_handlers,
)

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Awaitable[IBrowserSession]]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared browser session on startup and close it on shutdown"""
    logger.info("Starting Image Fetch API...")
    app.state.browser_session = await app.state.session_factory()
    logger.info("Server ready on port %s", settings.port)
    try:
        yield
    finally:
        logger.info("Received shutdown signal, closing browser...")
        await app.state.browser_session.close()


def create_application(*, session_factory: Optional[SessionFactory] = None) -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
        # GET / is the only route the service exposes
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.session_factory = session_factory or PlaywrightBrowserSession.launch

    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(ImageFetchError, image_fetch_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(image.router)

    return app


# Create application instance
app = create_application()

if __name__ == "__main__":
    uvicorn.run(
        "app.presentation.main:app",
        host=settings.host,
        port=settings.port,
    )
