"""FastAPI application for the certificate share service."""

from contextlib import asynccontextmanager

import fastapi
from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi.errors import RateLimitExceeded

from core.cache import ImageCache
from core.config import get_settings
from core.errors import StorageError
from core.logger import configure_logging, get_logger
from core.middleware import SecurityHeadersMiddleware
from core.ratelimit import limiter, rate_limit_exceeded_handler
from routes import certificates_router, health_router, pages_router

configure_logging()
logger = get_logger(__name__)


async def storage_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """The participant store could not be read; nothing to recover."""
    logger.error(
        "storage.failed",
        error=str(exc),
        path=request.url.path,
        method=request.method,
    )
    return PlainTextResponse("Internal Server Error", status_code=500)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for unhandled exceptions."""
    logger.exception(
        "unhandled.exception",
        exc_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred. Please try again."},
    )


@asynccontextmanager
async def lifespan(app: fastapi.FastAPI):
    settings = get_settings()
    if not settings.template_image_file.is_file():
        logger.warning(
            "template.missing",
            path=str(settings.template_image_file),
            hint="Certificate images will fail with 500 until it exists",
        )
    logger.info(
        "server.started",
        base_url=settings.base_url_resolved,
        data_file=str(settings.data_file_path),
    )
    yield
    logger.info("server.stopped", **app.state.image_cache.stats())


_settings = get_settings()

app = fastapi.FastAPI(
    title="Certificate Share",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if _settings.debug else None,
    redoc_url=None,
    openapi_url="/openapi.json" if _settings.debug else None,
)

# Rendered PNGs for the life of the process, shared by all requests
app.state.image_cache = ImageCache()

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_exception_handler(StorageError, storage_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(SecurityHeadersMiddleware)

app.include_router(health_router)
app.include_router(certificates_router)
app.include_router(pages_router)
