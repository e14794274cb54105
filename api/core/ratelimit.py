"""Rate limiting configuration using slowapi.

Only the image endpoint is limited; it is the one route that can spend CPU
on a cache miss. Counters live in process memory, so each replica keeps
its own.
"""

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from core.config import get_settings
from core.logger import get_logger

logger = get_logger(__name__)

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
    key_prefix="certshare:",
)


def image_rate_limit() -> str:
    """Resolved per request so tests can override IMAGE_RATE_LIMIT."""
    return get_settings().image_rate_limit


def rate_limit_exceeded_handler(request: Request, exc: Exception) -> Response:
    """Custom handler for rate limit exceeded errors."""
    detail = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    logger.warning(
        "ratelimit.exceeded",
        client=get_remote_address(request),
        path=request.url.path,
        limit=detail,
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please slow down.",
            "retry_after": detail,
        },
        headers={"Retry-After": str(getattr(exc, "retry_after", 60))},
    )
