"""Rate limiting configuration using slowapi.

SCALABILITY NOTES:
- Production with several workers MUST use Redis:
  set RATELIMIT_STORAGE_URI="redis://host:port/db"
- memory:// keeps separate counters per process
"""

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import get_settings
from core.errors import error_response
from core.logger import get_logger

logger = get_logger(__name__)

settings = get_settings()

_using_redis = settings.ratelimit_storage_uri.startswith("redis://")

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["100/minute"],
    storage_uri=settings.ratelimit_storage_uri,
    # Fall back to memory when Redis is temporarily unavailable
    in_memory_fallback_enabled=_using_redis,
    key_prefix="prsk:",
)


def rate_limit_exceeded_handler(request: Request, exc: Exception) -> Response:
    """Render RateLimitExceeded in the standard error envelope."""
    detail = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    logger.warning(
        "ratelimit.exceeded",
        client=get_remote_address(request),
        path=request.url.path,
        limit=detail,
    )
    return error_response(
        429,
        "Rate limit exceeded. Please slow down.",
        headers={"Retry-After": str(getattr(exc, "retry_after", 60))},
    )


READ_LIMIT = "60/minute"

WRITE_LIMIT = "30/minute"

HEALTH_LIMIT = "30/minute"
