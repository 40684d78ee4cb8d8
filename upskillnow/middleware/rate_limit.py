"""
Rate limiting for UpSkillNow
Per-client request limit backed by slowapi
"""

from fastapi import FastAPI, Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from upskillnow.core.config import settings
from upskillnow.core.exceptions import create_error_response
from upskillnow.core.logging import LoggerFactory

logger = LoggerFactory.get_security_logger()


def build_limiter() -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        default_limits=[f"{settings.RATE_LIMIT_REQUESTS}/{settings.RATE_LIMIT_PERIOD} seconds"],
        enabled=settings.RATE_LIMIT_ENABLED,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Answer with the usual error envelope instead of slowapi's plain body"""
    # Plain function: SlowAPIMiddleware calls it without awaiting
    logger.warning(
        "Rate limit exceeded",
        extra={"path": request.url.path, "client": get_remote_address(request)},
    )
    return create_error_response(
        request=request,
        status_code=429,
        error_code="RATE_LIMIT_EXCEEDED",
        message="Too many requests. Please try again later.",
    )


def add_rate_limiting(app: FastAPI) -> None:
    """Add rate limiting to application"""
    app.state.limiter = build_limiter()
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
