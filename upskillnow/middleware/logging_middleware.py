"""
Logging middleware for UpSkillNow Backend
Logs every request with its outcome and timing
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from upskillnow.core.config import settings
from upskillnow.core.logging import LoggerFactory

logger = LoggerFactory.get_request_logger()

QUIET_PATHS = ("/api/health",)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all HTTP requests and responses
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Log request and response details

        Args:
            request: Incoming request
            call_next: Next middleware/handler

        Returns:
            Response from next handler
        """
        if request.url.path.startswith(QUIET_PATHS):
            return await call_next(request)

        start_time = time.perf_counter()
        request_id = getattr(request.state, "request_id", "unknown")

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "process_time": round(time.perf_counter() - start_time, 3),
                    "error": str(e),
                },
                exc_info=True,
            )
            raise

        process_time = time.perf_counter() - start_time
        claims = getattr(request.state, "token_claims", None)

        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "process_time": round(process_time, 3),
                "user_id": claims.user_id if claims else None,
                "client": request.client.host if request.client else "unknown",
            },
        )

        if settings.DEBUG:
            response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response
