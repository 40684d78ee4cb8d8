"""
Security headers middleware for UpSkillNow Backend
Adds security headers to all responses
"""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from upskillnow.core.config import settings

BASE_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=(), payment=()",
}

HSTS_VALUE = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to responses
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        if settings.SECURITY_HEADERS_ENABLED:
            for name, value in BASE_HEADERS.items():
                response.headers.setdefault(name, value)

            # Production is served over TLS
            if settings.is_production():
                response.headers["Strict-Transport-Security"] = HSTS_VALUE

        return response
