"""
Request ID middleware for UpSkillNow Backend
Adds unique request ID for tracing and debugging
"""

import logging
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add unique request ID to each request
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse the caller's ID so traces line up across services
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        logger.debug(f"Processing request {request_id}: {request.method} {request.url.path}")

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
