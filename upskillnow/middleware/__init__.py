"""Middleware modules for UpSkillNow Backend"""

from .access_gate import AccessGateMiddleware
from .cors import setup_cors
from .logging_middleware import LoggingMiddleware
from .rate_limit import add_rate_limiting
from .request_id import RequestIDMiddleware
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "AccessGateMiddleware",
    "setup_cors",
    "add_rate_limiting",
    "SecurityHeadersMiddleware",
    "RequestIDMiddleware",
    "LoggingMiddleware",
]
