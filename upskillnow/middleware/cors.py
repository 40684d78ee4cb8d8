"""
CORS configuration for UpSkillNow Backend
The session cookie needs credentialed requests from the web and mobile origins
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from upskillnow.core.config import settings


def setup_cors(app: FastAPI) -> None:
    """
    Configure CORS middleware

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
