"""
UpSkillNow Backend
Learning management API: authentication, courses, notes, quizzes and leaderboards
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from upskillnow.api.api import api_router
from upskillnow.core.config import settings
from upskillnow.core.database import Database
from upskillnow.core.exceptions import register_exception_handlers
from upskillnow.core.logging import setup_logging
from upskillnow.db.redis import cache
from upskillnow.middleware import (
    AccessGateMiddleware,
    LoggingMiddleware,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    add_rate_limiting,
    setup_cors,
)

logger = logging.getLogger(__name__)


def init_sentry() -> None:
    """Initialize Sentry if DSN is provided"""
    if not settings.SENTRY_DSN:
        return
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=1.0 if settings.DEBUG else 0.1,
        environment=settings.ENVIRONMENT,
        send_default_pii=False,
    )
    logger.info("Sentry initialized")


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """
    Build the application

    Args:
        database_url: Overrides the configured database, mainly for tests

    Returns:
        Configured FastAPI application
    """
    setup_logging()
    init_sentry()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

        database = Database(database_url or settings.get_database_url())
        database.connect()
        app.state.database = database

        await cache.connect()

        yield

        logger.info("Shutting down application")
        await cache.disconnect()
        database.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        openapi_url="/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    # Added innermost first: the access gate runs last, CORS first
    app.add_middleware(AccessGateMiddleware)
    add_rate_limiting(app)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    setup_cors(app)

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint"""
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "description": settings.APP_DESCRIPTION,
            "docs": "/docs",
            "health": f"{settings.API_PREFIX}/health",
        }

    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "upskillnow.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
