"""
Database configuration and session management
The engine is owned by a Database handle created once per application
"""

import logging
import time
from typing import Generator, Optional

import sentry_sdk
from fastapi import Request
from sqlalchemy import create_engine, event, pool, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from upskillnow.core.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for models"""


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores ON DELETE clauses unless foreign keys are switched on per connection"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Lifecycle-managed database handle

    Acquired once in the application lifespan and stored on app.state;
    request handlers get sessions from it through get_db().
    """

    def __init__(self, url: str):
        self.url = url
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    def _create_engine(self) -> Engine:
        if self.url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}, "echo": False}
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                # A single shared connection keeps the in-memory database alive
                kwargs["poolclass"] = pool.StaticPool
            engine = create_engine(self.url, **kwargs)
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
            return engine

        return create_engine(
            self.url,
            poolclass=pool.QueuePool,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
            echo=settings.DEBUG,
        )

    def connect(self) -> None:
        """Create the engine, create tables and test the connection"""
        if self.engine is not None:
            return

        try:
            # Import all models here to ensure they're registered
            from upskillnow import models  # noqa: F401

            self.engine = self._create_engine()
            self._session_factory = sessionmaker(
                autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False
            )
            Base.metadata.create_all(bind=self.engine)

            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection successful")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            if settings.SENTRY_DSN:
                sentry_sdk.capture_exception(e)
            raise

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            self._session_factory = None
            logger.info("Database connections closed")

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        return self._session_factory()

    def check_connection(self) -> dict:
        """Check database connection health"""
        start_time = time.time()
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {"status": "healthy", "response_time": round(time.time() - start_time, 4)}
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {"status": "unhealthy", "error": str(e)}


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency to get database session
    Ensures proper cleanup after request
    """
    db = request.app.state.database.session()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.error(f"Database error occurred: {e}")
        db.rollback()
        if settings.SENTRY_DSN:
            sentry_sdk.capture_exception(e)
        raise
    finally:
        db.close()
