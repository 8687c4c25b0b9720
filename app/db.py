"""Engine, session factory and declarative base shared by models and services."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(database_url: str | None = None) -> Engine:
    """Create an engine for the configured database.

    SQLite (used by the test suite) needs ``check_same_thread=False`` because
    FastAPI runs sync dependencies in a threadpool; an in-memory SQLite URL also
    needs a single shared connection.
    """
    settings = get_settings()
    url = database_url or settings.database_url
    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(
        url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
    )


class DatabaseManager:
    """Owns the engine and session factory for the process."""

    def __init__(self, database_url: str | None = None) -> None:
        self._database_url = database_url
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = build_engine(self._database_url)
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                autocommit=False, autoflush=False, bind=self.engine
            )
        return self._session_factory

    @contextmanager
    def db_session(self) -> Iterator[Session]:
        """Session for code running outside a request (startup, scripts)."""
        db = self.session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def create_all(self) -> None:
        """Create tables directly from model metadata (dev and tests; Alembic in prod)."""
        import app.models  # noqa: F401  register mappers

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ensured")

    def check_health(self) -> bool:
        try:
            with self.db_session() as db:
                db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed: %s", e)
            return False


db_manager = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session that is closed after the request."""
    db = db_manager.session_factory()
    try:
        yield db
    finally:
        db.close()
