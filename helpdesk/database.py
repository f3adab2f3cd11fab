"""Database configuration and session management.

Exports:
- Base: declarative base for models
- engine: SQLAlchemy engine
- SessionLocal: session factory
- get_db: FastAPI dependency that yields a DB session
- init_db(): helper to create tables (calls Base.metadata.create_all)

Behavior:
- Reads the URL from `settings.database_url` (falls back to a local SQLite file).
- SQLite connections get `check_same_thread=False` and foreign keys switched on
  so ticket rows cascade when a user is deleted.
"""

from __future__ import annotations

import logging
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from helpdesk.config import settings

logger = logging.getLogger(__name__)

DATABASE_URL: str = settings.database_url


def make_engine(url: str) -> Engine:
    """Build an engine for `url`, applying the SQLite specific options."""
    if url.startswith("sqlite"):
        new_engine = create_engine(url, connect_args={"check_same_thread": False}, future=True)

        @event.listens_for(new_engine, "connect")
        def _enable_sqlite_fks(dbapi_connection, _record):  # pragma: no cover - driver hook
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return new_engine
    return create_engine(url, future=True)


engine = make_engine(DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, class_=Session)

# Declarative base for models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Yield a SQLAlchemy DB session for FastAPI dependencies.

    Usage:
        def endpoint(db: Session = Depends(get_db)):
            ...
    """
    db: Optional[Session] = None
    try:
        db = SessionLocal()
        yield db
    finally:
        if db is not None:
            db.close()


def init_db() -> None:
    """Create all tables for the registered models."""
    try:
        # Import models so they are registered on Base.metadata
        import helpdesk.models  # noqa: F401

        logger.info("Creating database tables (if not exists)")
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized")
    except Exception as exc:
        logger.exception("Failed to initialize database: %s", exc)
        raise


__all__ = ["Base", "engine", "make_engine", "SessionLocal", "get_db", "init_db"]
