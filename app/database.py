"""
Database engine, session factory and declarative base.

The engine is built once from ``DATABASE_URL``.  SQLite URLs (used by the
test suite and for quick local runs) get a ``StaticPool`` and
``check_same_thread=False`` so that one in-memory database is shared by
every session of the process.
"""

from __future__ import annotations

import uuid
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings


settings = get_settings()


def _build_engine(url: str):
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


engine = _build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

Base = declarative_base()


def generate_uuid() -> str:
    """Primary-key default: opaque UUID4 string."""
    return str(uuid.uuid4())


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session that is always closed.

    Uncommitted work is discarded on close, so a service that raises before
    ``commit()`` leaves no partial writes behind.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
