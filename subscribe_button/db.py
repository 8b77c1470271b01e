"""Database abstraction layer for persisting memoized template data."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import Column, DateTime, String, Text, create_engine, delete, select
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

MISSING = object()


class Base(DeclarativeBase):
    pass


class CacheEntryModel(Base):
    """Cached JSON value for one key."""

    __tablename__ = "cache_entries"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))


def init_engine(connection_string: Optional[str]) -> Optional[Engine]:
    """Initialize the database engine."""
    if not connection_string:
        return None

    logger.info("Initializing cache database connection: %s", connection_string)
    url = make_url(connection_string)
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        # one shared connection, otherwise each thread sees its own empty database
        engine = create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(url)
    Base.metadata.create_all(engine)
    return engine


def get_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory for the given engine."""
    return sessionmaker(bind=engine)


def get_entry(session: Session, key: str) -> Any:
    """Return the decoded cached value; check the result with :func:`is_missing`."""
    stmt = select(CacheEntryModel).where(CacheEntryModel.key == key)
    result = session.execute(stmt).scalar_one_or_none()
    if result is None:
        return MISSING
    return json.loads(result.value)


def upsert_entry(session: Session, key: str, value: Any) -> None:
    """Insert or update a cached value."""
    encoded = json.dumps(value, ensure_ascii=False)

    stmt = select(CacheEntryModel).where(CacheEntryModel.key == key)
    existing = session.execute(stmt).scalar_one_or_none()

    if existing:
        existing.value = encoded
        existing.updated_at = datetime.now(timezone.utc)
    else:
        session.add(
            CacheEntryModel(
                key=key,
                value=encoded,
                updated_at=datetime.now(timezone.utc),
            )
        )

    try:
        session.commit()
    except Exception:
        session.rollback()
        raise


def delete_entries(session: Session, key: Optional[str] = None) -> None:
    """Remove cached values for ``key``, or all of them."""
    stmt = delete(CacheEntryModel)
    if key is not None:
        stmt = stmt.where(CacheEntryModel.key == key)
    session.execute(stmt)

    try:
        session.commit()
    except Exception:
        session.rollback()
        raise


def is_missing(value: Any) -> bool:
    return value is MISSING
