"""Engine and session factory for the webook account database."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from webook.core.config import get_settings

Base = declarative_base()


@lru_cache
def get_engine():
    url = (get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set; webook keeps user accounts in a SQL database.")
    return create_engine(url, future=True, pool_pre_ping=True)


@lru_cache
def _get_sessionmaker():
    # Rows returned by the DAO outlive their session, so commits must not expire them.
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False, future=True)


@contextmanager
def get_session() -> Session:
    """Yield a session that is always closed; callers commit or roll back."""
    session: Session = _get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()
