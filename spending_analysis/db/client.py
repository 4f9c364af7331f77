"""SQLAlchemy engine/session helpers for the read-only SQL adapters.

Usage
-----
from spending_analysis.db.client import create_session_factory, session_scope

factory = create_session_factory()  # reads DATABASE_URL
with session_scope(factory) as s:
    s.execute(...)

Factories are created explicitly and handed to the adapters; there is no
process-wide engine.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker


def _database_url(override: str | None = None) -> str:
    url = override or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set; cannot initialize database client")
    return url


def create_session_factory(database_url: str | None = None) -> sessionmaker[Session]:
    """Build an engine for ``database_url`` (or ``DATABASE_URL``) and a bound session factory."""

    engine = create_engine(_database_url(database_url), pool_pre_ping=True)
    return sessionmaker(bind=engine, expire_on_commit=False, class_=Session)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a read-only scope: the session is always rolled back and closed."""

    session = factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


__all__ = ["create_session_factory", "session_scope"]
