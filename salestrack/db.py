"""Database engine + session management.

One process-wide engine and a thread-scoped session registry; the app factory
removes the scoped session at app-context teardown, which also rolls back
anything a failed request left uncommitted.
"""

from __future__ import annotations

from contextlib import suppress

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, scoped_session, sessionmaker

from .models import Base

_engine: Engine | None = None
_SessionFactory: scoped_session[Session] | None = None


def _normalize_url(url: str) -> str:
    # Normalize postgres schemes to ensure SQLAlchemy uses psycopg v3
    if url.startswith("postgres://"):
        return "postgresql+psycopg://" + url[len("postgres://") :]
    if url.startswith("postgresql://") and "+" not in url.split("://", 1)[1].split("@", 1)[0]:
        return "postgresql+psycopg://" + url[len("postgresql://") :]
    return url


def _sqlite_foreign_keys(dbapi_conn, _record) -> None:
    # SQLite ignores REFERENCES unless enabled per connection
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


def init_engine(database_url: str, force: bool = False) -> Engine:
    """Initialize global engine (idempotent) or reinitialize when force=True."""
    global _engine, _SessionFactory
    if _engine is not None and not force:
        return _engine
    if _engine is not None:
        if _SessionFactory is not None:
            with suppress(Exception):  # pragma: no cover
                _SessionFactory.remove()
        _engine.dispose()
    _engine = create_engine(_normalize_url(database_url), future=True, echo=False)
    if _engine.dialect.name == "sqlite":
        event.listen(_engine, "connect", _sqlite_foreign_keys)
    _SessionFactory = scoped_session(
        sessionmaker(bind=_engine, autoflush=False, autocommit=False, expire_on_commit=False)
    )
    return _engine


def get_session() -> Session:  # to be used inside request handlers
    if _SessionFactory is None:
        raise RuntimeError("DB not initialized; call init_engine first")
    return _SessionFactory()


def remove_session(_exc: BaseException | None = None) -> None:
    if _SessionFactory is not None:
        _SessionFactory.remove()


def create_all() -> None:  # tests and scratch databases only; use Alembic (tools/init_db.py) otherwise
    if _engine is None:
        raise RuntimeError("Engine not initialized")
    Base.metadata.create_all(_engine)
