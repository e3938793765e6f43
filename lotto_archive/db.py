"""SQLAlchemy engine + session management.

Read routes use a session-per-request. Ingestion writes never borrow the
request session: each commit opens its own ``sessionmaker.begin()`` block so
a draw becomes visible to other readers only once it is complete.
"""

from __future__ import annotations

import pathlib
from contextlib import contextmanager
from typing import Any, Iterator

from flask import Flask, current_app, g
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lotto_archive.models.base import Base


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_app_engine(database_url: str) -> Engine:
    url = make_url(database_url)

    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, pool_pre_ping=True, future=True)

    kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}, "future": True}
    if url.database in (None, "", ":memory:"):
        # One shared connection, otherwise every checkout sees an empty database.
        kwargs["poolclass"] = StaticPool
    else:
        pathlib.Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(database_url, **kwargs)
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    """Create all ORM tables (no migrations; existing tables are left alone)."""

    # Import models so they register with Base.metadata
    from lotto_archive import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def init_db(app: Flask) -> None:
    """Initialize database engine and per-request sessions."""

    engine = create_app_engine(str(app.config["DATABASE_URL"]))
    session_factory = create_session_factory(engine)
    create_schema(engine)

    app.extensions["engine"] = engine
    app.extensions["session_factory"] = session_factory

    @app.before_request
    def _open_session() -> None:
        g.db = session_factory()  # type: ignore[attr-defined]

    @app.teardown_request
    def _close_session(exc: BaseException | None) -> None:
        session: Session | None = getattr(g, "db", None)
        if session is None:
            return

        try:
            if exc is None:
                session.commit()
            else:
                session.rollback()
        finally:
            session.close()


def get_session() -> Session:
    """Get the current request's SQLAlchemy session."""

    session: Session | None = getattr(g, "db", None)
    if session is None:
        raise RuntimeError("Database session not initialized")
    return session


def get_session_factory() -> sessionmaker[Session]:
    """Session factory of the running app, for code that manages its own transactions."""

    factory = current_app.extensions.get("session_factory")
    if factory is None:
        raise RuntimeError("Database not initialized")
    return factory


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Short-lived read session outside of a request."""

    session = session_factory()
    try:
        yield session
    finally:
        session.close()
