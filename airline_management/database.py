"""Database helpers for the airline management console."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Tuple

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)

_SQLITE_BUSY_TIMEOUT = 30.0


def _serialize_sqlite_writers(engine: Engine) -> None:
    """Open every SQLite transaction with ``BEGIN IMMEDIATE``.

    pysqlite defers ``BEGIN`` until the first write, so two connections can both
    read and then deadlock on the lock upgrade. Taking the write lock up front
    makes concurrent writers queue on the busy timeout instead.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(
    db_url: str = "sqlite+pysqlite:///airline.db",
    *,
    echo: bool = False,
    connect_args: Dict[str, object] | None = None,
) -> Tuple[Engine, sessionmaker[Session]]:
    """Return an engine/session factory pair for ``db_url``."""

    if db_url.startswith("sqlite"):
        final_connect_args: Dict[str, object] = {
            "check_same_thread": False,
            "timeout": _SQLITE_BUSY_TIMEOUT,
        }
        if connect_args:
            final_connect_args.update(connect_args)
    else:
        final_connect_args = connect_args or {}

    if db_url.endswith(":memory:"):
        engine = create_engine(
            db_url,
            echo=echo,
            connect_args=final_connect_args,
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(
            db_url,
            echo=echo,
            connect_args=final_connect_args,
        )
    if engine.dialect.name == "sqlite":
        _serialize_sqlite_writers(engine)
    logger.debug("Created engine for %s", engine.url.render_as_string(hide_password=True))
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    return engine, session_factory


def init_db(engine: Engine) -> None:
    """Create any missing tables, including the identifier counter table."""

    Base.metadata.create_all(engine)
    logger.info("Schema ensured on %s", engine.url.render_as_string(hide_password=True))


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
