"""
Database engine factory for the portfolio ledger.

Builds a SQLAlchemy engine from a URL and creates the schema.
SQLite connections open every transaction with BEGIN IMMEDIATE so that
a ledger read-modify-write cannot interleave with another writer.
"""

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from app.infrastructure.portfolio.tables import metadata

logger = logging.getLogger(__name__)


def _serialize_sqlite_writes(engine: Engine) -> None:
    """Hand transaction control to SQLAlchemy and begin IMMEDIATE."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_ledger_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url`` and ensure the tables exist.

    Args:
        database_url: Any SQLAlchemy URL. ``sqlite://`` gives a private
            in-memory database shared by all sessions of the engine.

    Returns:
        A ready-to-use SQLAlchemy engine.
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
        _serialize_sqlite_writes(engine)
    else:
        engine = create_engine(url, pool_pre_ping=True)

    metadata.create_all(engine)
    logger.info("Ledger database ready (backend=%s).", url.get_backend_name())
    return engine
