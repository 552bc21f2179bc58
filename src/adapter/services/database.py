"""Async engine construction

Applies the lock wait bound and transaction behaviour per database dialect.
"""

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession


def build_engine(db_uri: str, lock_timeout_ms: int = 5000, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine

    PostgreSQL: every connection gets lock_timeout, so a blocked
    SELECT ... FOR UPDATE fails with SQLSTATE 55P03 instead of hanging.

    SQLite: row locks do not exist, so every transaction starts with
    BEGIN IMMEDIATE (one writer at a time) and waits at most lock_timeout_ms
    for the database lock. Foreign keys are switched on.

    Args:
        db_uri: SQLAlchemy async URL
        lock_timeout_ms: Maximum lock wait in milliseconds
        echo: Log emitted SQL

    Returns:
        Configured AsyncEngine
    """
    backend = make_url(db_uri).get_backend_name()
    connect_args = {}

    if backend == "postgresql":
        connect_args["server_settings"] = {"lock_timeout": str(lock_timeout_ms)}
    elif backend == "sqlite":
        connect_args["timeout"] = lock_timeout_ms / 1000

    engine = create_async_engine(db_uri, echo=echo, future=True, connect_args=connect_args)

    if backend == "sqlite":
        _enable_sqlite_write_locks(engine)

    return engine


def _enable_sqlite_write_locks(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        # let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
