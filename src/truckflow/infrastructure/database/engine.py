"""Database engine setup for SQLite with WAL mode.

The DB is stored at ``{yard_root}/.truckflow/{db_name}``.  WAL mode lets
readers proceed while a writer holds the lock; ``busy_timeout`` bounds
how long a writer waits on another process before SQLite gives up.

SQLAlchemy Core (not ORM) is used: sessions are small frozen pydantic
models and every write is an explicit statement.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from truckflow.infrastructure.database.schema import metadata

DATA_DIRNAME = ".truckflow"
DEFAULT_DB_NAME = "truckflow.db"


def create_db_engine(db_path: Path, *, busy_timeout_ms: int = 5000) -> Engine:
    """Create a SQLite engine with WAL mode and a bounded busy timeout."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        # Hand transaction control to SQLAlchemy so BEGIN IMMEDIATE is used.
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        # Take the write lock up front; a deferred read lock cannot be
        # upgraded once another writer has committed in WAL mode.
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def init_database(
    yard_root: Path,
    *,
    db_name: str = DEFAULT_DB_NAME,
    busy_timeout_ms: int = 5000,
) -> Engine:
    """Initialize the truckflow database under ``{yard_root}/.truckflow/``.

    Creates the data directory and all tables and indexes from
    :data:`schema.metadata`.  Idempotent, safe to call on an existing
    database.

    Returns the engine ready for use.
    """
    data_dir = yard_root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(data_dir / db_name, busy_timeout_ms=busy_timeout_ms)
    metadata.create_all(engine)
    return engine
