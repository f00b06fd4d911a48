"""SQLite database engine and schema via SQLAlchemy Core."""

from truckflow.infrastructure.database.engine import create_db_engine, init_database
from truckflow.infrastructure.database.schema import audit_events, metadata, truck_sessions

__all__ = [
    "audit_events",
    "create_db_engine",
    "init_database",
    "metadata",
    "truck_sessions",
]
