"""SQLAlchemy Core table definitions for the truckflow database.

``truck_sessions`` keeps every session, including EXITED ones, for
history.  A partial unique index allows at most one non-EXITED row per
truck.  ``audit_events`` is append-only: nothing in the codebase issues
UPDATE or DELETE against it.
"""

from __future__ import annotations

from sqlalchemy import (
    REAL,
    Column,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    text,
)

metadata = MetaData()

truck_sessions = Table(
    "truck_sessions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("truck_id", Text, nullable=False),
    Column("state", Text, nullable=False),
    Column("tare_weight", REAL),
    Column("gross_weight", REAL),
    Column("invoice_status", Text, nullable=False, default="NONE", server_default="NONE"),
    Column("movement_lock", Integer, nullable=False, default=0, server_default="0"),
    Column("visit_count", Integer, nullable=False, default=0, server_default="0"),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
    Column("version", Integer, nullable=False, default=0, server_default="0"),
)

audit_events = Table(
    "audit_events",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("truck_id", Text, nullable=False),
    Column("event_type", Text, nullable=False),
    Column("message", Text, nullable=False),
    Column("timestamp", Text, nullable=False),
)

# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------

Index(
    "ux_truck_sessions_active",
    truck_sessions.c.truck_id,
    unique=True,
    sqlite_where=text("state != 'EXITED'"),
)
Index("ix_truck_sessions_truck", truck_sessions.c.truck_id)
Index("ix_truck_sessions_updated", truck_sessions.c.updated_at)
Index("ix_audit_events_truck", audit_events.c.truck_id)
