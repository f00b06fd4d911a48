"""SQLite-backed append-only audit log.

Appends share the caller's transaction so an accepted state change and
its audit event commit or roll back together.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import insert, select

from truckflow.domain.lifecycle import EventType
from truckflow.domain.models import AuditEvent
from truckflow.infrastructure.database.schema import audit_events

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy import Connection


class SqlEventAuditLog:
    """Audit log bound to an active SQLAlchemy connection."""

    def __init__(self, conn: Connection, clock: Callable[[], str]) -> None:
        self._conn = conn
        self._clock = clock

    def append(self, truck_id: str, event_type: EventType, message: str) -> AuditEvent:
        timestamp = self._clock()
        result = self._conn.execute(
            insert(audit_events).values(
                truck_id=truck_id,
                event_type=str(event_type),
                message=message,
                timestamp=timestamp,
            )
        )
        return AuditEvent(
            id=result.inserted_primary_key[0],
            truck_id=truck_id,
            event_type=event_type,
            message=message,
            timestamp=timestamp,
        )

    def list_for_truck(self, truck_id: str) -> list[AuditEvent]:
        rows = self._conn.execute(
            select(audit_events)
            .where(audit_events.c.truck_id == truck_id)
            .order_by(audit_events.c.timestamp.desc(), audit_events.c.id.desc())
        ).all()
        return [
            AuditEvent(
                id=row.id,
                truck_id=row.truck_id,
                event_type=EventType(row.event_type),
                message=row.message,
                timestamp=row.timestamp,
            )
            for row in rows
        ]
