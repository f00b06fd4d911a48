"""SQLite-backed session store with optimistic concurrency.

Every ``save`` bumps ``version`` and only matches the row if its version
is unchanged since load.  The caller owns the transaction: pass a
``Connection`` from ``engine.begin()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError

from truckflow.domain.lifecycle import SessionState
from truckflow.domain.models import TruckSession
from truckflow.infrastructure.database.schema import truck_sessions
from truckflow.infrastructure.repositories.contracts import StoreConflictError

if TYPE_CHECKING:
    from sqlalchemy import Connection


def _row_to_session(row: Any) -> TruckSession:
    return TruckSession(
        id=row.id,
        truck_id=row.truck_id,
        state=row.state,
        tare_weight=row.tare_weight,
        gross_weight=row.gross_weight,
        invoice_status=row.invoice_status,
        movement_lock=bool(row.movement_lock),
        visit_count=row.visit_count,
        created_at=row.created_at,
        updated_at=row.updated_at,
        version=row.version,
    )


def _session_values(session: TruckSession) -> dict[str, Any]:
    return {
        "truck_id": session.truck_id,
        "state": str(session.state),
        "tare_weight": session.tare_weight,
        "gross_weight": session.gross_weight,
        "invoice_status": str(session.invoice_status),
        "movement_lock": int(session.movement_lock),
        "visit_count": session.visit_count,
        "created_at": session.created_at,
        "updated_at": session.updated_at,
    }


class SqlSessionStore:
    """Session store bound to an active SQLAlchemy connection."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def find_active(self, truck_id: str) -> TruckSession | None:
        row = self._conn.execute(
            select(truck_sessions).where(
                truck_sessions.c.truck_id == truck_id,
                truck_sessions.c.state != str(SessionState.EXITED),
            )
        ).first()
        return _row_to_session(row) if row is not None else None

    def find_all(self) -> list[TruckSession]:
        rows = self._conn.execute(
            select(truck_sessions).order_by(
                truck_sessions.c.updated_at.desc(),
                truck_sessions.c.id.desc(),
            )
        ).all()
        return [_row_to_session(row) for row in rows]

    def create(self, session: TruckSession) -> TruckSession:
        try:
            result = self._conn.execute(
                insert(truck_sessions).values(**_session_values(session), version=0)
            )
        except IntegrityError as exc:
            msg = f"Truck '{session.truck_id}' already has an active session"
            raise StoreConflictError(msg) from exc
        new_id = result.inserted_primary_key[0]
        return session.model_copy(update={"id": new_id, "version": 0})

    def save(self, session: TruckSession) -> TruckSession:
        if session.id is None:
            msg = "Cannot save a session that was never created"
            raise ValueError(msg)

        next_version = session.version + 1
        result = self._conn.execute(
            update(truck_sessions)
            .where(
                truck_sessions.c.id == session.id,
                truck_sessions.c.version == session.version,
            )
            .values(**_session_values(session), version=next_version)
        )
        if result.rowcount != 1:
            msg = f"Session for truck '{session.truck_id}' was modified concurrently"
            raise StoreConflictError(msg)
        return session.model_copy(update={"version": next_version})
