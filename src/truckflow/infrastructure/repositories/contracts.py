"""Storage contracts consumed by the lifecycle service.

The service only depends on these protocols; :mod:`sessions` and
:mod:`events` provide the SQLite implementations bound to a transaction
connection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from truckflow.domain.lifecycle import EventType
    from truckflow.domain.models import AuditEvent, TruckSession


class StoreConflictError(Exception):
    """A write lost a race: the record changed since it was loaded, or a
    second active session would have been created for the same truck."""


class SessionStore(Protocol):
    """Durable keyed storage of truck sessions."""

    def find_active(self, truck_id: str) -> TruckSession | None:
        """Return the non-EXITED session for *truck_id*, if any."""
        ...

    def find_all(self) -> list[TruckSession]:
        """Return every session, most recently updated first."""
        ...

    def create(self, session: TruckSession) -> TruckSession:
        """Insert *session*; returns it with the store-assigned id."""
        ...

    def save(self, session: TruckSession) -> TruckSession:
        """Persist *session*; raises :class:`StoreConflictError` on a stale version."""
        ...


class EventAuditLog(Protocol):
    """Append-only audit trail keyed by truck."""

    def append(self, truck_id: str, event_type: EventType, message: str) -> AuditEvent:
        ...

    def list_for_truck(self, truck_id: str) -> list[AuditEvent]:
        """Return all events for *truck_id*, newest first."""
        ...
