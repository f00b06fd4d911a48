"""Store implementations for sessions and audit events."""

from truckflow.infrastructure.repositories.contracts import (
    EventAuditLog,
    SessionStore,
    StoreConflictError,
)
from truckflow.infrastructure.repositories.events import SqlEventAuditLog
from truckflow.infrastructure.repositories.sessions import SqlSessionStore

__all__ = [
    "EventAuditLog",
    "SessionStore",
    "SqlEventAuditLog",
    "SqlSessionStore",
    "StoreConflictError",
]
