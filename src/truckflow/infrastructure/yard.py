"""Yard: repository owning the database engine and per-truck locks.

The Yard is the single dependency injected into every service.  Two
context managers cover all data access:

- :meth:`Yard.transaction` opens one SQLAlchemy transaction and yields a
  :class:`YardTransaction` with session and audit stores bound to it.
  Everything written inside the block commits together or not at all.
- :meth:`Yard.truck_transaction` additionally holds the per-truck lock
  around the transaction, so a read-decide-write sequence on one truck
  cannot interleave with another caller on the same truck.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from truckflow.infrastructure.database.engine import init_database
from truckflow.infrastructure.locks import TruckLocks
from truckflow.infrastructure.repositories.events import SqlEventAuditLog
from truckflow.infrastructure.repositories.sessions import SqlSessionStore

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from truckflow.config.settings import TruckflowSettings

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    """Current UTC time as ISO 8601 with microseconds (sortable as text)."""
    return datetime.now(UTC).isoformat(timespec="microseconds")


@dataclass
class YardTransaction:
    """Active transaction with stores bound to its connection."""

    conn: Connection
    sessions: SqlSessionStore
    events: SqlEventAuditLog


class Yard:
    """Repository encapsulating database access and per-truck serialization.

    Constructed once at CLI startup from :class:`TruckflowSettings`.
    Services receive the Yard via their :class:`BaseService` constructor.
    """

    def __init__(
        self,
        settings: TruckflowSettings,
        *,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self._settings = settings
        self._clock = clock
        self._engine: Engine = init_database(
            self.root,
            db_name=settings.store.db_name,
            busy_timeout_ms=settings.store.busy_timeout_ms,
        )
        self._locks = TruckLocks()

    @property
    def root(self) -> Path:
        """The yard root directory (holds ``.truckflow/``)."""
        return self._settings.yard_root

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> TruckflowSettings:
        return self._settings

    @property
    def locks(self) -> TruckLocks:
        return self._locks

    def now(self) -> str:
        """Timestamp used for session and audit records."""
        return self._clock()

    @contextmanager
    def transaction(self) -> Iterator[YardTransaction]:
        """One database transaction: commit on success, rollback on exception.

        Usage::

            with yard.transaction() as txn:
                saved = txn.sessions.save(session)
                txn.events.append(truck_id, EventType.DOCK_ENTRY, "...")
                # Both commit on success, both roll back on failure.
        """
        with self._engine.begin() as conn:
            yield YardTransaction(
                conn=conn,
                sessions=SqlSessionStore(conn),
                events=SqlEventAuditLog(conn, clock=self._clock),
            )

    @contextmanager
    def truck_transaction(self, truck_id: str) -> Iterator[YardTransaction]:
        """Hold the lock for *truck_id*, then open a transaction.

        Raises:
            LockTimeoutError: If the lock is not acquired within
                ``[store] lock_timeout_seconds``.
        """
        timeout = self._settings.store.lock_timeout_seconds
        with self._locks.hold(truck_id, timeout=timeout), self.transaction() as txn:
            yield txn

    def close(self) -> None:
        """Release pooled database connections."""
        self._engine.dispose()
