"""SessionLifecycleService: truck session state machine and movement lock.

Every mutating operation runs inside ``yard.truck_transaction(truck_id)``:
the per-truck lock and a single database transaction span the whole
load -> guard -> policy -> write -> audit sequence.

Side effects per outcome:

- accepted: one session write + one audit append, committed together.
- policy denial: one REJECTED audit append, no session write.
- movement violation: one VIOLATION audit append, no session write;
  the result carries the current session as data.
- validation failure (blank truck id, bad weight): no writes at all.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from truckflow.domain.guard import check_dock_access
from truckflow.domain.lifecycle import (
    ACCEPTED_EVENT,
    TARGET_STATE,
    Action,
    EventType,
    InvoiceStatus,
    decide,
)
from truckflow.domain.models import (
    TruckSession,
    format_weight,
    normalize_truck_id,
    parse_weight,
)
from truckflow.infrastructure.locks import LockTimeoutError
from truckflow.infrastructure.repositories.contracts import StoreConflictError
from truckflow.services.base import BaseService
from truckflow.services.contracts import SessionData, SessionListData, dump_validated
from truckflow.services.result import ErrorCode, ServiceResult
from truckflow.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from truckflow.infrastructure.yard import YardTransaction

logger = logging.getLogger(__name__)

NO_ACTIVE_SESSION = "No active session found"


@dataclass(frozen=True)
class _Applied:
    """A computed accepted transition, ready to persist."""

    session: TruckSession
    audit_message: str
    result_message: str


def _session_data(session: TruckSession) -> dict[str, Any]:
    return dump_validated(SessionData, session.to_payload())


class SessionLifecycleService(BaseService):
    """Start, weigh, dock, invoice, and exit truck sessions."""

    # ------------------------------------------------------------------
    # Public API: mutations
    # ------------------------------------------------------------------

    @traced
    def start(self, truck_id: str | None) -> ServiceResult:
        """Open a session in ENTRY, unless the truck already has an active one."""
        op = "session_start"
        try:
            tid = normalize_truck_id(truck_id)
        except ValueError as exc:
            return self._failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))

        try:
            with self._yard.truck_transaction(tid) as txn:
                if txn.sessions.find_active(tid) is not None:
                    return self._failure(
                        op,
                        ErrorCode.CONFLICT,
                        f"Truck '{tid}' already has an active session",
                        truck_id=tid,
                    )
                now = self._yard.now()
                session = txn.sessions.create(
                    TruckSession(truck_id=tid, created_at=now, updated_at=now)
                )
                txn.events.append(tid, EventType.SESSION_START, f"Session started for truck {tid}")
        except (StoreConflictError, LockTimeoutError) as exc:
            return self._failure(op, ErrorCode.CONFLICT, str(exc), truck_id=tid)

        logger.debug("Session started for truck %s", tid)
        return ServiceResult(
            ok=True,
            op=op,
            data=_session_data(session),
            message="Session started",
        )

    @traced
    def record_tare(self, truck_id: str | None, weight: Any) -> ServiceResult:
        """Record the empty-truck weight. Requires ENTRY."""
        return self._transition("session_tare", truck_id, Action.TARE, weight=weight)

    @traced
    def enter_dock(self, truck_id: str | None) -> ServiceResult:
        """Admit the truck to the loading dock. Requires TARE_DONE or GROSS_DONE."""
        return self._transition("session_dock", truck_id, Action.DOCK)

    @traced
    def record_gross(self, truck_id: str | None, weight: Any) -> ServiceResult:
        """Record the loaded-truck weight. Requires DOCK."""
        return self._transition("session_gross", truck_id, Action.GROSS, weight=weight)

    @traced
    def generate_invoice(self, truck_id: str | None) -> ServiceResult:
        """Generate the invoice and set the movement lock. Requires GROSS_DONE."""
        return self._transition("session_invoice", truck_id, Action.INVOICE)

    @traced
    def exit(self, truck_id: str | None) -> ServiceResult:
        """Close the session. Requires INVOICE_GENERATED."""
        return self._transition("session_exit", truck_id, Action.EXIT)

    # ------------------------------------------------------------------
    # Public API: queries
    # ------------------------------------------------------------------

    @traced
    def get_active(self, truck_id: str | None) -> ServiceResult:
        """Return the truck's non-EXITED session."""
        op = "session_show"
        try:
            tid = normalize_truck_id(truck_id)
        except ValueError as exc:
            return self._failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))

        with self._yard.transaction() as txn:
            session = txn.sessions.find_active(tid)
        if session is None:
            return self._failure(op, ErrorCode.NOT_FOUND, NO_ACTIVE_SESSION, truck_id=tid)
        return ServiceResult(
            ok=True,
            op=op,
            data=_session_data(session),
            message="Session retrieved",
        )

    @traced
    def list_all(self) -> ServiceResult:
        """Return every session, including EXITED, most recently updated first."""
        op = "session_list"
        with self._yard.transaction() as txn:
            sessions = txn.sessions.find_all()
        items = [s.to_payload() for s in sessions]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(SessionListData, {"count": len(items), "items": items}),
            message=f"{len(items)} session(s) found",
        )

    # ------------------------------------------------------------------
    # Transition pipeline
    # ------------------------------------------------------------------

    def _transition(
        self,
        op: str,
        truck_id: str | None,
        action: Action,
        *,
        weight: Any = None,
    ) -> ServiceResult:
        try:
            tid = normalize_truck_id(truck_id)
        except ValueError as exc:
            return self._failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))

        try:
            with self._yard.truck_transaction(tid) as txn:
                return self._transition_locked(op, txn, tid, action, weight)
        except (StoreConflictError, LockTimeoutError) as exc:
            logger.info("Write conflict on %s for truck %s: %s", action, tid, exc)
            return self._failure(op, ErrorCode.CONFLICT, str(exc), truck_id=tid)

    def _transition_locked(
        self,
        op: str,
        txn: YardTransaction,
        tid: str,
        action: Action,
        weight: Any,
    ) -> ServiceResult:
        session = txn.sessions.find_active(tid)
        if session is None:
            return self._failure(op, ErrorCode.NOT_FOUND, NO_ACTIVE_SESSION, truck_id=tid)

        # -- DOCK GUARD (dock only, ahead of the policy table) --
        if action is Action.DOCK:
            guard = check_dock_access(session)
            if not guard.allowed:
                reason = guard.reason or ""
                txn.events.append(tid, EventType.VIOLATION, reason)
                logger.info("Movement violation for truck %s in state %s", tid, session.state)
                return self._failure(
                    op,
                    ErrorCode.MOVEMENT_VIOLATION,
                    reason,
                    data=_session_data(session),
                    action=str(action),
                    state=str(session.state),
                )

        # -- TRANSITION POLICY --
        with trace_span("decide") as span:
            decision = decide(session.state, action)
            if span:
                span.annotate("allowed", decision.allowed)
        if not decision.allowed:
            reason = decision.reason or ""
            txn.events.append(tid, EventType.REJECTED, f"Action '{action}' rejected: {reason}")
            logger.info("Rejected %s for truck %s: %s", action, tid, reason)
            return self._failure(
                op,
                ErrorCode.POLICY_DENIED,
                reason,
                action=str(action),
                state=str(session.state),
                required=[str(s) for s in decision.required],
            )

        # -- VALIDATE + APPLY --
        try:
            applied = self._apply(action, session, weight)
        except ValueError as exc:
            return self._failure(op, ErrorCode.INVALID_ARGUMENT, str(exc), truck_id=tid)

        with trace_span("persist"):
            saved = txn.sessions.save(applied.session)
            txn.events.append(tid, ACCEPTED_EVENT[action], applied.audit_message)

        logger.debug("Truck %s: %s -> %s", tid, session.state, saved.state)
        return ServiceResult(
            ok=True,
            op=op,
            data=_session_data(saved),
            message=applied.result_message,
        )

    def _apply(self, action: Action, session: TruckSession, weight: Any) -> _Applied:
        """Compute the accepted transition for *action*.

        Raises:
            ValueError: If a required weight is missing or not a positive number.
        """
        unit = self._yard.settings.weighbridge.unit
        now = self._yard.now()
        target = TARGET_STATE[action]

        if action is Action.TARE:
            tare = parse_weight(weight, label="tare")
            msg = f"Tare weight recorded: {format_weight(tare)} {unit}"
            return _Applied(session.advance(now, state=target, tare_weight=tare), msg, msg)

        if action is Action.DOCK:
            visit = session.visit_count + 1
            updated = session.advance(now, state=target, visit_count=visit)
            return _Applied(
                updated,
                f"Entered loading dock (visit #{visit}).",
                f"Dock entry #{visit} confirmed",
            )

        if action is Action.GROSS:
            gross = parse_weight(weight, label="gross")
            updated = session.advance(now, state=target, gross_weight=gross)
            shown = f"Gross weight recorded: {format_weight(gross)} {unit}"
            return _Applied(
                updated,
                f"{shown} (Net: {format_weight(updated.net_weight)} {unit})",
                shown,
            )

        if action is Action.INVOICE:
            updated = session.advance(
                now,
                state=target,
                invoice_status=InvoiceStatus.GENERATED,
                movement_lock=True,
            )
            return _Applied(
                updated,
                f"Invoice generated. Net weight: {format_weight(updated.net_weight)} {unit}. "
                "Movement locked.",
                "Invoice generated. Movement is now locked.",
            )

        # Action.EXIT
        return _Applied(
            session.advance(now, state=target),
            f"Truck {session.truck_id} exited the facility. Session complete.",
            "Truck exited. Session complete.",
        )
