"""Truck session states, actions, and the transition policy table.

The policy is a pure decision over closed enums: no I/O, no session
mutation.  ``start`` is not modeled here; it is a session-creation
precondition (no active session for the truck), checked by the
lifecycle service.

Directed path:

    ENTRY -> TARE_DONE -> (DOCK -> GROSS_DONE)* -> INVOICE_GENERATED -> EXITED
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# --- Enums (wire tokens are the member values) ---


class SessionState(StrEnum):
    """Workflow position of a truck session."""

    ENTRY = "ENTRY"
    TARE_DONE = "TARE_DONE"
    DOCK = "DOCK"
    GROSS_DONE = "GROSS_DONE"
    INVOICE_GENERATED = "INVOICE_GENERATED"
    EXITED = "EXITED"


class InvoiceStatus(StrEnum):
    """Invoice status. GENERATED never reverts to NONE."""

    NONE = "NONE"
    GENERATED = "GENERATED"


class Action(StrEnum):
    """Actions subject to the transition policy."""

    TARE = "tare"
    DOCK = "dock"
    GROSS = "gross"
    INVOICE = "invoice"
    EXIT = "exit"


class EventType(StrEnum):
    """Audit event types."""

    SESSION_START = "SESSION_START"
    TARE_RECORDED = "TARE_RECORDED"
    DOCK_ENTRY = "DOCK_ENTRY"
    GROSS_RECORDED = "GROSS_RECORDED"
    INVOICE_GENERATED = "INVOICE_GENERATED"
    SESSION_EXIT = "SESSION_EXIT"
    REJECTED = "REJECTED"
    VIOLATION = "VIOLATION"


# --- Transition tables ---

TRANSITION_MAP: dict[Action, tuple[SessionState, ...]] = {
    Action.TARE: (SessionState.ENTRY,),
    Action.DOCK: (SessionState.TARE_DONE, SessionState.GROSS_DONE),
    Action.GROSS: (SessionState.DOCK,),
    Action.INVOICE: (SessionState.GROSS_DONE,),
    Action.EXIT: (SessionState.INVOICE_GENERATED,),
}

TARGET_STATE: dict[Action, SessionState] = {
    Action.TARE: SessionState.TARE_DONE,
    Action.DOCK: SessionState.DOCK,
    Action.GROSS: SessionState.GROSS_DONE,
    Action.INVOICE: SessionState.INVOICE_GENERATED,
    Action.EXIT: SessionState.EXITED,
}

ACCEPTED_EVENT: dict[Action, EventType] = {
    Action.TARE: EventType.TARE_RECORDED,
    Action.DOCK: EventType.DOCK_ENTRY,
    Action.GROSS: EventType.GROSS_RECORDED,
    Action.INVOICE: EventType.INVOICE_GENERATED,
    Action.EXIT: EventType.SESSION_EXIT,
}


def _assert_exhaustive() -> None:
    """Every action must appear in every table, or the module fails to import."""
    for name, table in (
        ("TRANSITION_MAP", TRANSITION_MAP),
        ("TARGET_STATE", TARGET_STATE),
        ("ACCEPTED_EVENT", ACCEPTED_EVENT),
    ):
        missing = set(Action) - set(table)
        if missing:
            msg = f"{name} is missing actions: {sorted(missing)}"
            raise RuntimeError(msg)


_assert_exhaustive()


# --- Decision ---


@dataclass(frozen=True)
class Decision:
    """Outcome of :func:`decide`.

    Attributes:
        allowed: Whether the action may proceed.
        reason: Human-readable denial reason (None when allowed).
        required: Valid current states for the action, in table order.
            Empty for unknown actions.
    """

    allowed: bool
    reason: str | None = None
    required: tuple[SessionState, ...] = ()


def decide(current: SessionState | str, action: Action | str) -> Decision:
    """Decide whether *action* is permitted from *current* state."""
    try:
        act = Action(action)
    except ValueError:
        return Decision(allowed=False, reason=f"Unknown action: {action}")

    required = TRANSITION_MAP[act]
    if current not in required:
        reason = (
            f"Cannot perform '{act}' from state '{current}'. "
            f"Required state(s): {', '.join(required)}"
        )
        return Decision(allowed=False, reason=reason, required=required)

    return Decision(allowed=True, required=required)


def is_active(state: SessionState | str) -> bool:
    """A session is active until it reaches EXITED."""
    return state != SessionState.EXITED
