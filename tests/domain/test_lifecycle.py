"""Tests for session states and the transition policy table."""

from __future__ import annotations

import itertools

import pytest

from truckflow.domain.lifecycle import (
    ACCEPTED_EVENT,
    TARGET_STATE,
    TRANSITION_MAP,
    Action,
    EventType,
    InvoiceStatus,
    SessionState,
    decide,
    is_active,
)

_ALLOWED_PAIRS = {(state, action) for action, states in TRANSITION_MAP.items() for state in states}
_DENIED_PAIRS = sorted(
    set(itertools.product(SessionState, Action)) - _ALLOWED_PAIRS,
)


class TestEnums:
    def test_session_states(self) -> None:
        assert [s.value for s in SessionState] == [
            "ENTRY",
            "TARE_DONE",
            "DOCK",
            "GROSS_DONE",
            "INVOICE_GENERATED",
            "EXITED",
        ]

    def test_actions(self) -> None:
        assert {a.value for a in Action} == {"tare", "dock", "gross", "invoice", "exit"}

    def test_invoice_status(self) -> None:
        assert {s.value for s in InvoiceStatus} == {"NONE", "GENERATED"}

    def test_event_types(self) -> None:
        assert {e.value for e in EventType} == {
            "SESSION_START",
            "TARE_RECORDED",
            "DOCK_ENTRY",
            "GROSS_RECORDED",
            "INVOICE_GENERATED",
            "SESSION_EXIT",
            "REJECTED",
            "VIOLATION",
        }


class TestTables:
    def test_transition_map(self) -> None:
        assert TRANSITION_MAP == {
            Action.TARE: (SessionState.ENTRY,),
            Action.DOCK: (SessionState.TARE_DONE, SessionState.GROSS_DONE),
            Action.GROSS: (SessionState.DOCK,),
            Action.INVOICE: (SessionState.GROSS_DONE,),
            Action.EXIT: (SessionState.INVOICE_GENERATED,),
        }

    def test_tables_cover_every_action(self) -> None:
        assert set(TRANSITION_MAP) == set(Action)
        assert set(TARGET_STATE) == set(Action)
        assert set(ACCEPTED_EVENT) == set(Action)

    def test_no_action_leaves_exited(self) -> None:
        for states in TRANSITION_MAP.values():
            assert SessionState.EXITED not in states


class TestDecide:
    @pytest.mark.parametrize(("state", "action"), sorted(_ALLOWED_PAIRS))
    def test_allowed(self, state: SessionState, action: Action) -> None:
        decision = decide(state, action)
        assert decision.allowed
        assert decision.reason is None

    @pytest.mark.parametrize(("state", "action"), _DENIED_PAIRS)
    def test_denied(self, state: SessionState, action: Action) -> None:
        decision = decide(state, action)
        assert not decision.allowed
        assert f"'{action.value}'" in (decision.reason or "")
        assert f"'{state.value}'" in (decision.reason or "")
        assert decision.required == TRANSITION_MAP[action]

    def test_reason_lists_required_states_in_order(self) -> None:
        decision = decide(SessionState.ENTRY, Action.DOCK)
        assert decision.reason == (
            "Cannot perform 'dock' from state 'ENTRY'. Required state(s): TARE_DONE, GROSS_DONE"
        )
        assert decision.required == (SessionState.TARE_DONE, SessionState.GROSS_DONE)

    def test_accepts_plain_strings(self) -> None:
        assert decide("ENTRY", "tare").allowed
        assert not decide("DOCK", "tare").allowed

    def test_unknown_action(self) -> None:
        decision = decide(SessionState.ENTRY, "teleport")
        assert not decision.allowed
        assert decision.reason == "Unknown action: teleport"
        assert decision.required == ()

    def test_start_is_not_a_policy_action(self) -> None:
        assert decide(SessionState.ENTRY, "start").reason == "Unknown action: start"


class TestIsActive:
    @pytest.mark.parametrize("state", [s for s in SessionState if s != SessionState.EXITED])
    def test_active_states(self, state: SessionState) -> None:
        assert is_active(state)

    def test_exited_is_inactive(self) -> None:
        assert not is_active(SessionState.EXITED)
