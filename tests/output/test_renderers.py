"""Tests for operation-specific Rich renderers."""

from truckflow.output.renderers import render_quiet, render_result
from truckflow.services.result import ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────

_SESSION = {
    "truck_id": "T1",
    "state": "DOCK",
    "tare_weight": 12000.0,
    "gross_weight": None,
    "invoice_status": "NONE",
    "movement_lock": False,
    "visit_count": 1,
    "created_at": "2026-01-01T08:00:01",
    "updated_at": "2026-01-01T08:00:03",
}


def _ok(op: str, message: str = "", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data), message=message)


def _err(op: str, code: str, message: str, **detail: object) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=dict(detail)),
    )


# ── Errors ────────────────────────────────────────────────────────────


class TestErrorRenderer:
    def test_policy_denial(self) -> None:
        result = _err(
            "session_dock",
            "POLICY_DENIED",
            "Cannot perform 'dock' from state 'ENTRY'.",
            required=["TARE_DONE", "GROSS_DONE"],
        )
        output = render_result(result)
        assert "ERROR" in output
        assert "session_dock" in output
        assert "required: TARE_DONE, GROSS_DONE" in output

    def test_violation_shows_session(self) -> None:
        result = ServiceResult(
            ok=False,
            op="session_dock",
            data=_SESSION,
            error=ServiceError(code="MOVEMENT_VIOLATION", message="Movement restricted"),
        )
        output = render_result(result)
        assert "VIOLATION" in output
        assert "Movement restricted" in output
        assert "visit_count: 1" in output

    def test_verbose_shows_detail(self) -> None:
        result = _err("session_tare", "NOT_FOUND", "No active session found", truck_id="T1")
        output = render_result(result, verbose=True)
        assert "detail" in output
        assert "truck_id: T1" in output

    def test_no_error_object(self) -> None:
        output = render_result(ServiceResult(ok=False, op="session_show"))
        assert "Unknown error" in output


# ── Success ───────────────────────────────────────────────────────────


class TestSessionRenderer:
    def test_fields(self) -> None:
        output = render_result(_ok("session_dock", "Dock entry #1 confirmed", **_SESSION))
        assert "OK" in output
        assert "Dock entry #1 confirmed" in output
        assert "state: DOCK" in output
        assert "tare_weight: 12000.0" in output
        assert "gross_weight: -" in output
        assert "created_at" not in output

    def test_verbose_shows_timestamps(self) -> None:
        output = render_result(_ok("session_show", **_SESSION), verbose=True)
        assert "created_at" in output

    def test_telemetry_tree(self) -> None:
        result = ServiceResult(
            ok=True,
            op="session_dock",
            data=_SESSION,
            meta={
                "telemetry": {
                    "name": "SessionLifecycleService.enter_dock",
                    "duration_ms": 1.5,
                    "children": [
                        {"name": "decide", "duration_ms": 0.1, "annotations": {"allowed": True}}
                    ],
                }
            },
        )
        output = render_result(result, verbose=True)
        assert "SessionLifecycleService.enter_dock" in output
        assert "decide" in output
        assert "allowed=True" in output


class TestListRenderers:
    def test_session_table(self) -> None:
        locked = {**_SESSION, "truck_id": "T2", "movement_lock": True}
        output = render_result(_ok("session_list", count=2, items=[_SESSION, locked]))
        assert "T1" in output
        assert "T2" in output
        assert "locked" in output
        assert "2 sessions" in output

    def test_events_table(self) -> None:
        items = [
            {
                "id": 2,
                "truck_id": "T1",
                "event_type": "VIOLATION",
                "message": "Movement restricted",
                "timestamp": "t2",
            },
            {
                "id": 1,
                "truck_id": "T1",
                "event_type": "SESSION_START",
                "message": "Session started for truck T1",
                "timestamp": "t1",
            },
        ]
        output = render_result(_ok("events_list", truck_id="T1", count=2, items=items))
        assert "Events for T1" in output
        assert "VIOLATION" in output
        assert "2 events" in output

    def test_generic_fallback(self) -> None:
        output = render_result(_ok("other_op", "fine", answer=42))
        assert "answer: 42" in output


class TestQuiet:
    def test_session(self) -> None:
        assert render_quiet(_ok("session_tare", **_SESSION)) == "T1 DOCK"

    def test_list(self) -> None:
        out = render_quiet(_ok("session_list", count=1, items=[_SESSION]))
        assert out == "T1 DOCK"

    def test_events(self) -> None:
        item = {"timestamp": "t1", "event_type": "SESSION_START"}
        assert render_quiet(_ok("events_list", items=[item])) == "t1 SESSION_START"

    def test_error(self) -> None:
        out = render_quiet(_err("session_dock", "POLICY_DENIED", "nope"))
        assert out.startswith("ERROR: session_dock")
        assert "nope" in out

    def test_fallback(self) -> None:
        assert render_quiet(_ok("ping")) == "OK: ping"
