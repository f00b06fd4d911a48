"""Shared pytest fixtures and test helpers for truckflow tests."""

from __future__ import annotations

import threading
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy import select

from truckflow.config.settings import TruckflowSettings
from truckflow.domain.lifecycle import SessionState
from truckflow.infrastructure.database.schema import audit_events, truck_sessions
from truckflow.infrastructure.yard import Yard
from truckflow.services.lifecycle import SessionLifecycleService
from truckflow.services.telemetry import disable_telemetry


class TickClock:
    """Deterministic clock: each call is one second after the previous one."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2026, 1, 1, 8, 0, tzinfo=UTC)
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            self._now += timedelta(seconds=1)
            return self._now.isoformat(timespec="microseconds")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer TRUCKFLOW_* variables out of the tests."""
    for var in ("TRUCKFLOW_CONFIG", "TRUCKFLOW_YARD_ROOT", "TRUCKFLOW_VERBOSE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """The CLI enables telemetry for --verbose; keep it from leaking across tests."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> TruckflowSettings:
    return TruckflowSettings.from_cli(yard_root=tmp_path)


@pytest.fixture
def yard(settings: TruckflowSettings) -> Generator[Yard]:
    """Yard on a temp directory with a deterministic clock."""
    y = Yard(settings, clock=TickClock())
    try:
        yield y
    finally:
        y.close()


@pytest.fixture
def lifecycle(yard: Yard) -> SessionLifecycleService:
    return SessionLifecycleService(yard)


@pytest.fixture
def _isolated_yard(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI tests with CWD in a temp dir so each gets its own database.

    Use via ``@pytest.mark.usefixtures("_isolated_yard")``.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------

_PATH_TO: dict[SessionState, list[tuple[str, tuple[Any, ...]]]] = {
    SessionState.ENTRY: [],
    SessionState.TARE_DONE: [("record_tare", (12000,))],
    SessionState.DOCK: [("record_tare", (12000,)), ("enter_dock", ())],
    SessionState.GROSS_DONE: [
        ("record_tare", (12000,)),
        ("enter_dock", ()),
        ("record_gross", (28000,)),
    ],
    SessionState.INVOICE_GENERATED: [
        ("record_tare", (12000,)),
        ("enter_dock", ()),
        ("record_gross", (28000,)),
        ("generate_invoice", ()),
    ],
}


def advance_to(
    svc: SessionLifecycleService, truck_id: str, state: SessionState
) -> dict[str, Any]:
    """Start a session for *truck_id* and drive it to *state*, asserting success."""
    result = svc.start(truck_id)
    assert result.ok, result.error
    data = result.data
    for method, args in _PATH_TO[state]:
        result = getattr(svc, method)(truck_id, *args)
        assert result.ok, result.error
        data = result.data
    assert data["state"] == state
    return data


def audit_rows(yard: Yard, truck_id: str) -> list[Any]:
    """Audit rows for *truck_id* in insertion order."""
    with yard.engine.connect() as conn:
        return list(
            conn.execute(
                select(audit_events)
                .where(audit_events.c.truck_id == truck_id)
                .order_by(audit_events.c.id)
            ).all()
        )


def session_row(yard: Yard, truck_id: str) -> Any:
    """The most recent session row for *truck_id*."""
    with yard.engine.connect() as conn:
        return conn.execute(
            select(truck_sessions)
            .where(truck_sessions.c.truck_id == truck_id)
            .order_by(truck_sessions.c.id.desc())
            .limit(1)
        ).first()
