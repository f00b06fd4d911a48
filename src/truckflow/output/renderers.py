"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from truckflow.output.console import (
    create_console,
    get_output,
    style_for_event,
    style_for_state,
)

if TYPE_CHECKING:
    from rich.console import Console

    from truckflow.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    if verbose:
        _render_meta(console, result)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output: ids and states only."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        if result.op == "events_list":
            return "\n".join(f"{i['timestamp']} {i['event_type']}" for i in items)
        return "\n".join(f"{i['truck_id']} {i['state']}" for i in items)

    if "truck_id" in result.data:
        return f"{result.data['truck_id']} {result.data.get('state', '')}".rstrip()
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    line = Text("OK", style="tf.ok")
    line.append(f"  {result.op}", style="tf.op")
    if result.message:
        line.append(f" — {result.message}")
    console.print(line)


def _field(console: Console, key: str, value: Any) -> None:
    line = Text(f"  {key}: ", style="tf.key")
    if key == "truck_id":
        line.append(str(value), style="tf.truck")
    elif key == "state":
        line.append(str(value), style=style_for_state(str(value)))
    elif key.endswith("_weight"):
        line.append("-" if value is None else str(value), style="tf.weight")
    else:
        line.append(str(value))
    console.print(line)


_SESSION_KEYS = (
    "truck_id",
    "state",
    "tare_weight",
    "gross_weight",
    "invoice_status",
    "movement_lock",
    "visit_count",
)


def _session_fields(console: Console, data: dict[str, Any], *, verbose: bool) -> None:
    for key in _SESSION_KEYS:
        if key in data:
            _field(console, key, data[key])
    if verbose:
        for key in ("created_at", "updated_at"):
            if key in data:
                _field(console, key, data[key])


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_span(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    duration = span.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    line = Text(" " * indent)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {span.get('name', '?')}")
    annotations = span.get("annotations") or {}
    if annotations:
        line.append("  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")")
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    is_violation = err is not None and err.code == "MOVEMENT_VIOLATION"

    if is_violation:
        line = Text("VIOLATION", style="tf.violation")
    else:
        line = Text("ERROR", style="tf.error")
    line.append(f"  {result.op}", style="tf.op")
    line.append(f" — {msg}")
    console.print(line)

    if err is not None and err.detail.get("required"):
        console.print(Text(f"  required: {', '.join(err.detail['required'])}", style="tf.key"))

    # Violations carry the unchanged session.
    if result.data:
        _session_fields(console, result.data, verbose=verbose)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Success renderers ─────────────────────────────────────────────────


def _render_session(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _session_fields(console, result.data, verbose=verbose)


def _render_session_list(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Truck", style="tf.truck", no_wrap=True)
    table.add_column("State")
    table.add_column("Tare", style="tf.weight", justify="right")
    table.add_column("Gross", style="tf.weight", justify="right")
    table.add_column("Visits", justify="right")
    table.add_column("Lock")
    table.add_column("Updated", style="dim")

    for item in items:
        state = str(item.get("state", ""))
        table.add_row(
            str(item.get("truck_id", "")),
            Text(state, style=style_for_state(state)),
            "-" if item.get("tare_weight") is None else str(item["tare_weight"]),
            "-" if item.get("gross_weight") is None else str(item["gross_weight"]),
            str(item.get("visit_count", 0)),
            "locked" if item.get("movement_lock") else "",
            str(item.get("updated_at", "")),
        )

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} sessions")


def _render_events(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Time", style="dim", no_wrap=True)
    table.add_column("Event")
    table.add_column("Message")
    if verbose:
        table.add_column("ID", justify="right", style="dim")

    for item in items:
        event_type = str(item.get("event_type", ""))
        row: list[Any] = [
            str(item.get("timestamp", "")),
            Text(event_type, style=style_for_event(event_type)),
            str(item.get("message", "")),
        ]
        if verbose:
            row.append(str(item.get("id", "")))
        table.add_row(*row)

    console.print(Text(f"Events for {result.data.get('truck_id', '?')}", style="tf.truck"))
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} events")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "session_start": _render_session,
    "session_tare": _render_session,
    "session_dock": _render_session,
    "session_gross": _render_session,
    "session_invoice": _render_session,
    "session_exit": _render_session,
    "session_show": _render_session,
    "session_list": _render_session_list,
    "events_list": _render_events,
}
