"""Rich Console factory and theme for truckflow output.

Consoles render into a StringIO buffer so formatters keep a plain
``-> str`` contract.  In non-TTY environments (tests, pipes) Rich
drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TRUCKFLOW_THEME = Theme(
    {
        "tf.ok": "bold green",
        "tf.error": "bold red",
        "tf.violation": "bold magenta",
        "tf.op": "bold cyan",
        "tf.key": "dim",
        "tf.truck": "bold blue",
        "tf.weight": "yellow",
        "tf.state.entry": "white",
        "tf.state.weighed": "cyan",
        "tf.state.dock": "green",
        "tf.state.invoiced": "magenta",
        "tf.state.exited": "dim",
    }
)

_STATE_STYLES: dict[str, str] = {
    "ENTRY": "tf.state.entry",
    "TARE_DONE": "tf.state.weighed",
    "DOCK": "tf.state.dock",
    "GROSS_DONE": "tf.state.weighed",
    "INVOICE_GENERATED": "tf.state.invoiced",
    "EXITED": "tf.state.exited",
}

_EVENT_STYLES: dict[str, str] = {
    "REJECTED": "tf.error",
    "VIOLATION": "tf.violation",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=TRUCKFLOW_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_state(state: str) -> str:
    return _STATE_STYLES.get(state, "")


def style_for_event(event_type: str) -> str:
    return _EVENT_STYLES.get(event_type, "")
