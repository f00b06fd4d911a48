"""Command group: truck session lifecycle."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from truckflow.commands._base import TruckflowGroup

if TYPE_CHECKING:
    from truckflow.commands._context import AppContext

_SESSION_EXAMPLES = """\
  truckflow session start T1
  truckflow session tare T1 12000
  truckflow session dock T1
  truckflow session gross T1 28000
  truckflow session invoice T1
  truckflow session exit T1
  truckflow session show T1
  truckflow --json session list"""


@click.group(cls=TruckflowGroup, examples=_SESSION_EXAMPLES)
def session() -> None:
    """Move a truck through entry, weighing, dock, invoice, and exit."""


@session.command(examples="  truckflow session start T1\n  truckflow --wire session start T1")
@click.argument("truck_id")
@click.pass_obj
def start(app: AppContext, truck_id: str) -> None:
    """Open a session in ENTRY for TRUCK_ID."""
    from truckflow.services.lifecycle import SessionLifecycleService

    app.emit(SessionLifecycleService(app.yard).start(truck_id))


@session.command(examples="  truckflow session tare T1 12000")
@click.argument("truck_id")
@click.argument("weight")
@click.pass_obj
def tare(app: AppContext, truck_id: str, weight: str) -> None:
    """Record the empty weight of TRUCK_ID."""
    from truckflow.services.lifecycle import SessionLifecycleService

    app.emit(SessionLifecycleService(app.yard).record_tare(truck_id, weight))


@session.command(examples="  truckflow session dock T1")
@click.argument("truck_id")
@click.pass_obj
def dock(app: AppContext, truck_id: str) -> None:
    """Admit TRUCK_ID to the loading dock."""
    from truckflow.services.lifecycle import SessionLifecycleService

    app.emit(SessionLifecycleService(app.yard).enter_dock(truck_id))


@session.command(examples="  truckflow session gross T1 28000")
@click.argument("truck_id")
@click.argument("weight")
@click.pass_obj
def gross(app: AppContext, truck_id: str, weight: str) -> None:
    """Record the loaded weight of TRUCK_ID."""
    from truckflow.services.lifecycle import SessionLifecycleService

    app.emit(SessionLifecycleService(app.yard).record_gross(truck_id, weight))


@session.command(examples="  truckflow session invoice T1")
@click.argument("truck_id")
@click.pass_obj
def invoice(app: AppContext, truck_id: str) -> None:
    """Generate the invoice for TRUCK_ID and lock further dock access."""
    from truckflow.services.lifecycle import SessionLifecycleService

    app.emit(SessionLifecycleService(app.yard).generate_invoice(truck_id))


@session.command(name="exit", examples="  truckflow session exit T1")
@click.argument("truck_id")
@click.pass_obj
def exit_cmd(app: AppContext, truck_id: str) -> None:
    """Close the session of TRUCK_ID."""
    from truckflow.services.lifecycle import SessionLifecycleService

    app.emit(SessionLifecycleService(app.yard).exit(truck_id))


@session.command(examples="  truckflow session show T1\n  truckflow -v session show T1")
@click.argument("truck_id")
@click.pass_obj
def show(app: AppContext, truck_id: str) -> None:
    """Show the active session of TRUCK_ID."""
    from truckflow.services.lifecycle import SessionLifecycleService

    app.emit(SessionLifecycleService(app.yard).get_active(truck_id))


@session.command(name="list", examples="  truckflow session list\n  truckflow -q session list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List all sessions, most recently updated first."""
    from truckflow.services.lifecycle import SessionLifecycleService

    app.emit(SessionLifecycleService(app.yard).list_all())
