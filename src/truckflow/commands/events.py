"""Command: audit trail for a truck."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from truckflow.commands._base import TruckflowCommand

if TYPE_CHECKING:
    from truckflow.commands._context import AppContext


@click.command(
    cls=TruckflowCommand,
    examples="""\
  truckflow events T1
  truckflow -v events T1
  truckflow --json events T1""",
)
@click.argument("truck_id")
@click.pass_obj
def events(app: AppContext, truck_id: str) -> None:
    """Show every audit event recorded for TRUCK_ID, newest first."""
    from truckflow.services.audit import AuditQueryService

    app.emit(AuditQueryService(app.yard).list_events(truck_id))
