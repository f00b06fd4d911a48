"""Subcommand modules for truckflow.

register_commands() defers imports so ``truckflow --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach the ``session`` group and the ``events`` command to *cli*."""
    from truckflow.commands.events import events
    from truckflow.commands.session import session

    cli.add_command(session)
    cli.add_command(events)
