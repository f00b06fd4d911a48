"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``.  Opens the Yard lazily so ``--help`` and
``--version`` never touch the database, and centralizes result emission
(stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from truckflow.config.logging import configure_logging
from truckflow.output.formatters import OutputSettings, format_result
from truckflow.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from truckflow.config.settings import TruckflowSettings
    from truckflow.infrastructure.yard import Yard
    from truckflow.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: TruckflowSettings) -> None:
        self.settings = settings
        self._yard: Yard | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def yard(self) -> Yard:
        """The yard (created on first access)."""
        if self._yard is None:
            from truckflow.infrastructure.yard import Yard

            self._yard = Yard(self.settings)
        return self._yard

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        * Success: stdout, exit 0.  Warnings go to stderr (human mode only).
        * Failure: stderr, exit 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            wire=self.settings.wire,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not (settings.json_output or settings.wire):
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            return

        click.echo(output, err=True)
        raise SystemExit(1)
