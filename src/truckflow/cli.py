"""Root CLI group for truckflow with global flags and command registration."""

from __future__ import annotations

import click

from truckflow import __version__
from truckflow.commands import register_commands
from truckflow.commands._context import AppContext
from truckflow.config.settings import TruckflowSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="truckflow")
@click.option("--json", "json_output", is_flag=True, help="Full ServiceResult as JSON.")
@click.option("--wire", is_flag=True, help="{success, data, message} envelope as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and operation timings.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    wire: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """truckflow: weighbridge and loading-dock session tracking."""
    settings = TruckflowSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        wire=wire,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
