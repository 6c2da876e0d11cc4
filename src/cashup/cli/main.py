#!/usr/bin/env python3
"""
Main CLI Entry Point for Cash-Up

Provides unified command-line interface for counting, submitting and reviewing
end-of-day cash reconciliations.
"""

import click

from ..core.config import get_config, reload_config
from ..core.datastore_mixin import DataStoreMixin, DataSummary
from ..core.json_utils import format_json
from .services import autosave_store, outbox, record_gateway


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Cash-Up - End-of-Day Cash Drawer Reconciliation

    Count each register, record sales and EFTPOS takings, work out what should
    be banked, and send the result to a manager for review.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)

    # Set environment if specified
    if config_env:
        import os

        os.environ["CASHUP_ENV"] = config_env

    # Configure debug logging if requested
    if debug:
        import logging
        import os

        os.environ["LOG_LEVEL"] = "DEBUG"
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("cashup").setLevel(logging.DEBUG)

    # Store global options
    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    try:
        ctx.obj["config"] = reload_config() if config_env or debug else get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        click.echo(f"Environment: {ctx.obj['config'].environment.value}")
        click.echo(f"Data directory: {ctx.obj['config'].data_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show version information."""
    from cashup import __author__, __version__

    click.echo(f"Cash-Up v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print configuration as JSON")
@click.pass_context
def config(ctx: click.Context, as_json: bool) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    if as_json:
        click.echo(format_json(config_obj.to_dict()))
        return

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Data Directory: {config_obj.data_dir}")
    click.echo(f"  Stations File: {config_obj.stations_file}")
    click.echo(f"  Records Directory: {config_obj.storage.records_dir}")
    click.echo(f"  Outbox Directory: {config_obj.storage.outbox_dir}")
    click.echo(f"  Employee: {config_obj.employee_name}")
    click.echo(f"  Timezone: {config_obj.timezone or 'local'}")
    click.echo(f"  Debug Mode: {config_obj.debug}")
    click.echo(f"  Log Level: {config_obj.log_level}")


def _format_summary(label: str, summary: DataSummary) -> str:
    line = f"  {label:<10} {summary.summary_text}"
    if summary.exists:
        line += f" ({summary.size_bytes:,} bytes, updated {summary.last_updated:%Y-%m-%d %H:%M}"
        line += f", {summary.age_days} day(s) ago)"
    return line


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """
    Show what is stored locally.

    Lists stored records, records waiting in the outbox and saved drafts, with
    how large and how old each store is.
    """
    config_obj = ctx.obj["config"]
    stores: list[tuple[str, DataStoreMixin]] = [
        ("Records", record_gateway(config_obj)),
        ("Outbox", outbox(config_obj).store),
        ("Drafts", autosave_store(config_obj)),
    ]

    click.echo("Local Data:")
    for label, store in stores:
        try:
            click.echo(_format_summary(label, store.to_data_summary()))
        except (OSError, ValueError) as e:
            click.echo(f"  {label:<10} unreadable: {e}", err=True)


# Import command groups
from .reconcile import calc, reconcile, submit  # noqa: E402
from .review import review, sync  # noqa: E402
from .stations import stations  # noqa: E402

main.add_command(stations)
main.add_command(calc)
main.add_command(reconcile)
main.add_command(submit)
main.add_command(review)
main.add_command(sync)


if __name__ == "__main__":
    main()
