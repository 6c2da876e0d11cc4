#!/usr/bin/env python3
"""
Stations CLI - Register and terminal layout

Shows and checks the venue's station configuration file.
"""

import click
import yaml

from ..core.config import get_config
from ..register.config_normalizer import (
    InvalidConfigError,
    default_station_config,
    normalize_config,
    validate_config,
)
from .services import station_provider


@click.group()
def stations() -> None:
    """Station layout commands."""
    pass


@stations.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """
    Show the normalized register and terminal layout.

    Example:
      cashup stations show
    """
    config = get_config()
    provider = station_provider(config)

    if not provider.stations_file.exists():
        click.echo(f"No stations file at {provider.stations_file}; showing default layout")

    try:
        station = normalize_config(provider.get_config())
    except InvalidConfigError as e:
        raise click.ClickException(f"Invalid station configuration: {e}") from e

    if station.tenant_name:
        click.echo(f"Venue: {station.tenant_name}")
    click.echo(f"Registers ({station.register_count}), reserve {station.reserve_amount} each:")
    for rc in station.register_configs:
        click.echo(f"  {rc.index + 1}. {rc.name}")

    click.echo(f"POS Terminals ({station.terminal_count}):")
    for tc in station.terminal_configs:
        state = "enabled" if tc.enabled else "disabled"
        click.echo(f"  {tc.index + 1}. {tc.name} ({state})")

    rec = station.reconciliation
    click.echo(f"Daily deadline: {rec.daily_deadline}")
    click.echo(f"Variance tolerance: {rec.variance_tolerance}")
    click.echo(f"Manager approval required: {'yes' if rec.require_manager_approval else 'no'}")


@stations.command()
def validate() -> None:
    """
    Check the stations file without repairing it.

    Exits non-zero when the file would need normalizing.
    """
    config = get_config()
    stations_file = config.stations_file
    if not stations_file.exists():
        raise click.ClickException(f"No stations file at {stations_file}")

    try:
        with open(stations_file) as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise click.ClickException(f"Could not parse {stations_file}: {e}") from e

    errors = validate_config(raw)
    if errors:
        for error in errors:
            click.echo(f"  - {error}", err=True)
        raise click.ClickException(f"{len(errors)} problem(s) in {stations_file}")

    click.echo(f"{stations_file} is valid")


@stations.command()
@click.option("--force", is_flag=True, help="Overwrite an existing stations file")
def init(force: bool) -> None:
    """Write the default two-register layout to the stations file."""
    config = get_config()
    provider = station_provider(config)

    if provider.stations_file.exists() and not force:
        raise click.ClickException(f"{provider.stations_file} already exists (use --force to overwrite)")

    provider.save(default_station_config())
    click.echo(f"Wrote default station layout to {provider.stations_file}")
