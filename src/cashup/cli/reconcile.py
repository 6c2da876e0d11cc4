#!/usr/bin/env python3
"""
Reconciliation CLI - Count, calculate and submit a cash-up

Commands:
    cashup reconcile        Interactive step-by-step cash-up with autosave
    cashup calc FILE        Show the figures for a draft file
    cashup submit FILE      Submit a draft file
"""

from pathlib import Path
from typing import Any

import click
import yaml

from ..core.config import get_config
from ..core.json_utils import format_json
from ..reconciliation.models import ReconciliationDraft
from ..reconciliation.wizard import ReconciliationWizard, StepKind, SubmissionResult
from ..register.calculator import ReconciliationSnapshot, compute_snapshot
from ..register.config_normalizer import InvalidConfigError, StationConfig, normalize_config
from ..register.models import DENOMINATION_GROUPS
from .services import autosave_store, outbox, record_gateway, run, station_provider

GROUP_TITLES = {
    "notes": "Notes",
    "loose_coins": "Loose coins",
    "coin_rolls": "Coin rolls",
}


def _load_draft_file(draft_file: Path) -> dict[str, Any]:
    try:
        with open(draft_file) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise click.ClickException(f"Could not read draft file {draft_file}: {e}") from e
    if not isinstance(data, dict):
        raise click.ClickException(f"Draft file {draft_file} must contain a mapping")
    return data


def _load_station() -> StationConfig:
    try:
        return normalize_config(station_provider(get_config()).get_config())
    except InvalidConfigError as e:
        raise click.ClickException(f"Invalid station configuration: {e}") from e


def _open_wizard(employee: str | None, with_autosave: bool) -> ReconciliationWizard:
    config = get_config()
    try:
        return ReconciliationWizard.open(
            station_provider(config),
            record_gateway(config),
            autosave=autosave_store(config) if with_autosave else None,
            outbox=outbox(config),
            employee_name=employee or config.employee_name,
            autosave_key=config.storage.autosave_key,
            default_timezone=config.timezone,
        )
    except InvalidConfigError as e:
        raise click.ClickException(f"Invalid station configuration: {e}") from e


def print_snapshot(station: StationConfig, snapshot: ReconciliationSnapshot) -> None:
    """Print the banking summary for a snapshot."""
    click.echo("Registers:")
    for rc in station.register_configs:
        breakdown = snapshot.register_breakdowns[rc.index]
        click.echo(f"  {rc.name}")
        click.echo(f"    Notes:        {breakdown.notes_total}")
        click.echo(f"    Loose coins:  {breakdown.loose_total}")
        click.echo(f"    Coin rolls:   {breakdown.coin_roll_total}")
        click.echo(f"    Total:        {breakdown.total}")
        click.echo(f"    To bank:      {snapshot.register_bankable[rc.index]}")

    click.echo("=" * 40)
    click.echo(f"Total sales:       {snapshot.total_sales}")
    click.echo(f"EFTPOS:            {snapshot.terminals_total}")
    click.echo(f"Payouts:           {snapshot.payouts}")
    click.echo(f"Expected banking:  {snapshot.expected_banking}")
    click.echo(f"Actual banking:    {snapshot.actual_banking}")
    click.echo(f"Variance:          {snapshot.variance} ({snapshot.classification.value})")
    click.echo(f"Balanced:          {'yes' if snapshot.is_balanced else 'no'}")


def _report_submission(result: SubmissionResult) -> None:
    if result.success:
        click.echo(f"\nSubmitted {result.record.id} ({result.record.status.value})")
        return
    if result.queued:
        raise click.ClickException(
            f"Submission failed ({result.error}); {result.record.id} saved to the outbox, run 'cashup sync' to retry"
        )
    raise click.ClickException(f"Submission failed: {result.error}")


@click.command()
@click.argument("draft_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print figures as JSON")
def calc(draft_file: Path, as_json: bool) -> None:
    """
    Calculate banking and variance for a draft file.

    DRAFT_FILE is YAML or JSON with total_sales, terminal_amounts, payouts and
    one count sheet per register under registers.

    Example:
      cashup calc today.yaml
    """
    station = _load_station()
    draft = ReconciliationDraft.hydrate(ReconciliationDraft.blank(station, ""), _load_draft_file(draft_file))
    snapshot = compute_snapshot(station, draft.registers, draft.total_sales, draft.terminal_amounts, draft.payouts)

    if as_json:
        click.echo(format_json(snapshot.to_dict()))
        return
    print_snapshot(station, snapshot)


@click.command()
@click.argument("draft_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--employee", help="Submit under this name (default: CASHUP_EMPLOYEE_NAME)")
def submit(draft_file: Path, employee: str | None) -> None:
    """
    Submit a draft file for manager review.

    The record is written to the outbox first; if it cannot be stored it stays
    there for 'cashup sync'.

    Example:
      cashup submit today.yaml --employee "John Smith"
    """
    wizard = _open_wizard(employee, with_autosave=False)
    wizard.restore_draft(_load_draft_file(draft_file))
    print_snapshot(wizard.config, wizard.snapshot)
    _report_submission(run(wizard.submit()))


def _prompt_register(wizard: ReconciliationWizard, register_index: int) -> None:
    counts = wizard.draft.registers[register_index]
    for group, denominations in DENOMINATION_GROUPS.items():
        click.echo(f"  {GROUP_TITLES[group]}")
        current = counts.group(group)
        for d in denominations:
            value = click.prompt(f"    {d.label}", default=str(current.get(d.key, "")), show_default=False)
            wizard.set_count(register_index, group, d.key, value)
    breakdown = wizard.snapshot.register_breakdowns[register_index]
    click.echo(f"  Register total: {breakdown.total}, to bank: {wizard.snapshot.register_bankable[register_index]}")


def _prompt_sales(wizard: ReconciliationWizard) -> None:
    draft = wizard.draft
    wizard.set_total_sales(click.prompt("  Total sales", default=str(draft.total_sales), show_default=False))
    for tc in wizard.config.terminal_configs:
        if not tc.enabled:
            continue
        value = click.prompt(f"  {tc.name}", default=str(draft.terminal_amounts[tc.index]), show_default=False)
        wizard.set_terminal_amount(tc.index, value)
    wizard.set_payouts(click.prompt("  Payouts", default=str(draft.payouts), show_default=False))
    wizard.update_field("bag_number", click.prompt("  Bag number", default=draft.bag_number, show_default=False))
    wizard.update_field("comments", click.prompt("  Comments", default=draft.comments, show_default=False))


@click.command()
@click.option("--employee", help="Submit under this name (default: CASHUP_EMPLOYEE_NAME)")
@click.option("--fresh", is_flag=True, help="Discard any saved draft and start over")
def reconcile(employee: str | None, fresh: bool) -> None:
    """
    Walk through today's cash-up step by step.

    Every answer is saved as you go; if you stop part way, running the command
    again picks up the saved draft. Press Enter to keep the value shown.

    Example:
      cashup reconcile --employee "John Smith"
    """
    wizard = _open_wizard(employee, with_autosave=True)
    if fresh:
        wizard.start_new_draft()

    click.echo(f"Cash-up for {wizard.draft.date} ({wizard.employee_name})")
    while True:
        step = wizard.current
        click.echo(f"\nStep {step.index}/{wizard.step_count}: {step.label}")
        if step.kind is StepKind.REGISTER:
            _prompt_register(wizard, step.register_index)
        elif step.kind is StepKind.SALES_AND_POS:
            _prompt_sales(wizard)
        else:
            print_snapshot(wizard.config, wizard.snapshot)
            break
        wizard.next()

    click.echo()
    if not click.confirm("Submit this reconciliation?"):
        click.echo("Draft saved. Run 'cashup reconcile' again to continue.")
        return

    _report_submission(run(wizard.submit()))
