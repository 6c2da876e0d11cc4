#!/usr/bin/env python3
"""
Review CLI - Manager review of submitted cash-ups

Lists, approves, rejects and corrects stored records, exports them to CSV, and
delivers records still waiting in the outbox.
"""

from pathlib import Path

import click

from ..core.config import get_config
from ..core.currency import format_cents
from ..reconciliation.models import ReconciliationRecord, ReconciliationStatus
from ..reconciliation.report import export_records_csv, records_to_dataframe, summarize_records
from ..reconciliation.review import ReviewBoard
from ..reconciliation.workflow import SORT_KEYS, FinancialEdits, WorkflowResult
from .services import outbox, record_gateway, run

STATUS_CHOICES = ["all"] + [s.value for s in ReconciliationStatus]


def _load_board() -> ReviewBoard:
    config = get_config()
    board = ReviewBoard(record_gateway(config), outbox(config))
    if not run(board.refresh()):
        raise click.ClickException(f"Could not load records: {board.last_error}")
    return board


def _record_line(record: ReconciliationRecord) -> str:
    return (
        f"{record.date}  {record.id:<32} {record.employee_name:<20} "
        f"{record.status.value:<20} {record.variance.to_decimal_str():>10}"
    )


def _finish(result: WorkflowResult, verb: str) -> None:
    if not result.success:
        raise click.ClickException(f"{result.error} [{result.error.code}]")
    record = result.record
    click.echo(f"{verb} {record.id}: status {record.status.value}, variance {record.variance}")


@click.group()
def review() -> None:
    """Manager review commands."""
    pass


@review.command(name="list")
@click.option("--status", type=click.Choice(STATUS_CHOICES), default="all", help="Only show this status")
@click.option("--sort", "sort_by", type=click.Choice(list(SORT_KEYS)), default=None, help="Sort order")
@click.pass_context
def list_records(ctx: click.Context, status: str, sort_by: str | None) -> None:
    """
    List submitted records.

    Examples:
      cashup review list
      cashup review list --status variance_found --sort variance
    """
    config = get_config()
    board = _load_board()
    records = board.view(status, sort_by or config.review.default_sort)

    if not records:
        click.echo("No records found.")
        return

    for record in records:
        click.echo(_record_line(record))
    click.echo(f"\n{len(records)} record(s)")


@review.command()
@click.argument("record_id")
def show(record_id: str) -> None:
    """Show one record in full."""
    record = _load_board().get(record_id)
    if record is None:
        raise click.ClickException(f"No record with id {record_id}")

    summary = record.summary
    click.echo(f"Record {record.id}")
    click.echo(f"  Date: {record.date}")
    click.echo(f"  Employee: {record.employee_name}")
    click.echo(f"  Status: {record.status.value}")
    click.echo(f"  Submitted: {record.submitted_at}")
    if record.reviewed_at:
        click.echo(f"  Reviewed: {record.reviewed_at}")
    for entry in record.registers:
        click.echo(f"  {entry.name}: {entry.breakdown.total} counted, {entry.bankable} to bank")
    for terminal in record.pos_terminals:
        if terminal.enabled:
            click.echo(f"  {terminal.name}: {terminal.amount}")
    click.echo(f"  Total sales: {summary.total_sales}")
    click.echo(f"  EFTPOS: {summary.total_eftpos}")
    click.echo(f"  Payouts: {summary.payouts}")
    click.echo(f"  Expected banking: {summary.expected_banking}")
    click.echo(f"  Actual banking: {summary.actual_banking}")
    click.echo(f"  Variance: {summary.variance} ({record.calculations.classification.value})")
    if record.bag_number:
        click.echo(f"  Bag: {record.bag_number}")
    if record.comments:
        click.echo(f"  Comments: {record.comments}")
    if record.manager_comments:
        click.echo(f"  Manager comments: {record.manager_comments}")


@review.command()
@click.argument("record_id")
def approve(record_id: str) -> None:
    """Approve a balanced record."""
    board = _load_board()
    _finish(run(board.approve(record_id)), "Approved")


@review.command()
@click.argument("record_id")
@click.option("--reason", required=True, help="Why the record needs correcting")
def reject(record_id: str, reason: str) -> None:
    """Send a record back for correction."""
    board = _load_board()
    _finish(run(board.reject(record_id, reason)), "Rejected")


@review.command()
@click.argument("record_id")
@click.option("--total-sales", help="Corrected total sales")
@click.option("--eftpos", help="Corrected EFTPOS total")
@click.option("--payouts", help="Corrected payouts")
@click.option("--actual-banking", help="Corrected actual banking")
@click.option("--comments", help="Manager comments")
def edit(
    record_id: str,
    total_sales: str | None,
    eftpos: str | None,
    payouts: str | None,
    actual_banking: str | None,
    comments: str | None,
) -> None:
    """
    Correct a record's figures and recompute its variance.

    The record is approved if the corrected figures balance.

    Example:
      cashup review edit 2025-08-18-john-3f2a9c1e --actual-banking 1250.00
    """
    edits = FinancialEdits(
        total_sales=total_sales,
        total_eftpos=eftpos,
        payouts=payouts,
        actual_banking=actual_banking,
        manager_comments=comments,
    )
    board = _load_board()
    _finish(run(board.edit(record_id, edits)), "Updated")


@review.command()
@click.option("--output", "output_file", type=click.Path(path_type=Path), help="CSV file to write")
@click.option("--status", type=click.Choice(STATUS_CHOICES), default="all", help="Only export this status")
def export(output_file: Path | None, status: str) -> None:
    """Export records to CSV."""
    config = get_config()
    board = _load_board()
    records = board.view(status, "date")

    if output_file is None:
        output_file = config.review.export_dir / "reconciliations.csv"

    count = export_records_csv(records, output_file)
    stats = summarize_records(records_to_dataframe(records))

    click.echo(f"Exported {count} record(s) to {output_file}")
    click.echo(f"  Balanced: {stats['balanced_count']}/{stats['record_count']}")
    click.echo(f"  Net variance: {format_cents(stats['net_variance_cents'])}")


@click.command()
def sync() -> None:
    """
    Send records waiting in the outbox.

    Example:
      cashup sync
    """
    config = get_config()
    pending = outbox(config)
    if len(pending) == 0:
        click.echo("Outbox empty, nothing to sync.")
        return

    report = run(pending.drain(record_gateway(config)))
    click.echo(f"Synced {report.synced_count}/{report.total_count} record(s)")
    if report.failed_ids:
        for record_id in report.failed_ids:
            click.echo(f"  still queued: {record_id}", err=True)
        raise click.ClickException(f"{len(report.failed_ids)} record(s) could not be sent")
