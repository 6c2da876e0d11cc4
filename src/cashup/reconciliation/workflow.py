#!/usr/bin/env python3
"""
Reconciliation Review Workflow

State transitions a manager applies to submitted records, and the query views
used to list them. Every transition returns a new record; the input record is
never modified, whether the transition succeeds or not.

Status lifecycle:
    pending_sync -> pending_review | variance_found    (once the outbox delivers it)
    pending_review | variance_found -> approved         (only when balanced)
    pending_review | variance_found -> requires_correction
    any -> approved | variance_found                    (edit and recompute)
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any

from ..core.dates import date_sort_key, utc_now_iso
from ..core.money import Money
from ..register.calculator import classify_variance, compute_variance
from .models import ReconciliationCalculations, ReconciliationRecord, ReconciliationStatus

logger = logging.getLogger(__name__)

SORT_KEYS = ("date", "variance")


class WorkflowTransitionError(Exception):
    """Raised (or returned in a WorkflowResult) when a review action is not allowed."""

    NOT_BALANCED = "not_balanced"
    REASON_REQUIRED = "reason_required"
    ALREADY_APPROVED = "already_approved"
    NOT_FOUND = "not_found"
    UPDATE_FAILED = "update_failed"

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class WorkflowResult:
    """Outcome of a review action: the new record on success, the error otherwise."""

    success: bool
    record: ReconciliationRecord | None = None
    error: WorkflowTransitionError | None = None

    @classmethod
    def ok(cls, record: ReconciliationRecord) -> "WorkflowResult":
        return cls(success=True, record=record)

    @classmethod
    def failed(cls, code: str, message: str) -> "WorkflowResult":
        return cls(success=False, error=WorkflowTransitionError(code, message))


@dataclass(frozen=True)
class FinancialEdits:
    """
    Manager corrections to a record's headline figures.

    Fields left as None keep the record's current value.
    """

    total_sales: Any = None
    total_eftpos: Any = None
    payouts: Any = None
    actual_banking: Any = None
    manager_comments: str | None = None


def initial_status(calculations: ReconciliationCalculations) -> ReconciliationStatus:
    """Status a newly delivered record starts in."""
    if calculations.is_balanced:
        return ReconciliationStatus.PENDING_REVIEW
    return ReconciliationStatus.VARIANCE_FOUND


def approve(record: ReconciliationRecord, reviewed_at: str | None = None) -> WorkflowResult:
    """
    Approve a balanced record.

    Args:
        record: Record to approve
        reviewed_at: ISO timestamp to stamp; defaults to now (UTC)

    Returns:
        WorkflowResult with the approved record, or a not_balanced error
    """
    if not record.calculations.is_balanced:
        return WorkflowResult.failed(
            WorkflowTransitionError.NOT_BALANCED,
            f"Cannot approve {record.id}: variance of {record.variance} must be resolved first",
        )
    logger.info(f"Approved reconciliation {record.id}")
    return WorkflowResult.ok(
        replace(record, status=ReconciliationStatus.APPROVED, reviewed_at=reviewed_at or utc_now_iso())
    )


def reject(record: ReconciliationRecord, reason: str, reviewed_at: str | None = None) -> WorkflowResult:
    """
    Send a record back to the employee for correction.

    Args:
        record: Record to reject
        reason: Why it is being rejected; stored as the manager comments
        reviewed_at: ISO timestamp to stamp; defaults to now (UTC)

    Returns:
        WorkflowResult with the rejected record, or a reason_required or
        already_approved error
    """
    if not reason or not reason.strip():
        return WorkflowResult.failed(WorkflowTransitionError.REASON_REQUIRED, "A rejection reason is required")
    if record.status is ReconciliationStatus.APPROVED:
        return WorkflowResult.failed(
            WorkflowTransitionError.ALREADY_APPROVED,
            f"Cannot reject {record.id}: it has already been approved",
        )
    logger.info(f"Rejected reconciliation {record.id}")
    return WorkflowResult.ok(
        replace(
            record,
            status=ReconciliationStatus.REQUIRES_CORRECTION,
            manager_comments=reason.strip(),
            reviewed_at=reviewed_at or utc_now_iso(),
        )
    )


def edit_and_recompute(
    record: ReconciliationRecord, edits: FinancialEdits, reviewed_at: str | None = None
) -> WorkflowResult:
    """
    Apply manager corrections and recompute the variance.

    The record lands in approved when the corrected figures balance, otherwise in
    variance_found. Register counts are not touched; actual banking is taken as
    entered by the manager.

    Args:
        record: Record to correct
        edits: New figures; None keeps the current value
        reviewed_at: ISO timestamp to stamp; defaults to now (UTC)

    Returns:
        WorkflowResult with the recomputed record
    """
    summary = record.summary

    def pick(value: Any, current: Money) -> Money:
        if value is None:
            return current
        return value if isinstance(value, Money) else Money.from_dollars(value)

    total_sales = pick(edits.total_sales, summary.total_sales)
    total_eftpos = pick(edits.total_eftpos, summary.total_eftpos)
    payouts = pick(edits.payouts, summary.payouts)
    actual_banking = pick(edits.actual_banking, summary.actual_banking)

    result = compute_variance(total_sales, total_eftpos, payouts, actual_banking)
    status = ReconciliationStatus.APPROVED if result.is_balanced else ReconciliationStatus.VARIANCE_FOUND

    new_summary = replace(
        summary,
        total_sales=total_sales,
        total_eftpos=total_eftpos,
        payouts=payouts,
        expected_banking=result.expected_banking,
        actual_banking=actual_banking,
        variance=result.variance,
    )
    new_calculations = replace(
        record.calculations,
        is_balanced=result.is_balanced,
        classification=classify_variance(result.variance),
    )
    manager_comments = record.manager_comments if edits.manager_comments is None else edits.manager_comments

    logger.info(f"Recomputed reconciliation {record.id}: variance {result.variance}, status {status.value}")
    return WorkflowResult.ok(
        replace(
            record,
            summary=new_summary,
            calculations=new_calculations,
            status=status,
            manager_comments=manager_comments,
            reviewed_at=reviewed_at or utc_now_iso(),
        )
    )


def filter_by_status(
    records: Iterable[ReconciliationRecord], status: ReconciliationStatus | str
) -> list[ReconciliationRecord]:
    """
    Records with the given status, in their original order.

    Args:
        records: Records to filter
        status: A ReconciliationStatus, its string value, or "all"

    Raises:
        ValueError: If status is not "all" or a known status value
    """
    if status == "all":
        return list(records)
    wanted = status if isinstance(status, ReconciliationStatus) else ReconciliationStatus(status)
    return [r for r in records if r.status is wanted]


def sort_records(records: Iterable[ReconciliationRecord], by: str = "date") -> list[ReconciliationRecord]:
    """
    Sort records for the review list.

    "date" puts the newest trading date first; "variance" puts the largest absolute
    variance first. Ties keep their original order.

    Raises:
        ValueError: If by is not a known sort key
    """
    if by == "date":
        return sorted(records, key=lambda r: date_sort_key(r.date), reverse=True)
    if by == "variance":
        return sorted(records, key=lambda r: r.variance.abs(), reverse=True)
    raise ValueError(f"Unknown sort key: {by} (expected one of {', '.join(SORT_KEYS)})")
