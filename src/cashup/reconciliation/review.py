#!/usr/bin/env python3
"""
Manager Review Board

Holds the manager's working list of records and persists review actions through
the gateway. Results are applied in the order they resolve, so the most recently
resolved refresh or action is what the board shows.
"""

import logging

from .models import ReconciliationRecord, ReconciliationStatus
from .outbox import Outbox, SyncReport
from .ports import SubmissionGateway
from .workflow import (
    FinancialEdits,
    WorkflowResult,
    WorkflowTransitionError,
    approve,
    edit_and_recompute,
    filter_by_status,
    reject,
    sort_records,
)

logger = logging.getLogger(__name__)


class ReviewBoard:
    """In-memory list of records under review."""

    def __init__(self, gateway: SubmissionGateway, outbox: Outbox | None = None):
        self.gateway = gateway
        self.outbox = outbox
        self.records: list[ReconciliationRecord] = []
        self.last_error: str | None = None

    async def refresh(self) -> bool:
        """
        Reload the record list from the gateway.

        Records still waiting in the outbox are listed too, as pending_sync. A
        gateway record with the same id takes their place.

        On failure the current list is kept and the error is stored in last_error.

        Returns:
            True if the list was replaced
        """
        try:
            response = await self.gateway.list()
        except Exception as e:
            logger.warning(f"Failed to load records: {e}")
            self.last_error = str(e)
            return False
        if not response.success:
            self.last_error = response.error or "Failed to load records"
            return False
        records = list(response.records)
        stored_ids = {r.id for r in records}
        records.extend(r for r in self._queued() if r.id not in stored_ids)
        self.records = records
        self.last_error = None
        return True

    def _queued(self) -> list[ReconciliationRecord]:
        if self.outbox is None:
            return []
        try:
            return self.outbox.pending()
        except Exception as e:
            logger.warning(f"Could not read outbox: {e}")
            return []

    async def sync_pending(self) -> SyncReport:
        """Deliver the outbox, then refresh the list."""
        if self.outbox is None:
            return SyncReport(synced_count=0, total_count=0)
        report = await self.outbox.drain(self.gateway)
        if report.synced_count:
            await self.refresh()
        return report

    def get(self, record_id: str) -> ReconciliationRecord | None:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def view(self, status: ReconciliationStatus | str = "all", sort_by: str = "date") -> list[ReconciliationRecord]:
        """Filtered and sorted copy of the board."""
        return sort_records(filter_by_status(self.records, status), by=sort_by)

    async def approve(self, record_id: str) -> WorkflowResult:
        return await self._apply(record_id, approve)

    async def reject(self, record_id: str, reason: str) -> WorkflowResult:
        return await self._apply(record_id, lambda r: reject(r, reason))

    async def edit(self, record_id: str, edits: FinancialEdits) -> WorkflowResult:
        return await self._apply(record_id, lambda r: edit_and_recompute(r, edits))

    async def _apply(self, record_id: str, transition) -> WorkflowResult:
        record = self.get(record_id)
        if record is None:
            return WorkflowResult.failed(WorkflowTransitionError.NOT_FOUND, f"No record with id {record_id}")
        if record.status is ReconciliationStatus.PENDING_SYNC:
            return WorkflowResult.failed(
                WorkflowTransitionError.UPDATE_FAILED, f"Record {record_id} is still in the outbox, sync it first"
            )

        result = transition(record)
        if not result.success:
            return result

        try:
            response = await self.gateway.update(result.record)
        except Exception as e:
            logger.warning(f"Failed to save {record_id}: {e}")
            return WorkflowResult.failed(WorkflowTransitionError.UPDATE_FAILED, str(e))
        if not response.success:
            return WorkflowResult.failed(WorkflowTransitionError.UPDATE_FAILED, response.error or "Update failed")

        self._replace(result.record)
        return result

    def _replace(self, record: ReconciliationRecord) -> None:
        self.records = [record if r.id == record.id else r for r in self.records]
