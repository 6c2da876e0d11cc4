#!/usr/bin/env python3
"""
Submission Outbox

Records are written to the outbox before they are sent, so a cash-up is never
lost to a network failure. A later sync delivers whatever is still queued.
"""

import logging
from dataclasses import dataclass, field, replace

from .models import ReconciliationRecord, ReconciliationStatus
from .ports import OutboxStore, SubmissionGateway
from .workflow import initial_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncReport:
    """Result of delivering the outbox."""

    synced_count: int
    total_count: int
    failed_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def all_synced(self) -> bool:
        return self.synced_count == self.total_count


class Outbox:
    """Queue of records waiting for the gateway, backed by an OutboxStore."""

    def __init__(self, store: OutboxStore):
        self.store = store

    def enqueue(self, record: ReconciliationRecord) -> ReconciliationRecord:
        """
        Queue a record, tagging it pending_sync.

        A record already queued under the same id is replaced.

        Returns:
            The record as queued
        """
        queued = replace(record, status=ReconciliationStatus.PENDING_SYNC)
        entries = [e for e in self.store.load() if e.get("id") != record.id]
        entries.append(queued.to_dict())
        self.store.save(entries)
        logger.debug(f"Queued record {record.id} ({len(entries)} in outbox)")
        return queued

    def remove(self, record_id: str) -> bool:
        """
        Drop a record from the queue.

        Returns:
            True if a record was removed
        """
        entries = self.store.load()
        remaining = [e for e in entries if e.get("id") != record_id]
        if len(remaining) == len(entries):
            return False
        self.store.save(remaining)
        return True

    def pending(self) -> list[ReconciliationRecord]:
        """Queued records in the order they were queued."""
        return [ReconciliationRecord.from_dict(e) for e in self.store.load()]

    def __len__(self) -> int:
        return len(self.store.load())

    async def deliver(
        self, record: ReconciliationRecord, gateway: SubmissionGateway, employee_name: str | None = None
    ) -> str | None:
        """
        Send one queued record and drop it from the queue if the gateway accepts it.

        The record is sent with the status it would have had if submitted directly.
        A gateway that already holds a record with this id has it delivered, so
        the queued copy is dropped.

        Returns:
            None on success, otherwise the gateway's error message
        """
        outgoing = replace(record, status=initial_status(record.calculations))
        try:
            response = await gateway.submit(outgoing, employee_name or record.employee_name)
        except Exception as e:
            logger.warning(f"Gateway error sending {record.id}: {e}")
            return str(e)
        if response.duplicate:
            logger.info(f"Record {record.id} was already delivered")
        elif not response.success:
            return response.error or "Submission failed"
        self.remove(record.id)
        return None

    async def drain(self, gateway: SubmissionGateway) -> SyncReport:
        """
        Attempt to send every queued record.

        Each record is tried independently; a failure leaves that record queued and
        moves on to the next.

        Args:
            gateway: Where to send records

        Returns:
            SyncReport with counts and the ids that stayed queued
        """
        queued = self.pending()
        failed: list[str] = []
        for record in queued:
            error = await self.deliver(record, gateway)
            if error is not None:
                logger.warning(f"Record {record.id} still queued: {error}")
                failed.append(record.id)

        report = SyncReport(
            synced_count=len(queued) - len(failed),
            total_count=len(queued),
            failed_ids=tuple(failed),
        )
        logger.info(f"Outbox sync: {report.synced_count}/{report.total_count} record(s) delivered")
        return report
