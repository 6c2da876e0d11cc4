#!/usr/bin/env python3
"""
Reconciliation Ports - Interfaces to the world outside the cash-up.

The wizard and review board only talk to storage and the back office through
these protocols, so the same code runs against local JSON files, an in-memory
fake, or a remote service.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from .models import ReconciliationRecord, ReconciliationStatus


@dataclass(frozen=True)
class GatewayResponse:
    """
    Outcome of a gateway call.

    A gateway reports failure through this object rather than raising, so callers
    can decide whether to queue or retry.
    """

    success: bool
    record: ReconciliationRecord | None = None
    records: tuple[ReconciliationRecord, ...] = ()
    error: str | None = None
    duplicate: bool = False

    @classmethod
    def ok(cls, record: ReconciliationRecord | None = None) -> "GatewayResponse":
        return cls(success=True, record=record)

    @classmethod
    def listing(cls, records: list[ReconciliationRecord]) -> "GatewayResponse":
        return cls(success=True, records=tuple(records))

    @classmethod
    def failed(cls, error: str) -> "GatewayResponse":
        return cls(success=False, error=error)

    @classmethod
    def already_stored(cls, record_id: str) -> "GatewayResponse":
        """A submit refused because a record with this id is already stored."""
        return cls(success=False, error=f"Record {record_id} already exists", duplicate=True)


class ConfigProvider(Protocol):
    """Source of the raw station configuration."""

    def get_config(self) -> dict[str, Any]:
        """
        Fetch the raw station configuration.

        Returns:
            Unnormalized configuration mapping (camelCase or snake_case keys)
        """
        ...


class SubmissionGateway(Protocol):
    """Where submitted records go and where managers read them back from."""

    async def submit(self, record: ReconciliationRecord, employee_name: str) -> GatewayResponse:
        """
        Submit a new record on behalf of an employee.

        Args:
            record: Record to store
            employee_name: Name of the submitting employee

        Returns:
            GatewayResponse with success flag or error; a record id that is
            already stored comes back as GatewayResponse.already_stored()
        """
        ...

    async def update(self, record: ReconciliationRecord) -> GatewayResponse:
        """
        Persist a reviewed record, replacing the stored copy with the same id.

        Review transitions always produce a whole new record (status, review
        fields and recomputed summary together), so the full record is sent
        rather than a partial set of changed fields.
        """
        ...

    async def list(self, status: ReconciliationStatus | str = "all") -> GatewayResponse:
        """
        Fetch stored records in GatewayResponse.records.

        Args:
            status: Only return records with this status; "all" returns everything

        Raises:
            ValueError: If status is not "all" or a known status value
        """
        ...


class LocalAutosave(Protocol):
    """Best-effort storage for an in-progress draft."""

    def get(self, key: str) -> dict[str, Any] | None:
        ...

    def set(self, key: str, value: dict[str, Any]) -> None:
        ...

    def clear(self, key: str) -> None:
        ...


class OutboxStore(Protocol):
    """Durable list of records waiting to be sent."""

    def load(self) -> list[dict[str, Any]]:
        """
        Load queued records as dictionaries.

        Returns:
            Queued records in insertion order; empty when nothing is stored
        """
        ...

    def save(self, records: list[dict[str, Any]]) -> None:
        """Replace the stored queue."""
        ...
