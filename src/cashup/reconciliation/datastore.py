#!/usr/bin/env python3
"""
Reconciliation DataStore Implementations

Local JSON-backed and in-memory implementations of the reconciliation ports:
draft autosave, the submission outbox, and the record gateway.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any

from ..core.datastore_mixin import DataStoreMixin
from ..core.json_utils import read_json, write_json
from .models import ReconciliationRecord, ReconciliationStatus
from .ports import GatewayResponse
from .workflow import filter_by_status

logger = logging.getLogger(__name__)

_SAFE_NAME = re.compile(r"[^A-Za-z0-9._-]+")


def _file_name(key: str) -> str:
    """Turn an autosave key or record id into a safe file name."""
    return _SAFE_NAME.sub("_", key).strip("._") or "draft"


class JsonAutosaveStore(DataStoreMixin):
    """
    Draft autosave kept as one JSON file per key.

    Reads never raise: a missing or corrupt file reads as no saved draft.
    """

    def __init__(self, autosave_dir: Path):
        """
        Initialize autosave store.

        Args:
            autosave_dir: Directory holding draft files (data/autosave)
        """
        super().__init__()
        self.autosave_dir = autosave_dir

    def _path(self, key: str) -> Path:
        return self.autosave_dir / f"{_file_name(key)}.json"

    def _store_files(self) -> list[Path]:
        return self._get_files_cached(self.autosave_dir, "*.json")

    def get(self, key: str) -> dict[str, Any] | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            data = read_json(path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable autosave {path}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def set(self, key: str, value: dict[str, Any]) -> None:
        write_json(self._path(key), value)
        self._invalidate_cache()

    def clear(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
        self._invalidate_cache()

    def item_count(self) -> int:
        return len(self._store_files())

    def summary_text(self) -> str:
        count = self.item_count()
        if count == 0:
            return "No saved drafts"
        return f"{count} saved draft(s)"


class InMemoryAutosave:
    """Autosave held in a dictionary; nothing survives the process."""

    def __init__(self):
        self._drafts: dict[str, dict[str, Any]] = {}

    def get(self, key: str) -> dict[str, Any] | None:
        return self._drafts.get(key)

    def set(self, key: str, value: dict[str, Any]) -> None:
        self._drafts[key] = value

    def clear(self, key: str) -> None:
        self._drafts.pop(key, None)


class JsonOutboxStore(DataStoreMixin):
    """Queued records kept as a single JSON list (data/outbox/outbox.json)."""

    def __init__(self, outbox_dir: Path):
        super().__init__()
        self.outbox_dir = outbox_dir
        self.outbox_file = outbox_dir / "outbox.json"

    def _store_files(self) -> list[Path]:
        return [self.outbox_file] if self.outbox_file.exists() else []

    def load(self) -> list[dict[str, Any]]:
        """
        Load queued records.

        Returns:
            Queued record dictionaries, or an empty list if the file is missing

        Raises:
            ValueError: If the outbox file exists but is not a JSON list
        """
        if not self.outbox_file.exists():
            return []
        try:
            data = read_json(self.outbox_file)
        except json.JSONDecodeError as e:
            raise ValueError(f"Corrupt outbox file {self.outbox_file}: {e}") from e
        if not isinstance(data, list):
            raise ValueError(f"Outbox file {self.outbox_file} does not contain a list")
        return data

    def save(self, records: list[dict[str, Any]]) -> None:
        write_json(self.outbox_file, records)
        self._invalidate_cache()

    def item_count(self) -> int:
        return len(self.load())

    def summary_text(self) -> str:
        count = self.item_count()
        if count == 0:
            return "Outbox empty"
        return f"{count} record(s) waiting to sync"


class InMemoryOutboxStore:
    """Outbox held in a list."""

    def __init__(self, records: list[dict[str, Any]] | None = None):
        self._records: list[dict[str, Any]] = list(records or [])

    def load(self) -> list[dict[str, Any]]:
        return list(self._records)

    def save(self, records: list[dict[str, Any]]) -> None:
        self._records = list(records)


class JsonRecordGateway(DataStoreMixin):
    """
    Submission gateway writing one JSON file per record (data/records/<id>.json).

    Stands in for the back-office service when the app runs standalone. File
    errors are reported in the GatewayResponse rather than raised.
    """

    def __init__(self, records_dir: Path):
        """
        Initialize record gateway.

        Args:
            records_dir: Directory holding record files
        """
        super().__init__()
        self.records_dir = records_dir

    def _path(self, record_id: str) -> Path:
        return self.records_dir / f"{_file_name(record_id)}.json"

    def _store_files(self) -> list[Path]:
        return self._get_files_cached(self.records_dir, "*.json")

    async def submit(self, record: ReconciliationRecord, employee_name: str) -> GatewayResponse:
        path = self._path(record.id)
        if path.exists():
            return GatewayResponse.already_stored(record.id)
        try:
            write_json(path, record.to_dict())
        except OSError as e:
            logger.error(f"Failed to store record {record.id}: {e}")
            return GatewayResponse.failed(str(e))
        self._invalidate_cache()
        logger.info(f"Stored record {record.id} submitted by {employee_name}")
        return GatewayResponse.ok(record)

    async def update(self, record: ReconciliationRecord) -> GatewayResponse:
        path = self._path(record.id)
        if not path.exists():
            return GatewayResponse.failed(f"Record {record.id} not found")
        try:
            write_json(path, record.to_dict())
        except OSError as e:
            logger.error(f"Failed to update record {record.id}: {e}")
            return GatewayResponse.failed(str(e))
        self._invalidate_cache()
        return GatewayResponse.ok(record)

    async def list(self, status: ReconciliationStatus | str = "all") -> GatewayResponse:
        records = []
        for path in self._store_files():
            try:
                records.append(ReconciliationRecord.from_dict(read_json(path)))
            except (OSError, json.JSONDecodeError, KeyError, ValueError) as e:
                logger.warning(f"Skipping unreadable record file {path}: {e}")
        return GatewayResponse.listing(filter_by_status(records, status))

    def item_count(self) -> int:
        return len(self._store_files())

    def summary_text(self) -> str:
        count = self.item_count()
        if count == 0:
            return "No records stored"
        return f"{count} record(s) stored"


class InMemoryGateway:
    """
    Gateway keeping records in a dictionary.

    Set fail_with to an error message to make every call fail, simulating an
    unreachable back office.
    """

    def __init__(self, records: list[ReconciliationRecord] | None = None, fail_with: str | None = None):
        self.records: dict[str, ReconciliationRecord] = {r.id: r for r in records or []}
        self.fail_with = fail_with
        self.submitted_by: list[str] = []

    async def submit(self, record: ReconciliationRecord, employee_name: str) -> GatewayResponse:
        if self.fail_with:
            return GatewayResponse.failed(self.fail_with)
        if record.id in self.records:
            return GatewayResponse.already_stored(record.id)
        self.records[record.id] = record
        self.submitted_by.append(employee_name)
        return GatewayResponse.ok(record)

    async def update(self, record: ReconciliationRecord) -> GatewayResponse:
        if self.fail_with:
            return GatewayResponse.failed(self.fail_with)
        if record.id not in self.records:
            return GatewayResponse.failed(f"Record {record.id} not found")
        self.records[record.id] = record
        return GatewayResponse.ok(record)

    async def list(self, status: ReconciliationStatus | str = "all") -> GatewayResponse:
        if self.fail_with:
            return GatewayResponse.failed(self.fail_with)
        return GatewayResponse.listing(filter_by_status(self.records.values(), status))
