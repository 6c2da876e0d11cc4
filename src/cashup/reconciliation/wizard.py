#!/usr/bin/env python3
"""
Reconciliation Wizard

Walks an employee through the end-of-day cash-up: one step per register, then
sales and EFTPOS, then banking and review. Owns the in-progress draft, keeps the
derived figures current after every edit, autosaves, and submits the finished
record.

Steps are numbered from 1. With N registers:
    1..N   count register i
    N+1    sales & POS
    N+2    banking & review
"""

import logging
import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from ..core.dates import TradingDate, utc_now_iso
from ..register.calculator import ReconciliationSnapshot, compute_snapshot
from ..register.config_normalizer import StationConfig, normalize_config
from .models import ReconciliationDraft, ReconciliationRecord, ReconciliationStatus, build_record
from .outbox import Outbox
from .ports import ConfigProvider, GatewayResponse, LocalAutosave, SubmissionGateway
from .workflow import initial_status

logger = logging.getLogger(__name__)

DEFAULT_AUTOSAVE_KEY = "cashup-reconciliation"

_SCALAR_FIELDS = {
    "date": "date",
    "total_sales": "total_sales",
    "totalSales": "total_sales",
    "payouts": "payouts",
    "comments": "comments",
    "bag_number": "bag_number",
    "bagNumber": "bag_number",
}
_TERMINAL_PREFIXES = ("terminals", "terminal_amounts", "posTerminals")


class StepKind(Enum):
    """What a wizard step asks the employee for."""

    REGISTER = "register"
    SALES_AND_POS = "sales_and_pos"
    BANKING_REVIEW = "banking_review"


@dataclass(frozen=True)
class StepDescriptor:
    """One wizard step. register_index is set only for REGISTER steps."""

    index: int
    label: str
    kind: StepKind
    register_index: int | None = None


def build_steps(config: StationConfig) -> tuple[StepDescriptor, ...]:
    """Step list for a station layout."""
    steps = [
        StepDescriptor(index=rc.index + 1, label=rc.name, kind=StepKind.REGISTER, register_index=rc.index)
        for rc in config.register_configs
    ]
    n = config.register_count
    steps.append(StepDescriptor(index=n + 1, label="Sales & POS", kind=StepKind.SALES_AND_POS))
    steps.append(StepDescriptor(index=n + 2, label="Banking & Review", kind=StepKind.BANKING_REVIEW))
    return tuple(steps)


def _trading_date(config: StationConfig, default_timezone: str | None) -> str:
    """Today in the venue timezone, falling back to default_timezone."""
    return TradingDate.today(config.timezone or default_timezone).to_iso_string()


def make_record_id(date: str, employee_name: str) -> str:
    """
    Build a record id like "2025-08-18-john-3f2a9c1e".

    The random suffix keeps two submissions by the same person on the same day
    apart.
    """
    slug = re.sub(r"[^a-z0-9]+", "-", employee_name.lower()).strip("-") or "employee"
    return f"{date}-{slug}-{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class SubmissionResult:
    """
    Outcome of submitting the draft.

    queued is True when the record is sitting in the outbox as pending_sync
    because the gateway did not accept it.
    """

    success: bool
    record: ReconciliationRecord | None = None
    error: str | None = None
    queued: bool = False


class ReconciliationWizard:
    """
    Stateful controller for one employee's cash-up.

    Use ReconciliationWizard.open() to load the station layout and any saved
    draft. Navigation is unguarded: any step can be visited at any time and
    incomplete fields simply count as zero.
    """

    def __init__(
        self,
        config: StationConfig,
        gateway: SubmissionGateway,
        draft: ReconciliationDraft | None = None,
        autosave: LocalAutosave | None = None,
        outbox: Outbox | None = None,
        employee_name: str = "",
        autosave_key: str = DEFAULT_AUTOSAVE_KEY,
        default_timezone: str | None = None,
    ):
        self.config = config
        self.default_timezone = default_timezone
        self.gateway = gateway
        self.autosave = autosave
        self.outbox = outbox
        self.employee_name = employee_name
        self.autosave_key = autosave_key

        self.draft = draft if draft is not None else self._blank_draft()
        self.draft.resize_to(config)
        self.steps = build_steps(config)
        self.current_step = 1
        self.snapshot: ReconciliationSnapshot = self._compute()

        # Bumped whenever the draft a pending submission belongs to goes away
        self._generation = 0
        self._submitting = False
        self._closed = False

    @classmethod
    def open(
        cls,
        config_provider: ConfigProvider,
        gateway: SubmissionGateway,
        autosave: LocalAutosave | None = None,
        outbox: Outbox | None = None,
        employee_name: str = "",
        autosave_key: str = DEFAULT_AUTOSAVE_KEY,
        default_timezone: str | None = None,
    ) -> "ReconciliationWizard":
        """
        Load the station layout and restore any autosaved draft.

        Args:
            config_provider: Source of the raw station configuration
            gateway: Where the finished record is submitted
            autosave: Optional draft autosave
            outbox: Optional outbox; submissions are queued there before sending
            employee_name: Name the record is submitted under
            autosave_key: Key the draft is saved under
            default_timezone: Timezone for the trading date when the station
                layout names none

        Returns:
            Wizard positioned on step 1

        Raises:
            InvalidConfigError: If the station configuration is unusable
        """
        config = normalize_config(config_provider.get_config())
        defaults = ReconciliationDraft.blank(config, _trading_date(config, default_timezone))

        saved = None
        if autosave is not None:
            try:
                saved = autosave.get(autosave_key)
            except Exception as e:
                logger.warning(f"Could not read autosaved draft: {e}")
        if saved:
            logger.info("Restored autosaved draft")

        return cls(
            config=config,
            gateway=gateway,
            draft=ReconciliationDraft.hydrate(defaults, saved),
            autosave=autosave,
            outbox=outbox,
            employee_name=employee_name,
            autosave_key=autosave_key,
            default_timezone=default_timezone,
        )

    def _blank_draft(self) -> ReconciliationDraft:
        return ReconciliationDraft.blank(self.config, _trading_date(self.config, self.default_timezone))

    # Navigation

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def current(self) -> StepDescriptor:
        return self.steps[self.current_step - 1]

    @property
    def is_first(self) -> bool:
        return self.current_step == 1

    @property
    def is_last(self) -> bool:
        return self.current_step == self.step_count

    def next(self) -> StepDescriptor:
        self.current_step = min(self.current_step + 1, self.step_count)
        return self.current

    def prev(self) -> StepDescriptor:
        self.current_step = max(self.current_step - 1, 1)
        return self.current

    def go_to_step(self, step: int) -> StepDescriptor:
        """
        Jump straight to a step.

        Raises:
            ValueError: If step is outside 1..step_count
        """
        if not 1 <= step <= self.step_count:
            raise ValueError(f"Step {step} out of range 1..{self.step_count}")
        self.current_step = step
        return self.current

    # Editing

    def update_field(self, path: str, value: Any) -> ReconciliationSnapshot:
        """
        Set one draft field by dotted path and recompute.

        Paths:
            "total_sales", "payouts", "comments", "bag_number", "date"
            "terminals.<i>"
            "registers.<i>.<group>.<denomination>"  e.g. "registers.0.notes.hundreds"

        Returns:
            The new snapshot

        Raises:
            KeyError: If the path does not name a draft field
            IndexError: If a register or terminal index is out of range
        """
        parts = path.split(".")
        head = parts[0]

        if len(parts) == 1 and head in _SCALAR_FIELDS:
            setattr(self.draft, _SCALAR_FIELDS[head], value)
        elif len(parts) == 2 and head in _TERMINAL_PREFIXES:
            index = self._index(parts[1], self.config.terminal_count, "terminal")
            self.draft.terminal_amounts[index] = value
        elif len(parts) == 4 and head == "registers":
            index = self._index(parts[1], self.config.register_count, "register")
            self.draft.registers[index].set(parts[2], parts[3], value)
        else:
            raise KeyError(f"Unknown draft field: {path}")

        return self._changed()

    @staticmethod
    def _index(raw: str, count: int, label: str) -> int:
        try:
            index = int(raw)
        except ValueError:
            raise KeyError(f"Invalid {label} index: {raw}") from None
        if not 0 <= index < count:
            raise IndexError(f"No {label} at index {index} (have {count})")
        return index

    def set_count(self, register_index: int, group: str, denomination: str, value: Any) -> ReconciliationSnapshot:
        return self.update_field(f"registers.{register_index}.{group}.{denomination}", value)

    def set_terminal_amount(self, terminal_index: int, value: Any) -> ReconciliationSnapshot:
        return self.update_field(f"terminals.{terminal_index}", value)

    def set_total_sales(self, value: Any) -> ReconciliationSnapshot:
        return self.update_field("total_sales", value)

    def set_payouts(self, value: Any) -> ReconciliationSnapshot:
        return self.update_field("payouts", value)

    def restore_draft(self, saved: dict[str, Any] | None) -> ReconciliationSnapshot:
        """Replace the draft with a saved copy merged onto blank defaults."""
        self.draft = ReconciliationDraft.hydrate(self._blank_draft(), saved)
        return self._changed()

    def apply_config(self, raw: Mapping[str, Any] | StationConfig) -> StationConfig:
        """
        Switch to a new station layout mid-session.

        Counts and amounts for registers and terminals that still exist are kept.
        The current step keeps its kind; a register step past the new register
        count moves to the last register.

        Raises:
            InvalidConfigError: If the configuration is unusable; the wizard is
                left unchanged
        """
        config = normalize_config(raw)
        current = self.current

        self.config = config
        self.draft.resize_to(config)
        self.steps = build_steps(config)

        if current.kind is StepKind.REGISTER:
            self.current_step = min(current.register_index, config.register_count - 1) + 1
        elif current.kind is StepKind.SALES_AND_POS:
            self.current_step = config.register_count + 1
        else:
            self.current_step = config.register_count + 2

        self._changed()
        return config

    def _compute(self) -> ReconciliationSnapshot:
        return compute_snapshot(
            self.config,
            self.draft.registers,
            self.draft.total_sales,
            self.draft.terminal_amounts,
            self.draft.payouts,
        )

    def _changed(self) -> ReconciliationSnapshot:
        self.snapshot = self._compute()
        self._save_draft()
        return self.snapshot

    def _save_draft(self) -> None:
        if self.autosave is None:
            return
        try:
            self.autosave.set(self.autosave_key, self.draft.to_dict())
        except Exception as e:
            logger.warning(f"Autosave failed: {e}")

    def _clear_draft(self) -> None:
        if self.autosave is None:
            return
        try:
            self.autosave.clear(self.autosave_key)
        except Exception as e:
            logger.warning(f"Could not clear autosaved draft: {e}")

    # Submission

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def can_submit(self) -> bool:
        return not self._submitting and not self._closed and bool(self.employee_name.strip())

    def build_record(self) -> ReconciliationRecord:
        """Record for the current draft, in the status a direct submission gets."""
        record = build_record(
            record_id=make_record_id(self.draft.date, self.employee_name),
            draft=self.draft,
            snapshot=self._compute(),
            config=self.config,
            employee_name=self.employee_name,
            status=ReconciliationStatus.PENDING_REVIEW,
            submitted_at=utc_now_iso(),
        )
        return replace(record, status=initial_status(record.calculations))

    async def submit(self) -> SubmissionResult:
        """
        Submit the draft.

        With an outbox the record is queued first and removed once the gateway
        accepts it, so a failed send leaves it pending_sync for a later sync. On
        success the autosave is cleared and the wizard starts a fresh draft on
        step 1; on failure the draft is kept as it is.

        Returns:
            SubmissionResult describing what happened
        """
        if self._closed:
            return SubmissionResult(success=False, error="Wizard is closed")
        if self._submitting:
            return SubmissionResult(success=False, error="A submission is already in progress")
        if not self.employee_name.strip():
            return SubmissionResult(success=False, error="Employee name is required")

        generation = self._generation
        self._submitting = True
        try:
            record = self.build_record()
            queued_record = None
            if self.outbox is not None:
                try:
                    queued_record = self.outbox.enqueue(record)
                except Exception as e:
                    logger.warning(f"Could not queue {record.id} in outbox: {e}")

            try:
                response = await self.gateway.submit(record, self.employee_name)
            except Exception as e:
                logger.warning(f"Submission of {record.id} failed: {e}")
                response = GatewayResponse.failed(str(e))

            if response.success and queued_record is not None:
                try:
                    self.outbox.remove(record.id)
                except Exception as e:
                    # The next sync sees the stored copy and drops this entry
                    logger.warning(f"Could not remove {record.id} from outbox: {e}")
        finally:
            if generation == self._generation:
                self._submitting = False

        if not response.success:
            error = response.error or "Submission failed"
            if queued_record is not None:
                logger.info(f"Record {record.id} kept in outbox for later sync")
                return SubmissionResult(success=False, record=queued_record, error=error, queued=True)
            return SubmissionResult(success=False, record=record, error=error)

        submitted = response.record or record
        if generation != self._generation:
            logger.info(f"Submission of {record.id} finished after its draft was discarded")
            return SubmissionResult(success=True, record=submitted)

        logger.info(f"Submitted reconciliation {record.id} (variance {record.variance})")
        self._clear_draft()
        self._reset()
        return SubmissionResult(success=True, record=submitted)

    def _reset(self) -> None:
        self.draft = self._blank_draft()
        self.current_step = 1
        self.snapshot = self._compute()

    def start_new_draft(self) -> None:
        """
        Discard the current draft and start again on step 1.

        A submission still in flight for the old draft completes, but its result
        no longer resets this wizard.
        """
        self._generation += 1
        self._submitting = False
        self._clear_draft()
        self._reset()

    def close(self) -> None:
        """Stop accepting submissions and ignore any still in flight."""
        self._generation += 1
        self._submitting = False
        self._closed = True

