#!/usr/bin/env python3
"""
Reconciliation Domain Models

The in-progress draft an employee fills in, and the submitted record a manager
reviews. All money on a record is Money; on the wire it is a decimal string.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..core.money import Money
from ..register.calculator import ReconciliationSnapshot, VarianceClass
from ..register.config_normalizer import StationConfig, resize
from ..register.models import DenominationCount, RegisterBreakdown


class ReconciliationStatus(Enum):
    """Review lifecycle states of a submitted record."""

    PENDING_REVIEW = "pending_review"
    PENDING_SYNC = "pending_sync"
    VARIANCE_FOUND = "variance_found"
    REQUIRES_CORRECTION = "requires_correction"
    APPROVED = "approved"


@dataclass
class ReconciliationDraft:
    """
    An employee's unsaved cash-up.

    Field values are kept as entered; the calculators coerce them. The lists are
    always sized to the station configuration the draft was built for.
    """

    date: str
    total_sales: Any = ""
    terminal_amounts: list[Any] = field(default_factory=list)
    payouts: Any = ""
    registers: list[DenominationCount] = field(default_factory=list)
    bag_number: str = ""
    comments: str = ""

    @classmethod
    def blank(cls, config: StationConfig, date: str) -> "ReconciliationDraft":
        """Create an empty draft sized to the configuration."""
        return cls(
            date=date,
            terminal_amounts=[""] * config.terminal_count,
            registers=[DenominationCount.blank() for _ in range(config.register_count)],
        )

    def resize_to(self, config: StationConfig) -> None:
        """Grow or shrink the per-register and per-terminal lists in place."""
        self.registers = resize(self.registers, config.register_count, lambda i: DenominationCount.blank())
        self.terminal_amounts = resize(self.terminal_amounts, config.terminal_count, lambda i: "")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for autosave."""
        return {
            "date": self.date,
            "total_sales": self.total_sales,
            "terminal_amounts": list(self.terminal_amounts),
            "payouts": self.payouts,
            "registers": [counts.to_dict() for counts in self.registers],
            "bag_number": self.bag_number,
            "comments": self.comments,
        }

    @classmethod
    def hydrate(cls, defaults: "ReconciliationDraft", saved: dict[str, Any] | None) -> "ReconciliationDraft":
        """
        Merge a saved draft onto blank defaults.

        Only fields the defaults know about are taken from the saved copy, and the
        lists keep the length of the defaults, so a draft saved under a different
        register or terminal count still restores what it can.
        """
        draft = cls(
            date=defaults.date,
            total_sales=defaults.total_sales,
            terminal_amounts=list(defaults.terminal_amounts),
            payouts=defaults.payouts,
            registers=[DenominationCount.from_dict(c.to_dict()) for c in defaults.registers],
            bag_number=defaults.bag_number,
            comments=defaults.comments,
        )
        if not isinstance(saved, dict):
            return draft

        for name in ("date", "total_sales", "payouts", "bag_number", "comments"):
            if saved.get(name) is not None:
                setattr(draft, name, saved[name])

        saved_terminals = saved.get("terminal_amounts")
        if isinstance(saved_terminals, list):
            for i in range(min(len(saved_terminals), len(draft.terminal_amounts))):
                draft.terminal_amounts[i] = saved_terminals[i]

        saved_registers = saved.get("registers")
        if isinstance(saved_registers, list):
            for i in range(min(len(saved_registers), len(draft.registers))):
                draft.registers[i] = DenominationCount.from_dict(saved_registers[i])

        return draft


@dataclass(frozen=True)
class RegisterEntry:
    """One register's counts and derived totals as submitted."""

    index: int
    name: str
    counts: dict[str, Any]
    breakdown: RegisterBreakdown
    bankable: Money

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "counts": self.counts,
            "breakdown": self.breakdown.to_dict(),
            "bankable": self.bankable.to_decimal_str(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RegisterEntry":
        return cls(
            index=int(data.get("index", 0)),
            name=data.get("name", ""),
            counts=DenominationCount.from_dict(data.get("counts")).to_dict(),
            breakdown=RegisterBreakdown.from_dict(data.get("breakdown") or {}),
            bankable=Money.from_dollars(data.get("bankable")),
        )


@dataclass(frozen=True)
class TerminalEntry:
    """One terminal's EFTPOS amount as submitted."""

    index: int
    name: str
    enabled: bool
    amount: Money

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "enabled": self.enabled,
            "amount": self.amount.to_decimal_str(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TerminalEntry":
        return cls(
            index=int(data.get("index", 0)),
            name=data.get("name", ""),
            enabled=bool(data.get("enabled", True)),
            amount=Money.from_dollars(data.get("amount")),
        )


@dataclass(frozen=True)
class ReconciliationSummary:
    """Headline figures of a record."""

    total_sales: Money
    total_eftpos: Money
    payouts: Money
    expected_banking: Money
    actual_banking: Money
    variance: Money

    def to_dict(self) -> dict[str, str]:
        return {
            "total_sales": self.total_sales.to_decimal_str(),
            "total_eftpos": self.total_eftpos.to_decimal_str(),
            "payouts": self.payouts.to_decimal_str(),
            "expected_banking": self.expected_banking.to_decimal_str(),
            "actual_banking": self.actual_banking.to_decimal_str(),
            "variance": self.variance.to_decimal_str(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReconciliationSummary":
        return cls(
            total_sales=Money.from_dollars(data.get("total_sales")),
            total_eftpos=Money.from_dollars(data.get("total_eftpos")),
            payouts=Money.from_dollars(data.get("payouts")),
            expected_banking=Money.from_dollars(data.get("expected_banking")),
            actual_banking=Money.from_dollars(data.get("actual_banking")),
            variance=Money.from_dollars(data.get("variance")),
        )


@dataclass(frozen=True)
class ReconciliationCalculations:
    """Derived flags stored with a record."""

    is_balanced: bool
    classification: VarianceClass
    total_cash: Money
    reserve_amount: Money

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_balanced": self.is_balanced,
            "classification": self.classification.value,
            "total_cash": self.total_cash.to_decimal_str(),
            "reserve_amount": self.reserve_amount.to_decimal_str(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReconciliationCalculations":
        return cls(
            is_balanced=bool(data.get("is_balanced", False)),
            classification=VarianceClass(data.get("classification", VarianceClass.SIGNIFICANT.value)),
            total_cash=Money.from_dollars(data.get("total_cash")),
            reserve_amount=Money.from_dollars(data.get("reserve_amount")),
        )


@dataclass(frozen=True)
class ReconciliationRecord:
    """
    A submitted cash-up awaiting or past manager review.

    Records are never edited in place; review actions produce a new record.
    """

    id: str
    date: str
    employee_name: str
    registers: tuple[RegisterEntry, ...]
    pos_terminals: tuple[TerminalEntry, ...]
    summary: ReconciliationSummary
    calculations: ReconciliationCalculations
    status: ReconciliationStatus
    submitted_at: str
    comments: str = ""
    bag_number: str = ""
    reviewed_at: str | None = None
    manager_comments: str | None = None

    @property
    def variance(self) -> Money:
        return self.summary.variance

    @property
    def is_balanced(self) -> bool:
        return self.calculations.is_balanced

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "date": self.date,
            "employee_name": self.employee_name,
            "registers": [r.to_dict() for r in self.registers],
            "pos_terminals": [t.to_dict() for t in self.pos_terminals],
            "summary": self.summary.to_dict(),
            "calculations": self.calculations.to_dict(),
            "status": self.status.value,
            "comments": self.comments,
            "bag_number": self.bag_number,
            "submitted_at": self.submitted_at,
            "reviewed_at": self.reviewed_at,
            "manager_comments": self.manager_comments,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReconciliationRecord":
        """
        Create a record from a dictionary.

        Raises:
            KeyError: If id or status is missing
            ValueError: If status is not a known ReconciliationStatus
        """
        return cls(
            id=data["id"],
            date=data.get("date", ""),
            employee_name=data.get("employee_name", ""),
            registers=tuple(RegisterEntry.from_dict(r) for r in data.get("registers", [])),
            pos_terminals=tuple(TerminalEntry.from_dict(t) for t in data.get("pos_terminals", [])),
            summary=ReconciliationSummary.from_dict(data.get("summary") or {}),
            calculations=ReconciliationCalculations.from_dict(data.get("calculations") or {}),
            status=ReconciliationStatus(data["status"]),
            submitted_at=data.get("submitted_at", ""),
            comments=data.get("comments", "") or "",
            bag_number=data.get("bag_number", "") or "",
            reviewed_at=data.get("reviewed_at"),
            manager_comments=data.get("manager_comments"),
        )


def build_record(
    record_id: str,
    draft: ReconciliationDraft,
    snapshot: ReconciliationSnapshot,
    config: StationConfig,
    employee_name: str,
    status: ReconciliationStatus,
    submitted_at: str,
) -> ReconciliationRecord:
    """Assemble a record from a draft and the snapshot computed for it."""
    registers = tuple(
        RegisterEntry(
            index=rc.index,
            name=rc.name,
            counts=draft.registers[rc.index].to_dict(),
            breakdown=snapshot.register_breakdowns[rc.index],
            bankable=snapshot.register_bankable[rc.index],
        )
        for rc in config.register_configs
    )
    terminals = tuple(
        TerminalEntry(
            index=tc.index,
            name=tc.name,
            enabled=tc.enabled,
            amount=Money.from_dollars(draft.terminal_amounts[tc.index]),
        )
        for tc in config.terminal_configs
    )
    return ReconciliationRecord(
        id=record_id,
        date=draft.date,
        employee_name=employee_name,
        registers=registers,
        pos_terminals=terminals,
        summary=ReconciliationSummary(
            total_sales=snapshot.total_sales,
            total_eftpos=snapshot.terminals_total,
            payouts=snapshot.payouts,
            expected_banking=snapshot.expected_banking,
            actual_banking=snapshot.actual_banking,
            variance=snapshot.variance,
        ),
        calculations=ReconciliationCalculations(
            is_balanced=snapshot.is_balanced,
            classification=snapshot.classification,
            total_cash=snapshot.total_cash,
            reserve_amount=config.reserve_amount,
        ),
        status=status,
        submitted_at=submitted_at,
        comments=draft.comments or "",
        bag_number=draft.bag_number or "",
    )
