#!/usr/bin/env python3
"""
Cash-Up Calculators

Pure functions that turn raw counts and sales figures into money.
Uses integer cents throughout so totals add up exactly.

Key Features:
- Denomination breakdown per register (notes, loose coins, coin rolls)
- Bankable amount after the register's reserve float is held back
- Expected banking from sales, EFTPOS and payouts, and the resulting variance
- One-shot snapshot of every derived figure for a draft

None of these functions raise on malformed input: a value that cannot be read
as a number contributes zero.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal, localcontext
from enum import Enum
from typing import Any

from ..core.currency import MAX_DIGITS, parse_count, parse_quantity, quantize_to_cents
from ..core.money import Money
from .config_normalizer import StationConfig
from .models import (
    COIN_ROLL_DENOMINATIONS,
    LOOSE_COIN_DENOMINATIONS,
    NOTE_DENOMINATIONS,
    DenominationCount,
    RegisterBreakdown,
)

# |variance| below one cent counts as balanced
BALANCE_THRESHOLD = Money.from_cents(1)

# Presentation band for "minor" variances; deliberately independent of the
# venue's configurable variance tolerance
MINOR_VARIANCE_BAND = Money.from_dollars(5)


class VarianceClass(Enum):
    """Presentation classification of a variance."""

    EXACT = "exact"
    MINOR = "minor"
    SIGNIFICANT = "significant"


@dataclass(frozen=True)
class VarianceResult:
    """Expected banking and how far the counted cash is from it."""

    expected_banking: Money
    variance: Money
    is_balanced: bool


def _as_money(value: Any) -> Money:
    if isinstance(value, Money):
        return value
    return Money.from_dollars(value)


def _as_counts(counts: DenominationCount | Mapping[str, Any] | None) -> DenominationCount:
    if isinstance(counts, DenominationCount):
        return counts
    return DenominationCount.from_dict(counts if isinstance(counts, Mapping) else None)


def compute_breakdown(counts: DenominationCount | Mapping[str, Any] | None) -> RegisterBreakdown:
    """
    Convert one register's raw counts into monetary totals.

    Notes and coin rolls are whole-unit counts; loose coins may be entered with a
    fractional part and are valued at face value, rounded to the cent.

    Args:
        counts: DenominationCount or nested mapping of raw counts

    Returns:
        RegisterBreakdown with notes, loose, coin-roll and overall totals

    Example:
        compute_breakdown({"notes": {"hundreds": 2, "fifties": 1}}).notes_total -> $250.00
    """
    sheet = _as_counts(counts)

    notes_cents = sum(parse_count(sheet.notes.get(d.key)) * d.value_cents for d in NOTE_DENOMINATIONS)

    with localcontext() as ctx:
        # Room for any in-range quantity times a coin value, summed
        ctx.prec = MAX_DIGITS + 10
        loose_exact = sum(
            (parse_quantity(sheet.loose_coins.get(d.key)) * d.value_cents for d in LOOSE_COIN_DENOMINATIONS),
            Decimal(0),
        )
        loose_dollars = loose_exact / 100
    loose_cents = quantize_to_cents(loose_dollars)

    roll_cents = sum(parse_count(sheet.coin_rolls.get(d.key)) * d.value_cents for d in COIN_ROLL_DENOMINATIONS)

    return RegisterBreakdown(
        notes_total=Money.from_cents(notes_cents),
        loose_total=Money.from_cents(loose_cents),
        coin_roll_total=Money.from_cents(roll_cents),
        total=Money.from_cents(notes_cents + loose_cents + roll_cents),
    )


def compute_bankable(total: Any, reserve_amount: Any) -> Money:
    """
    Amount of a register's cash that goes to the bank.

    The reserve float stays in the drawer; a register holding less than its
    reserve banks nothing rather than a negative amount.

    Args:
        total: Register total (Money or dollar amount)
        reserve_amount: Reserve float (Money or dollar amount)

    Returns:
        max(0, total - reserve)
    """
    bankable = _as_money(total) - _as_money(reserve_amount)
    return bankable if bankable > Money.zero() else Money.zero()


def compute_actual_banking(breakdowns: Sequence[RegisterBreakdown], reserve_amount: Any) -> Money:
    """
    Sum of bankable amounts over exactly the registers given.

    The caller passes one breakdown per configured register, so the sum follows the
    current register count rather than a fixed number of drawers.
    """
    reserve = _as_money(reserve_amount)
    return sum((compute_bankable(b.total, reserve) for b in breakdowns), Money.zero())


def compute_terminals_total(amounts: Sequence[Any], enabled: Sequence[bool]) -> Money:
    """
    Total EFTPOS takings over the terminals that are switched on.

    An amount typed against a disabled terminal is ignored. Amounts beyond the
    length of the enabled flags are treated as belonging to no terminal.
    """
    return sum(
        (_as_money(amount) for amount, is_enabled in zip(amounts, enabled) if is_enabled),
        Money.zero(),
    )


def compute_variance(total_sales: Any, terminals_total: Any, payouts: Any, actual_banking: Any) -> VarianceResult:
    """
    Compare counted cash against what the sales figures say should be there.

    expected = sales - EFTPOS - payouts
    variance = actual - expected  (positive means over, negative means short)

    Args:
        total_sales: Day's total sales
        terminals_total: EFTPOS total over enabled terminals
        payouts: Cash paid out of the registers
        actual_banking: Bankable cash actually counted

    Returns:
        VarianceResult with expected banking, variance and the balanced flag
    """
    expected = _as_money(total_sales) - _as_money(terminals_total) - _as_money(payouts)
    variance = _as_money(actual_banking) - expected
    return VarianceResult(
        expected_banking=expected,
        variance=variance,
        is_balanced=is_balanced(variance),
    )


def is_balanced(variance: Money) -> bool:
    """Authoritative balance check: |variance| < $0.01."""
    return variance.abs() < BALANCE_THRESHOLD


def classify_variance(variance: Money) -> VarianceClass:
    """
    Presentation band for a variance.

    EXACT only for a variance of exactly zero, MINOR up to and including $5.00
    either way, SIGNIFICANT beyond that. Not a substitute for is_balanced().
    """
    if variance.is_zero():
        return VarianceClass.EXACT
    if variance.abs() <= MINOR_VARIANCE_BAND:
        return VarianceClass.MINOR
    return VarianceClass.SIGNIFICANT


@dataclass(frozen=True)
class ReconciliationSnapshot:
    """
    Every derived figure for a draft, computed together.

    A snapshot is replaced wholesale on each edit, never patched field by field.
    """

    register_breakdowns: tuple[RegisterBreakdown, ...]
    register_bankable: tuple[Money, ...]
    total_sales: Money
    terminals_total: Money
    payouts: Money
    expected_banking: Money
    actual_banking: Money
    variance: Money
    is_balanced: bool
    classification: VarianceClass

    @property
    def total_cash(self) -> Money:
        """Cash counted across all registers, reserve included."""
        return sum((b.total for b in self.register_breakdowns), Money.zero())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with decimal currency strings."""
        return {
            "registers": [
                {**breakdown.to_dict(), "bankable": bankable.to_decimal_str()}
                for breakdown, bankable in zip(self.register_breakdowns, self.register_bankable)
            ],
            "total_sales": self.total_sales.to_decimal_str(),
            "terminals_total": self.terminals_total.to_decimal_str(),
            "payouts": self.payouts.to_decimal_str(),
            "expected_banking": self.expected_banking.to_decimal_str(),
            "actual_banking": self.actual_banking.to_decimal_str(),
            "variance": self.variance.to_decimal_str(),
            "is_balanced": self.is_balanced,
            "classification": self.classification.value,
        }


def compute_snapshot(
    config: StationConfig,
    registers: Sequence[DenominationCount | Mapping[str, Any]],
    total_sales: Any,
    terminal_amounts: Sequence[Any],
    payouts: Any,
) -> ReconciliationSnapshot:
    """
    Derive the full set of figures for a cash-up in one pass.

    Only the first register_count count sheets and terminal_count terminal amounts
    are considered; missing sheets count as empty registers.

    Args:
        config: Normalized station configuration
        registers: Count sheets in register order
        total_sales: Day's total sales (raw or Money)
        terminal_amounts: EFTPOS amounts in terminal order (raw or Money)
        payouts: Cash payouts (raw or Money)

    Returns:
        ReconciliationSnapshot
    """
    breakdowns = tuple(
        compute_breakdown(registers[i]) if i < len(registers) else RegisterBreakdown.empty()
        for i in range(config.register_count)
    )
    bankable = tuple(compute_bankable(b.total, config.reserve_amount) for b in breakdowns)
    actual = sum(bankable, Money.zero())

    terminals_total = compute_terminals_total(
        list(terminal_amounts)[: config.terminal_count], config.pos_terminals.enabled
    )
    sales = _as_money(total_sales)
    paid_out = _as_money(payouts)
    result = compute_variance(sales, terminals_total, paid_out, actual)

    return ReconciliationSnapshot(
        register_breakdowns=breakdowns,
        register_bankable=bankable,
        total_sales=sales,
        terminals_total=terminals_total,
        payouts=paid_out,
        expected_banking=result.expected_banking,
        actual_banking=actual,
        variance=result.variance,
        is_balanced=result.is_balanced,
        classification=classify_variance(result.variance),
    )
