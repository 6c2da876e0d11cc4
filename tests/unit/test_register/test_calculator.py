#!/usr/bin/env python3
"""Tests for the cash-up calculators."""

import copy

import pytest

from cashup.core.money import Money
from cashup.register import (
    DenominationCount,
    VarianceClass,
    classify_variance,
    compute_actual_banking,
    compute_bankable,
    compute_breakdown,
    compute_snapshot,
    compute_terminals_total,
    compute_variance,
    default_station_config,
    is_balanced,
    normalize_config,
)


def dollars(amount) -> Money:
    return Money.from_dollars(amount)


class TestComputeBreakdown:
    """Test denomination breakdown for one register."""

    @pytest.mark.unit
    def test_notes_only(self):
        """$100 x2 and $50 x1 make $250 in notes."""
        breakdown = compute_breakdown({"notes": {"hundreds": 2, "fifties": 1}})

        assert breakdown.notes_total == dollars(250)
        assert breakdown.loose_total == Money.zero()
        assert breakdown.coin_roll_total == Money.zero()
        assert breakdown.total == dollars(250)

    @pytest.mark.unit
    def test_coin_rolls_use_bulk_values(self):
        counts = DenominationCount.blank()
        counts.set("coin_rolls", "dollars", 1)  # $20
        counts.set("coin_rolls", "twos", 1)  # $50
        counts.set("coin_rolls", "fifty_cents", 1)  # $10
        counts.set("coin_rolls", "twenty_cents", 1)  # $4
        counts.set("coin_rolls", "ten_cents", 1)  # $4
        counts.set("coin_rolls", "five_cents", 1)  # $2

        assert compute_breakdown(counts).coin_roll_total == dollars(90)

    @pytest.mark.unit
    def test_loose_coins_at_face_value(self):
        breakdown = compute_breakdown(
            {
                "loose_coins": {
                    "twos": 3,
                    "dollars": 2,
                    "fifty_cents": 1,
                    "twenty_cents": 2,
                    "ten_cents": 1,
                    "five_cents": 1,
                }
            }
        )
        # 6 + 2 + 0.50 + 0.40 + 0.10 + 0.05
        assert breakdown.loose_total == dollars("9.05")

    @pytest.mark.unit
    def test_legacy_coin_key_names(self):
        """Older drafts used note-style names for coins."""
        breakdown = compute_breakdown({"loose": {"fifties": 2, "twenties": 5}})
        assert breakdown.loose_total == dollars("2.00")

    @pytest.mark.unit
    def test_loose_coin_fractions_round_to_cent(self):
        """Half a five-cent coin is 2.5 cents, rounded half-up."""
        breakdown = compute_breakdown({"loose_coins": {"five_cents": "0.5"}})
        assert breakdown.loose_total == Money.from_cents(3)

    @pytest.mark.unit
    def test_malformed_counts_contribute_zero(self):
        breakdown = compute_breakdown({"notes": {"hundreds": "abc", "fifties": "", "twenties": None, "tens": "2x"}})
        assert breakdown.notes_total == dollars(20)

    @pytest.mark.unit
    def test_negative_counts_are_kept(self):
        """A negative count corrects an over-count rather than being clamped."""
        breakdown = compute_breakdown({"notes": {"hundreds": 5, "fifties": -1}})
        assert breakdown.notes_total == dollars(450)

    @pytest.mark.unit
    def test_empty_and_missing_input(self):
        assert compute_breakdown(None).total == Money.zero()
        assert compute_breakdown({}).total == Money.zero()

    @pytest.mark.unit
    def test_total_is_sum_of_groups(self):
        breakdown = compute_breakdown(
            {
                "notes": {"twenties": 3},
                "loose_coins": {"dollars": 7},
                "coin_rolls": {"twos": 2},
            }
        )
        assert breakdown.total == breakdown.notes_total + breakdown.loose_total + breakdown.coin_roll_total
        assert breakdown.total == dollars(167)


class TestBanking:
    """Test bankable amounts after the reserve float."""

    @pytest.mark.unit
    def test_register_below_reserve_banks_nothing(self):
        breakdown = compute_breakdown({"notes": {"hundreds": 2, "fifties": 1}})
        assert compute_bankable(breakdown.total, dollars(400)) == Money.zero()

    @pytest.mark.unit
    def test_bankable_is_total_minus_reserve(self):
        assert compute_bankable(dollars(1050), dollars(400)) == dollars(650)
        assert compute_bankable("400.00", 400) == Money.zero()

    @pytest.mark.unit
    def test_actual_banking_sums_registers(self):
        breakdowns = [
            compute_breakdown({"notes": {"hundreds": 10, "fifties": 1}}),
            compute_breakdown({"notes": {"hundreds": 5}}),
            compute_breakdown({"notes": {"hundreds": 1}}),
        ]
        # 650 + 100 + 0
        assert compute_actual_banking(breakdowns, dollars(400)) == dollars(750)

    @pytest.mark.unit
    def test_actual_banking_never_negative(self):
        breakdowns = [compute_breakdown({}) for _ in range(3)]
        assert compute_actual_banking(breakdowns, dollars(400)) == Money.zero()


class TestTerminalsTotal:
    """Test EFTPOS totals over enabled terminals."""

    @pytest.mark.unit
    def test_disabled_terminals_ignored(self):
        total = compute_terminals_total(["100", "200", "300", "999"], [True, True, True, False])
        assert total == dollars(600)

    @pytest.mark.unit
    def test_blank_amounts_are_zero(self):
        assert compute_terminals_total(["", None, "50.25"], [True, True, True]) == dollars("50.25")

    @pytest.mark.unit
    def test_extra_amounts_without_terminal_ignored(self):
        assert compute_terminals_total(["10", "20", "30"], [True]) == dollars(10)


class TestVariance:
    """Test expected banking, variance and classification."""

    @pytest.mark.unit
    def test_balanced_day(self):
        """Sales 1000 - EFTPOS 300 - payouts 50 = 650 expected; 650 counted balances."""
        result = compute_variance(dollars(1000), dollars(300), dollars(50), dollars(650))

        assert result.expected_banking == dollars(650)
        assert result.variance == Money.zero()
        assert result.is_balanced is True

    @pytest.mark.unit
    def test_short_day(self):
        result = compute_variance("1000", "300", "50", "637.50")

        assert result.variance == dollars("-12.50")
        assert result.is_balanced is False

    @pytest.mark.unit
    def test_over_by_one_cent_is_not_balanced(self):
        assert is_balanced(Money.from_cents(1)) is False
        assert is_balanced(Money.from_cents(-1)) is False
        assert is_balanced(Money.zero()) is True

    @pytest.mark.unit
    def test_classification_bands(self):
        assert classify_variance(Money.zero()) == VarianceClass.EXACT
        assert classify_variance(Money.from_cents(1)) == VarianceClass.MINOR
        assert classify_variance(dollars(5)) == VarianceClass.MINOR
        assert classify_variance(dollars(-5)) == VarianceClass.MINOR
        assert classify_variance(dollars("5.01")) == VarianceClass.SIGNIFICANT
        assert classify_variance(dollars("-12.50")) == VarianceClass.SIGNIFICANT


class TestSnapshot:
    """Test the one-pass snapshot over a whole cash-up."""

    @pytest.mark.unit
    def test_snapshot_of_balanced_day(self, raw_station_config, balanced_draft):
        config = normalize_config(raw_station_config)
        snapshot = compute_snapshot(
            config,
            balanced_draft["registers"],
            balanced_draft["total_sales"],
            balanced_draft["terminal_amounts"],
            balanced_draft["payouts"],
        )

        # Terminal 4 is disabled, so its 999.00 is not counted
        assert snapshot.terminals_total == dollars(800)
        assert snapshot.register_bankable == (dollars(650), Money.zero())
        assert snapshot.actual_banking == dollars(650)
        assert snapshot.expected_banking == dollars(650)
        assert snapshot.variance == Money.zero()
        assert snapshot.is_balanced is True
        assert snapshot.classification == VarianceClass.EXACT
        assert snapshot.total_cash == dollars(1450)

    @pytest.mark.unit
    def test_missing_register_sheets_count_as_empty(self):
        config = default_station_config()
        snapshot = compute_snapshot(config, [{"notes": {"hundreds": 5}}], "100", [], "")

        assert len(snapshot.register_breakdowns) == 2
        assert snapshot.register_breakdowns[1].total == Money.zero()
        assert snapshot.actual_banking == dollars(100)

    @pytest.mark.unit
    def test_snapshot_serializes_money_as_decimal_strings(self):
        config = default_station_config()
        snapshot = compute_snapshot(config, [], "10", [], "")
        data = snapshot.to_dict()

        assert data["total_sales"] == "10.00"
        assert data["variance"] == "-10.00"
        assert data["classification"] == "significant"
        assert len(data["registers"]) == 2


# Register totals and reserves in cents, from short drawers to well over the float
AMOUNT_GRID = [0, 1, 99, 39999, 40000, 40001, 65000, 105000, 1_000_000]


class TestBankableProperties:
    """compute_bankable over a grid of totals and reserves."""

    @pytest.mark.unit
    @pytest.mark.parametrize("reserve_cents", AMOUNT_GRID)
    def test_non_decreasing_in_total(self, reserve_cents):
        reserve = Money.from_cents(reserve_cents)
        bankable = [compute_bankable(Money.from_cents(total), reserve) for total in AMOUNT_GRID]

        assert bankable == sorted(bankable)

    @pytest.mark.unit
    @pytest.mark.parametrize("total_cents", AMOUNT_GRID)
    def test_non_increasing_in_reserve(self, total_cents):
        total = Money.from_cents(total_cents)
        bankable = [compute_bankable(total, Money.from_cents(reserve)) for reserve in AMOUNT_GRID]

        assert bankable == sorted(bankable, reverse=True)

    @pytest.mark.unit
    @pytest.mark.parametrize("total_cents", AMOUNT_GRID + [-500, -40000])
    @pytest.mark.parametrize("reserve_cents", AMOUNT_GRID)
    def test_never_negative(self, total_cents, reserve_cents):
        bankable = compute_bankable(Money.from_cents(total_cents), Money.from_cents(reserve_cents))

        assert bankable >= Money.zero()
        assert bankable == Money.from_cents(max(0, total_cents - reserve_cents))


COUNT_SHEETS = [
    {},
    {"notes": {"hundreds": 10, "fifties": "1"}},
    {"notes": {"twenties": "3x"}, "loose_coins": {"dollars": "7.5", "five_cents": ""}},
    {"loose_coins": {"fifty_cents": 3, "ten_cents": None}, "coin_rolls": {"twos": 2, "dollars": "abc"}},
    {"notes": {"fives": -2}, "loose_coins": {"twenty_cents": 0.1}, "coin_rolls": {"five_cents": "4"}},
]


class TestBreakdownIsPure:
    """Repeated breakdowns of the same counts agree and leave the counts alone."""

    @pytest.mark.unit
    @pytest.mark.parametrize("sheet", COUNT_SHEETS)
    def test_mapping_input(self, sheet):
        before = copy.deepcopy(sheet)

        first = compute_breakdown(sheet)
        second = compute_breakdown(sheet)

        assert first == second
        assert sheet == before

    @pytest.mark.unit
    @pytest.mark.parametrize("sheet", COUNT_SHEETS)
    def test_count_sheet_input(self, sheet):
        counts = DenominationCount.from_dict(sheet)
        before = copy.deepcopy(counts)

        results = [compute_breakdown(counts) for _ in range(3)]

        assert results[0] == results[1] == results[2]
        assert results[0] == compute_breakdown(sheet)
        assert counts == before


class TestWideInput:
    """Counts and amounts longer than the default 28-digit decimal context."""

    FORTY_NINES = "9" * 40

    @pytest.mark.unit
    def test_forty_digit_note_count(self):
        breakdown = compute_breakdown({"notes": {"hundreds": self.FORTY_NINES}})

        assert breakdown.notes_total == Money.from_cents(int(self.FORTY_NINES) * 10000)

    @pytest.mark.unit
    def test_forty_digit_loose_coin_count(self):
        breakdown = compute_breakdown({"loose_coins": {"dollars": self.FORTY_NINES}})

        assert breakdown.loose_total == Money.from_cents(int(self.FORTY_NINES) * 100)
        assert breakdown.total == breakdown.loose_total

    @pytest.mark.unit
    def test_forty_digit_sales(self):
        result = compute_variance(self.FORTY_NINES, 0, 0, 0)

        assert result.expected_banking == Money.from_cents(int(self.FORTY_NINES) * 100)
        assert result.variance == Money.from_cents(-int(self.FORTY_NINES) * 100)
        assert result.is_balanced is False
