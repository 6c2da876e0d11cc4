#!/usr/bin/env python3
"""Tests for Money primitive type."""

from decimal import Decimal

import pytest

from cashup.core.money import Money


class TestMoneyConstruction:
    """Test Money class construction."""

    @pytest.mark.currency
    def test_from_cents(self):
        """Test creating Money from cents."""
        m = Money.from_cents(1234)
        assert m.to_cents() == 1234

    @pytest.mark.currency
    def test_from_dollars_string(self):
        """Test parsing from dollar strings."""
        assert Money.from_dollars("$12.34").to_cents() == 1234
        assert Money.from_dollars("12.34").to_cents() == 1234

    @pytest.mark.currency
    def test_from_dollars_int_and_float(self):
        assert Money.from_dollars(12).to_cents() == 1200
        assert Money.from_dollars(0.1).to_cents() == 10

    @pytest.mark.currency
    def test_unreadable_input_is_zero(self):
        assert Money.from_dollars("") == Money.zero()
        assert Money.from_dollars(None) == Money.zero()
        assert Money.from_dollars("n/a") == Money.zero()

    @pytest.mark.currency
    def test_from_decimal_rounds_half_up(self):
        assert Money.from_decimal(Decimal("2.675")).to_cents() == 268


class TestMoneyArithmetic:
    """Test Money arithmetic operations."""

    @pytest.mark.currency
    def test_addition_and_subtraction(self):
        a = Money.from_cents(100)
        b = Money.from_cents(30)
        assert (a + b).to_cents() == 130
        assert (a - b).to_cents() == 70

    @pytest.mark.currency
    def test_multiplication(self):
        assert (Money.from_cents(2000) * 3).to_cents() == 6000

    @pytest.mark.currency
    def test_sum_starts_from_zero(self):
        """sum() works without an explicit start value."""
        total = sum([Money.from_cents(10), Money.from_cents(20), Money.from_cents(5)])
        assert total == Money.from_cents(35)

    @pytest.mark.currency
    def test_no_float_drift(self):
        """Ten dimes are exactly a dollar."""
        total = sum((Money.from_dollars("0.10") for _ in range(10)), Money.zero())
        assert total == Money.from_dollars(1)

    @pytest.mark.currency
    def test_abs_and_neg(self):
        m = Money.from_cents(-250)
        assert m.abs().to_cents() == 250
        assert (-m).to_cents() == 250


class TestMoneyComparison:
    """Test Money comparison and formatting."""

    @pytest.mark.currency
    def test_ordering(self):
        assert Money.from_cents(100) < Money.from_cents(200)
        assert Money.from_cents(200) >= Money.from_cents(200)
        assert Money.from_cents(100) != Money.from_cents(101)

    @pytest.mark.currency
    def test_hashable(self):
        assert len({Money.from_cents(5), Money.from_cents(5)}) == 1

    @pytest.mark.currency
    def test_string_forms(self):
        m = Money.from_cents(-123450)
        assert str(m) == "-$1,234.50"
        assert m.to_decimal_str() == "-1234.50"
        assert m.to_decimal() == Decimal("-1234.50")
        assert repr(m) == "Money(cents=-123450)"
