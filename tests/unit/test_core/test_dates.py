#!/usr/bin/env python3
"""Tests for TradingDate and date helpers."""

from datetime import date

import pytest

from cashup.core.dates import TradingDate, date_sort_key, utc_now_iso


class TestTradingDate:
    """Test TradingDate parsing and formatting."""

    def test_from_string_iso(self):
        d = TradingDate.from_string("2025-08-18")
        assert d.date == date(2025, 8, 18)
        assert d.to_iso_string() == "2025-08-18"
        assert str(d) == "2025-08-18"

    def test_from_string_invalid(self):
        with pytest.raises(ValueError):
            TradingDate.from_string("18/08/2025")

    def test_ordering(self):
        assert TradingDate.from_string("2025-08-17") < TradingDate.from_string("2025-08-18")

    def test_today_in_timezone(self):
        assert isinstance(TradingDate.today("Australia/Sydney").date, date)


class TestDateHelpers:
    """Test sort keys and timestamps."""

    def test_sort_key_reads_date_prefix(self):
        assert date_sort_key("2025-08-18T10:00:00") == date(2025, 8, 18)

    def test_sort_key_unparseable_sorts_first(self):
        assert date_sort_key("not a date") == date.min
        assert date_sort_key("") == date.min

    def test_utc_now_iso_has_offset(self):
        assert utc_now_iso().endswith("+00:00")
