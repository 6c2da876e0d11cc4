#!/usr/bin/env python3
"""
TradingDate Primitive Type

Immutable date wrapper for the trading day a cash-up belongs to.
Provides consistent parsing, ordering and ISO formatting across drafts and records.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo


@dataclass(frozen=True, order=True)
class TradingDate:
    """Immutable trading-day wrapper with consistent formatting."""

    date: date

    @classmethod
    def from_string(cls, date_str: str, format: str = "%Y-%m-%d") -> "TradingDate":
        """
        Parse from string in specified format.

        Args:
            date_str: Date string to parse
            format: Date format (default: ISO format "%Y-%m-%d")

        Returns:
            TradingDate object

        Raises:
            ValueError: If the string does not match the format
        """
        return cls(date=datetime.strptime(date_str.strip(), format).date())

    @classmethod
    def today(cls, timezone: str | None = None) -> "TradingDate":
        """
        Get today's date, optionally in the venue's timezone.

        The trading day rolls over at local midnight, not UTC midnight.
        """
        if timezone:
            return cls(date=datetime.now(ZoneInfo(timezone)).date())
        return cls(date=date.today())

    def to_iso_string(self) -> str:
        """Format as YYYY-MM-DD."""
        return self.date.isoformat()

    def __str__(self) -> str:
        """String representation."""
        return self.to_iso_string()


def utc_now_iso() -> str:
    """Current UTC timestamp in ISO-8601 form, used for submitted/reviewed stamps."""
    return datetime.now(UTC).isoformat()


def date_sort_key(value: str) -> date:
    """
    Sort key for ISO date strings stored on records.

    Unparseable dates sort as the earliest possible day.
    """
    try:
        return TradingDate.from_string(value[:10]).date
    except (ValueError, TypeError):
        return date.min
