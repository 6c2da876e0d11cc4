#!/usr/bin/env python3
"""
Money Primitive Type

Immutable currency value wrapper that uses integer cents internally.
Prevents floating-point errors and provides type-safe currency operations.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .currency import (
    cents_to_decimal,
    cents_to_decimal_str,
    format_cents,
    safe_currency_to_cents,
)


@dataclass(frozen=True)
class Money:
    """
    Immutable money value in cents.

    Supports both positive and negative amounts (a register can be short).
    Uses integer arithmetic throughout to prevent floating-point errors.

    Examples:
        >>> float_in_drawer = Money.from_dollars(400)
        >>> str(float_in_drawer)
        '$400.00'

        >>> counted = Money.from_dollars("250.00")
        >>> (counted - float_in_drawer).to_decimal_str()
        '-150.00'

        >>> Money.from_cents(-1250).abs()
        Money(cents=1250)
    """

    cents: int

    @classmethod
    def from_cents(cls, cents: int) -> "Money":
        """Create Money from cents."""
        return cls(cents=int(cents))

    @classmethod
    def from_dollars(cls, dollars: Any) -> "Money":
        """
        Parse from a dollar amount such as '$123.45', 123.45 or 12.

        Unreadable input becomes $0.00 rather than raising.

        Args:
            dollars: String, int, float or Decimal dollar amount

        Returns:
            Money object
        """
        return cls(cents=safe_currency_to_cents(dollars))

    @classmethod
    def from_decimal(cls, amount: Decimal) -> "Money":
        """Create Money from a Decimal dollar amount, rounding half-up to the cent."""
        return cls(cents=safe_currency_to_cents(amount))

    @classmethod
    def zero(cls) -> "Money":
        """Return $0.00."""
        return cls(cents=0)

    def to_cents(self) -> int:
        """Get value in cents."""
        return self.cents

    def to_decimal(self) -> Decimal:
        """Get value as a two-place Decimal dollar amount."""
        return cents_to_decimal(self.cents)

    def to_decimal_str(self) -> str:
        """Get the serialization form, e.g. '650.00'."""
        return cents_to_decimal_str(self.cents)

    def to_dollars(self) -> str:
        """Get formatted dollar string."""
        return str(self)

    def is_zero(self) -> bool:
        """Check whether the amount is exactly zero."""
        return self.cents == 0

    def abs(self) -> "Money":
        """Return absolute value of Money."""
        return Money(cents=abs(self.cents))

    def __add__(self, other: "Money") -> "Money":
        """Add two Money objects."""
        return Money(cents=self.cents + other.cents)

    def __radd__(self, other: Any) -> "Money":
        """Support sum() over Money values (sum starts from int 0)."""
        if other == 0:
            return self
        return NotImplemented

    def __sub__(self, other: "Money") -> "Money":
        """Subtract two Money objects."""
        return Money(cents=self.cents - other.cents)

    def __mul__(self, scalar: int) -> "Money":
        """Multiply Money by integer scalar."""
        return Money(cents=self.cents * scalar)

    def __neg__(self) -> "Money":
        """Negate."""
        return Money(cents=-self.cents)

    def __eq__(self, other: object) -> bool:
        """Check equality."""
        if not isinstance(other, Money):
            return NotImplemented
        return self.cents == other.cents

    def __hash__(self) -> int:
        return hash(self.cents)

    def __lt__(self, other: "Money") -> bool:
        """Less than comparison."""
        return self.cents < other.cents

    def __le__(self, other: "Money") -> bool:
        """Less than or equal comparison."""
        return self.cents <= other.cents

    def __gt__(self, other: "Money") -> bool:
        """Greater than comparison."""
        return self.cents > other.cents

    def __ge__(self, other: "Money") -> bool:
        """Greater than or equal comparison."""
        return self.cents >= other.cents

    def __str__(self) -> str:
        """Format as dollar string."""
        return format_cents(self.cents)

    def __repr__(self) -> str:
        """Repr format."""
        return f"Money(cents={self.cents})"
