#!/usr/bin/env python3
"""
Currency Parsing and Formatting Utilities

Shared number handling for the cash-up system.
All monetary calculations use integer cents to avoid floating-point errors.

Currency Systems:
- Internal calculations use cents: 100 cents = $1.00
- Serialization uses decimal strings: "1234.50"
- Display uses dollar strings: "$1,234.50"

Input Coercion:
- Counts typed into a cash-up form arrive as strings, numbers or None
- Anything that cannot be read as a number counts as 0, never an error
- Negative values are passed through unchanged
"""

import re
from decimal import ROUND_HALF_UP, Decimal, DecimalException, localcontext
from typing import Any

CENT = Decimal("0.01")

# Digits of headroom over an amount's own magnitude when rounding it
_PRECISION_MARGIN = 6

# Quantities with more integer digits than this count as 0
MAX_DIGITS = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_DECIMAL = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")


def parse_count(value: Any) -> int:
    """
    Coerce a raw count to an integer, reading only the leading digits.

    Args:
        value: Raw form value (str, int, float, Decimal or None)

    Returns:
        Integer count, 0 for anything non-numeric

    Examples:
        parse_count("12") -> 12
        parse_count("12.7") -> 12
        parse_count("3abc") -> 3
        parse_count("") -> 0
        parse_count(None) -> 0
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        return int(parse_quantity(value))

    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    digits = match.group(1).lstrip("+-")
    if len(digits.lstrip("0")) > MAX_DIGITS:
        return 0
    return int(match.group(1))


def parse_quantity(value: Any) -> Decimal:
    """
    Coerce a raw count that may carry a fractional part.

    Args:
        value: Raw form value (str, int, float, Decimal or None)

    Returns:
        Decimal quantity, Decimal(0) for anything non-numeric

    Examples:
        parse_quantity("2.5") -> Decimal("2.5")
        parse_quantity(".5") -> Decimal("0.5")
        parse_quantity("abc") -> Decimal("0")
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, Decimal):
        candidate = value
    elif isinstance(value, int):
        candidate = Decimal(value)
    elif isinstance(value, float):
        # Go through str() so 0.1 stays 0.1 instead of its binary expansion
        candidate = Decimal(str(value))
    else:
        match = _LEADING_DECIMAL.match(str(value))
        if not match:
            return Decimal(0)
        candidate = Decimal(match.group(1))
    return candidate if _in_range(candidate) else Decimal(0)


def _in_range(amount: Decimal) -> bool:
    return amount.is_finite() and (amount.is_zero() or amount.adjusted() < MAX_DIGITS)


def quantize_to_cents(amount: Decimal) -> int:
    """
    Round a decimal dollar amount to whole cents (half-up).

    Amounts wider than the default 28-digit context are rounded under a
    context sized to fit them. Infinite, NaN and out-of-range amounts count
    as 0.

    Example:
        quantize_to_cents(Decimal("1.005")) -> 101
    """
    if not _in_range(amount):
        return 0
    try:
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, amount.adjusted() + _PRECISION_MARGIN)
            return int((amount / CENT).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except DecimalException:
        return 0


def safe_currency_to_cents(value: Any) -> int:
    """
    Safely convert a dollar amount to integer cents.

    Handles various input formats and edge cases gracefully.

    Args:
        value: Dollar amount like '$12.34', '12.34', '12,345.67', 12.34 or 12

    Returns:
        Integer cents (1234 for $12.34), 0 for invalid input

    Examples:
        safe_currency_to_cents('$45.99') -> 4599
        safe_currency_to_cents('-12.50') -> -1250
        safe_currency_to_cents('') -> 0
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value * 100
    if isinstance(value, (float, Decimal)):
        return quantize_to_cents(parse_quantity(value))

    clean_str = str(value).replace("$", "").replace(",", "").strip()
    if not clean_str:
        return 0

    # "-$12.50" arrives as "-12.50" after stripping, "$-12.50" as well
    return quantize_to_cents(parse_quantity(clean_str))


def cents_to_decimal(cents: int) -> Decimal:
    """Convert cents to a two-place Decimal dollar amount."""
    cents = int(cents)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(str(abs(cents))) + _PRECISION_MARGIN)
        return (Decimal(cents) * CENT).quantize(CENT)


def cents_to_decimal_str(cents: int) -> str:
    """
    Convert cents to a plain decimal string using integer arithmetic.

    Example:
        cents_to_decimal_str(4599) -> "45.99"
        cents_to_decimal_str(-1250) -> "-12.50"
    """
    is_negative = cents < 0
    abs_cents = abs(int(cents))

    dollars = abs_cents // 100
    remainder = abs_cents % 100

    if is_negative:
        return f"-{dollars}.{remainder:02d}"
    return f"{dollars}.{remainder:02d}"


def format_cents(cents: int) -> str:
    """
    Format cents for display with $ prefix and thousands separators.

    Example:
        format_cents(123450) -> "$1,234.50"
        format_cents(-1250) -> "-$12.50"
    """
    sign = "-" if cents < 0 else ""
    abs_cents = abs(int(cents))
    return f"{sign}${abs_cents // 100:,}.{abs_cents % 100:02d}"


def format_signed_cents(cents: int) -> str:
    """Format cents with an explicit + for positive amounts (variance display)."""
    if cents > 0:
        return f"+{format_cents(cents)}"
    return format_cents(cents)
