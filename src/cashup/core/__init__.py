"""
Core Utilities Package

Shared primitives used by the register calculators and the reconciliation workflow.

This package provides:
- Currency handling with integer-cent arithmetic for precision
- Forgiving parsers for counts typed into a cash-up form
- Trading-date handling
- Configuration management for environment-specific settings
"""

from .config import (
    Config,
    Environment,
    get_config,
    get_data_dir,
    is_development,
    is_production,
    is_test,
    reload_config,
)
from .currency import (
    cents_to_decimal_str,
    format_cents,
    format_signed_cents,
    parse_count,
    parse_quantity,
    safe_currency_to_cents,
)
from .dates import TradingDate
from .money import Money

__all__ = [
    # Configuration
    "Config",
    "Environment",
    "Money",
    "TradingDate",
    "cents_to_decimal_str",
    "format_cents",
    "format_signed_cents",
    "get_config",
    "get_data_dir",
    "is_development",
    "is_production",
    "is_test",
    # Currency utilities
    "parse_count",
    "parse_quantity",
    "reload_config",
    "safe_currency_to_cents",
]
