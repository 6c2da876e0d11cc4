"""
Cash-Up - End-of-Day Cash Drawer Reconciliation

Counts the cash in each register, works out what should be banked after the
reserve float is held back, compares it with the day's sales, and carries the
result through manager review.

Domain Packages:
- core: Currency handling, dates, configuration
- register: Station layout, denomination counting and variance calculation
- reconciliation: Cash-up wizard, review workflow, outbox and storage
- cli: Command-line interface

Example Usage:
    from cashup.register import compute_breakdown, compute_variance
    from cashup.reconciliation import ReconciliationWizard, approve
"""

__version__ = "0.1.0"
__author__ = "Cash-Up Developers"

from .core.config import Environment, get_config
from .core.currency import cents_to_decimal_str, safe_currency_to_cents
from .core.money import Money

__all__ = [
    # Core currency functions
    "Money",
    "cents_to_decimal_str",
    "safe_currency_to_cents",
    # Configuration
    "Environment",
    "get_config",
]
