"""
Register Counting Package

Counting cash in the drawers and turning counts into money.

This package provides:
- Station configuration normalization (register/terminal layout)
- Denomination breakdown per register
- Bankable amounts after the reserve float
- Expected banking, variance and balance classification
- YAML storage for the station layout
"""

from .calculator import (
    BALANCE_THRESHOLD,
    MINOR_VARIANCE_BAND,
    ReconciliationSnapshot,
    VarianceClass,
    VarianceResult,
    classify_variance,
    compute_actual_banking,
    compute_bankable,
    compute_breakdown,
    compute_snapshot,
    compute_terminals_total,
    compute_variance,
    is_balanced,
)
from .config_normalizer import (
    MAX_REGISTERS,
    MAX_TERMINALS,
    InvalidConfigError,
    RegisterConfig,
    StationConfig,
    TerminalConfig,
    add_register,
    add_terminal,
    default_station_config,
    normalize_config,
    remove_register,
    remove_terminal,
    resize,
    station_config_to_dict,
    toggle_terminal,
    validate_config,
)
from .models import DenominationCount, RegisterBreakdown
from .station_store import StaticConfigProvider, YamlConfigProvider

__all__ = [
    "BALANCE_THRESHOLD",
    "MAX_REGISTERS",
    "MAX_TERMINALS",
    "MINOR_VARIANCE_BAND",
    "DenominationCount",
    "InvalidConfigError",
    "ReconciliationSnapshot",
    "RegisterBreakdown",
    "RegisterConfig",
    "StaticConfigProvider",
    "StationConfig",
    "TerminalConfig",
    "VarianceClass",
    "VarianceResult",
    "YamlConfigProvider",
    "add_register",
    "add_terminal",
    "classify_variance",
    "compute_actual_banking",
    "compute_bankable",
    "compute_breakdown",
    "compute_snapshot",
    "compute_terminals_total",
    "compute_variance",
    "default_station_config",
    "is_balanced",
    "normalize_config",
    "remove_register",
    "remove_terminal",
    "resize",
    "station_config_to_dict",
    "toggle_terminal",
    "validate_config",
]
