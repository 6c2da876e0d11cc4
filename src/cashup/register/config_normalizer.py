#!/usr/bin/env python3
"""
Station Configuration Normalizer

Repairs a venue's register/terminal layout so that every per-index sequence
(names, enabled flags) is exactly as long as the declared count.

The layout arrives from a config provider as a loosely-shaped mapping:

    {
        "registers": {"count": 2, "names": [...], "enabled": [...], "reserveAmount": 400},
        "posTerminals": {"count": 4, "names": [...], "enabled": [...]},
        "reconciliation": {"varianceTolerance": 5.00, ...},
        "tenant": {"name": ..., "timezone": ...},
    }

Anything indexed by register or terminal number must go through resize() first.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, TypeVar
from zoneinfo import ZoneInfo

from ..core.money import Money

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_REGISTERS = 1
MAX_REGISTERS = 10
MIN_TERMINALS = 1
MAX_TERMINALS = 20

DEFAULT_RESERVE = Money.from_dollars(400)
DEFAULT_VARIANCE_TOLERANCE = Money.from_dollars(5)


class InvalidConfigError(ValueError):
    """Raised when a station configuration cannot be normalized."""

    pass


def default_register_name(index: int) -> str:
    return f"Register {index + 1}"


def default_terminal_name(index: int) -> str:
    return f"Terminal {index + 1}"


def resize(items: Sequence[T] | None, target_len: int, default_factory: Callable[[int], T]) -> list[T]:
    """
    Resize an ordered sequence to exactly target_len entries.

    Existing entries are kept by index, missing indices are filled with
    default_factory(index), and entries past target_len are dropped.

    Args:
        items: Current sequence (None is treated as empty)
        target_len: Required length
        default_factory: Builds the value for a missing index

    Returns:
        New list of length target_len

    Raises:
        ValueError: If target_len is negative
    """
    if target_len < 0:
        raise ValueError(f"Cannot resize to negative length {target_len}")

    current = list(items or [])[:target_len]
    current.extend(default_factory(i) for i in range(len(current), target_len))
    return current


@dataclass(frozen=True)
class RegisterConfig:
    """One configured cash register."""

    index: int
    name: str
    enabled: bool = True


@dataclass(frozen=True)
class TerminalConfig:
    """One configured POS/EFTPOS terminal."""

    index: int
    name: str
    enabled: bool = True


@dataclass(frozen=True)
class RegisterSettings:
    """Register section of a station configuration."""

    count: int
    names: tuple[str, ...]
    enabled: tuple[bool, ...]
    reserve_amount: Money = DEFAULT_RESERVE


@dataclass(frozen=True)
class TerminalSettings:
    """POS terminal section of a station configuration."""

    count: int
    names: tuple[str, ...]
    enabled: tuple[bool, ...]


@dataclass(frozen=True)
class ReconciliationSettings:
    """
    Review settings carried with the station layout.

    variance_tolerance is the venue's own configurable tolerance. It is not the
    fixed $5.00 presentation band used by classify_variance().
    """

    daily_deadline: str = "23:59"
    variance_tolerance: Money = DEFAULT_VARIANCE_TOLERANCE
    require_manager_approval: bool = True


@dataclass(frozen=True)
class StationConfig:
    """Normalized register/terminal layout for one venue."""

    registers: RegisterSettings
    pos_terminals: TerminalSettings
    reconciliation: ReconciliationSettings = field(default_factory=ReconciliationSettings)
    tenant_name: str | None = None
    timezone: str | None = None

    @property
    def register_count(self) -> int:
        return self.registers.count

    @property
    def terminal_count(self) -> int:
        return self.pos_terminals.count

    @property
    def reserve_amount(self) -> Money:
        return self.registers.reserve_amount

    @property
    def register_configs(self) -> list[RegisterConfig]:
        """Registers in index order."""
        return [
            RegisterConfig(index=i, name=self.registers.names[i], enabled=self.registers.enabled[i])
            for i in range(self.registers.count)
        ]

    @property
    def terminal_configs(self) -> list[TerminalConfig]:
        """Terminals in index order."""
        return [
            TerminalConfig(index=i, name=self.pos_terminals.names[i], enabled=self.pos_terminals.enabled[i])
            for i in range(self.pos_terminals.count)
        ]


def _section(raw: Mapping[str, Any], *names: str) -> Mapping[str, Any] | None:
    for name in names:
        value = raw.get(name)
        if isinstance(value, Mapping):
            return value
    return None


def _read_count(section: Mapping[str, Any], label: str, maximum: int) -> int:
    value = section.get("count")
    if value is None or value == "":
        raise InvalidConfigError(f"{label} count is required")
    if isinstance(value, bool):
        raise InvalidConfigError(f"{label} count must be a whole number, got {value!r}")

    try:
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(value)
            count = int(value)
        else:
            count = int(str(value).strip())
    except (TypeError, ValueError) as e:
        raise InvalidConfigError(f"{label} count must be a whole number, got {value!r}") from e

    if count <= 0:
        raise InvalidConfigError(f"{label} count must be at least 1, got {count}")
    if count > maximum:
        logger.warning("%s count %d exceeds maximum %d, clamping", label, count, maximum)
        count = maximum
    return count


def _first_present(section: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in section:
            return section[key]
    return None


def _as_list(value: Any) -> list:
    if isinstance(value, Sequence) and not isinstance(value, str):
        return list(value)
    return []


def _normalize_names(raw_names: Any, count: int, default: Callable[[int], str]) -> tuple[str, ...]:
    names = resize(_as_list(raw_names), count, default)
    return tuple(
        str(name).strip() if name is not None and str(name).strip() else default(i)
        for i, name in enumerate(names)
    )


_TRUE_WORDS = {"true", "yes", "y", "on", "1"}
_FALSE_WORDS = {"false", "no", "n", "off", "0"}


def _read_flag(value: Any, default: bool = True) -> bool:
    """
    Read a yes/no setting from a hand-edited file.

    Strings such as "false", "No" or "0" are off and "true", "yes" or "1" are
    on. Missing values and unrecognised strings take the default.
    """
    if value is None:
        return default
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        return default
    return bool(value)


def _normalize_enabled(raw_enabled: Any, count: int) -> tuple[bool, ...]:
    flags = resize(_as_list(raw_enabled), count, lambda i: True)
    return tuple(_read_flag(flag) for flag in flags)


def _read_timezone(value: Any) -> str | None:
    if value is None or not str(value).strip():
        return None
    name = str(value).strip()
    try:
        ZoneInfo(name)
    except (ValueError, KeyError, OSError) as e:
        raise InvalidConfigError(f"Unknown timezone {name!r}") from e
    return name


def normalize_config(raw: Mapping[str, Any] | StationConfig) -> StationConfig:
    """
    Normalize a raw station configuration.

    Keeps existing names/enabled flags by index, synthesizes "Register {n}" /
    "Terminal {n}" and enabled=True for missing indices, and truncates surplus
    entries. Normalizing an already-normalized config returns an equal config.

    Args:
        raw: Raw mapping (camelCase or snake_case keys) or a StationConfig

    Returns:
        StationConfig whose sequences match their counts

    Raises:
        InvalidConfigError: If a section or count is missing, a count is not a
            positive whole number, an amount is negative, or the
            tenant timezone is unknown
    """
    if isinstance(raw, StationConfig):
        raw = station_config_to_dict(raw)
    if not isinstance(raw, Mapping):
        raise InvalidConfigError(f"Station configuration must be a mapping, got {type(raw).__name__}")

    register_section = _section(raw, "registers")
    if register_section is None:
        raise InvalidConfigError("Registers configuration is required")
    terminal_section = _section(raw, "posTerminals", "pos_terminals")
    if terminal_section is None:
        raise InvalidConfigError("POS terminals configuration is required")

    register_count = _read_count(register_section, "Register", MAX_REGISTERS)
    terminal_count = _read_count(terminal_section, "POS terminal", MAX_TERMINALS)

    raw_reserve = _first_present(register_section, "reserveAmount", "reserve_amount")
    reserve = DEFAULT_RESERVE if raw_reserve in (None, "") else Money.from_dollars(raw_reserve)
    if reserve < Money.zero():
        raise InvalidConfigError(f"Reserve amount must not be negative, got {reserve}")

    registers = RegisterSettings(
        count=register_count,
        names=_normalize_names(register_section.get("names"), register_count, default_register_name),
        enabled=_normalize_enabled(register_section.get("enabled"), register_count),
        reserve_amount=reserve,
    )
    pos_terminals = TerminalSettings(
        count=terminal_count,
        names=_normalize_names(terminal_section.get("names"), terminal_count, default_terminal_name),
        enabled=_normalize_enabled(terminal_section.get("enabled"), terminal_count),
    )

    reconciliation = ReconciliationSettings()
    rec_section = _section(raw, "reconciliation")
    if rec_section is not None:
        raw_tolerance = _first_present(rec_section, "varianceTolerance", "variance_tolerance", "tolerance")
        tolerance = (
            DEFAULT_VARIANCE_TOLERANCE if raw_tolerance in (None, "") else Money.from_dollars(raw_tolerance)
        )
        if tolerance < Money.zero():
            raise InvalidConfigError(f"Variance tolerance must not be negative, got {tolerance}")

        raw_approval = _first_present(
            rec_section, "requireManagerApproval", "require_manager_approval", "requireApproval"
        )
        reconciliation = ReconciliationSettings(
            daily_deadline=str(_first_present(rec_section, "dailyDeadline", "daily_deadline") or "23:59"),
            variance_tolerance=tolerance,
            require_manager_approval=_read_flag(raw_approval),
        )

    tenant = _section(raw, "tenant") or {}

    return StationConfig(
        registers=registers,
        pos_terminals=pos_terminals,
        reconciliation=reconciliation,
        tenant_name=tenant.get("name") or None,
        timezone=_read_timezone(tenant.get("timezone")),
    )


def station_config_to_dict(config: StationConfig) -> dict[str, Any]:
    """Serialize a StationConfig to the camelCase wire shape with decimal money."""
    result: dict[str, Any] = {
        "registers": {
            "count": config.registers.count,
            "names": list(config.registers.names),
            "enabled": list(config.registers.enabled),
            "reserveAmount": config.registers.reserve_amount.to_decimal_str(),
        },
        "posTerminals": {
            "count": config.pos_terminals.count,
            "names": list(config.pos_terminals.names),
            "enabled": list(config.pos_terminals.enabled),
        },
        "reconciliation": {
            "dailyDeadline": config.reconciliation.daily_deadline,
            "varianceTolerance": config.reconciliation.variance_tolerance.to_decimal_str(),
            "requireManagerApproval": config.reconciliation.require_manager_approval,
        },
    }
    if config.tenant_name or config.timezone:
        result["tenant"] = {"name": config.tenant_name, "timezone": config.timezone}
    return result


def default_station_config() -> StationConfig:
    """Layout used when no station configuration has been saved yet."""
    return normalize_config(
        {
            "registers": {
                "count": 2,
                "names": ["Main Register", "Secondary Register"],
                "reserveAmount": 400,
            },
            "posTerminals": {
                "count": 4,
                "names": ["Terminal 1", "Terminal 2", "Terminal 3", "Terminal 4"],
                "enabled": [True, True, True, False],
            },
            "reconciliation": {
                "dailyDeadline": "23:59",
                "varianceTolerance": 5.00,
                "requireManagerApproval": True,
            },
        }
    )


def validate_config(raw: Mapping[str, Any]) -> list[str]:
    """
    Check a raw configuration without repairing it.

    Returns:
        List of problems; empty when the configuration is already consistent
    """
    errors: list[str] = []
    if not isinstance(raw, Mapping):
        return ["Configuration must be a mapping"]

    registers = _section(raw, "registers")
    if registers is None:
        errors.append("Registers configuration is required")
    else:
        count = registers.get("count")
        if not isinstance(count, int) or isinstance(count, bool) or not MIN_REGISTERS <= count <= MAX_REGISTERS:
            errors.append(f"Register count must be between {MIN_REGISTERS} and {MAX_REGISTERS}")
        reserve = _first_present(registers, "reserveAmount", "reserve_amount")
        if reserve is None or Money.from_dollars(reserve) < Money.zero():
            errors.append("Reserve amount must be zero or a positive number")
        names = registers.get("names")
        if not isinstance(names, Sequence) or len(names) != count:
            errors.append("Number of register names must match register count")

    terminals = _section(raw, "posTerminals", "pos_terminals")
    if terminals is None:
        errors.append("POS terminals configuration is required")
    else:
        count = terminals.get("count")
        if not isinstance(count, int) or isinstance(count, bool) or not MIN_TERMINALS <= count <= MAX_TERMINALS:
            errors.append(f"POS terminal count must be between {MIN_TERMINALS} and {MAX_TERMINALS}")
        names = terminals.get("names")
        if not isinstance(names, Sequence) or len(names) != count:
            errors.append("Number of POS terminal names must match terminal count")

    reconciliation = _section(raw, "reconciliation")
    if reconciliation is not None:
        tolerance = _first_present(reconciliation, "varianceTolerance", "variance_tolerance", "tolerance")
        if tolerance is not None and Money.from_dollars(tolerance) < Money.zero():
            errors.append("Variance tolerance must be zero or a positive number")

    tenant = _section(raw, "tenant")
    if tenant is not None:
        try:
            _read_timezone(tenant.get("timezone"))
        except InvalidConfigError as e:
            errors.append(str(e))

    return errors


def _resize_registers(config: StationConfig, count: int) -> StationConfig:
    registers = replace(
        config.registers,
        count=count,
        names=tuple(resize(config.registers.names, count, default_register_name)),
        enabled=tuple(resize(config.registers.enabled, count, lambda i: True)),
    )
    return replace(config, registers=registers)


def _resize_terminals(config: StationConfig, count: int) -> StationConfig:
    terminals = replace(
        config.pos_terminals,
        count=count,
        names=tuple(resize(config.pos_terminals.names, count, default_terminal_name)),
        enabled=tuple(resize(config.pos_terminals.enabled, count, lambda i: True)),
    )
    return replace(config, pos_terminals=terminals)


def add_register(config: StationConfig) -> StationConfig:
    """Add one register; a no-op once MAX_REGISTERS is reached."""
    if config.registers.count >= MAX_REGISTERS:
        return config
    return _resize_registers(config, config.registers.count + 1)


def remove_register(config: StationConfig) -> StationConfig:
    """Remove the last register; a no-op at MIN_REGISTERS."""
    if config.registers.count <= MIN_REGISTERS:
        return config
    return _resize_registers(config, config.registers.count - 1)


def add_terminal(config: StationConfig) -> StationConfig:
    """Add one terminal; a no-op once MAX_TERMINALS is reached."""
    if config.pos_terminals.count >= MAX_TERMINALS:
        return config
    return _resize_terminals(config, config.pos_terminals.count + 1)


def remove_terminal(config: StationConfig) -> StationConfig:
    """Remove the last terminal; a no-op at MIN_TERMINALS."""
    if config.pos_terminals.count <= MIN_TERMINALS:
        return config
    return _resize_terminals(config, config.pos_terminals.count - 1)


def toggle_terminal(config: StationConfig, index: int) -> StationConfig:
    """
    Flip a terminal's enabled flag.

    Raises:
        IndexError: If index is outside the configured terminals
    """
    if not 0 <= index < config.pos_terminals.count:
        raise IndexError(f"Terminal index {index} out of range (0..{config.pos_terminals.count - 1})")
    enabled = list(config.pos_terminals.enabled)
    enabled[index] = not enabled[index]
    return replace(config, pos_terminals=replace(config.pos_terminals, enabled=tuple(enabled)))


def rename_register(config: StationConfig, index: int, name: str) -> StationConfig:
    """Rename a register; a blank name restores the default label."""
    if not 0 <= index < config.registers.count:
        raise IndexError(f"Register index {index} out of range (0..{config.registers.count - 1})")
    names = list(config.registers.names)
    names[index] = name.strip() or default_register_name(index)
    return replace(config, registers=replace(config.registers, names=tuple(names)))


def rename_terminal(config: StationConfig, index: int, name: str) -> StationConfig:
    """Rename a terminal; a blank name restores the default label."""
    if not 0 <= index < config.pos_terminals.count:
        raise IndexError(f"Terminal index {index} out of range (0..{config.pos_terminals.count - 1})")
    names = list(config.pos_terminals.names)
    names[index] = name.strip() or default_terminal_name(index)
    return replace(config, pos_terminals=replace(config.pos_terminals, names=tuple(names)))
