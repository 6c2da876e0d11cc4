#!/usr/bin/env python3
"""
Register Domain Models

Denomination tables and the per-register count/breakdown structures.
Counts are the only thing stored; every total is derived from them.
"""

from dataclasses import dataclass, field
from typing import Any

from ..core.money import Money


@dataclass(frozen=True)
class Denomination:
    """One countable unit: a note, a loose coin, or a roll of coins."""

    key: str
    label: str
    value_cents: int


NOTE_DENOMINATIONS: tuple[Denomination, ...] = (
    Denomination("hundreds", "$100", 10000),
    Denomination("fifties", "$50", 5000),
    Denomination("twenties", "$20", 2000),
    Denomination("tens", "$10", 1000),
    Denomination("fives", "$5", 500),
)

# Loose coins are worth their face value
LOOSE_COIN_DENOMINATIONS: tuple[Denomination, ...] = (
    Denomination("twos", "$2", 200),
    Denomination("dollars", "$1", 100),
    Denomination("fifty_cents", "50¢", 50),
    Denomination("twenty_cents", "20¢", 20),
    Denomination("ten_cents", "10¢", 10),
    Denomination("five_cents", "5¢", 5),
)

# A roll is counted as one unit at its fixed bulk value
COIN_ROLL_DENOMINATIONS: tuple[Denomination, ...] = (
    Denomination("dollars", "$1 Roll ($20)", 2000),
    Denomination("twos", "$2 Roll ($50)", 5000),
    Denomination("fifty_cents", "50¢ Roll ($10)", 1000),
    Denomination("twenty_cents", "20¢ Roll ($4)", 400),
    Denomination("ten_cents", "10¢ Roll ($4)", 400),
    Denomination("five_cents", "5¢ Roll ($2)", 200),
)

DENOMINATION_GROUPS: dict[str, tuple[Denomination, ...]] = {
    "notes": NOTE_DENOMINATIONS,
    "loose_coins": LOOSE_COIN_DENOMINATIONS,
    "coin_rolls": COIN_ROLL_DENOMINATIONS,
}

# Wire names used by older drafts and the web client
_GROUP_ALIASES = {
    "notes": "notes",
    "loose": "loose_coins",
    "looseCoins": "loose_coins",
    "loose_coins": "loose_coins",
    "coinBags": "coin_rolls",
    "coinRolls": "coin_rolls",
    "coin_rolls": "coin_rolls",
}

_COIN_KEY_ALIASES = {
    "fifties": "fifty_cents",
    "twenties": "twenty_cents",
    "tens": "ten_cents",
    "fives": "five_cents",
    "fiftyCents": "fifty_cents",
    "twentyCents": "twenty_cents",
    "tenCents": "ten_cents",
    "fiveCents": "five_cents",
}


def _blank_group(group: str) -> dict[str, Any]:
    return {d.key: "" for d in DENOMINATION_GROUPS[group]}


def canonical_group(name: str) -> str:
    """
    Resolve a group name or alias to its canonical name.

    Raises:
        KeyError: If the name is not a known denomination group
    """
    return _GROUP_ALIASES[name]


def canonical_key(group: str, key: str) -> str:
    """
    Resolve a denomination key within a group, accepting the legacy coin names.

    Raises:
        KeyError: If the key is not a denomination of that group
    """
    valid = {d.key for d in DENOMINATION_GROUPS[group]}
    if key in valid:
        return key
    if group != "notes" and _COIN_KEY_ALIASES.get(key) in valid:
        return _COIN_KEY_ALIASES[key]
    raise KeyError(f"Unknown {group} denomination: {key}")


@dataclass
class DenominationCount:
    """
    Raw counts for one register as the employee entered them.

    Values are kept exactly as typed (strings, numbers or blanks) so a draft can be
    restored verbatim; the calculator coerces them when deriving totals.
    """

    notes: dict[str, Any] = field(default_factory=lambda: _blank_group("notes"))
    loose_coins: dict[str, Any] = field(default_factory=lambda: _blank_group("loose_coins"))
    coin_rolls: dict[str, Any] = field(default_factory=lambda: _blank_group("coin_rolls"))

    @classmethod
    def blank(cls) -> "DenominationCount":
        """Create an empty count sheet."""
        return cls()

    def group(self, name: str) -> dict[str, Any]:
        """Get a group's counts by canonical name or alias."""
        return getattr(self, canonical_group(name))

    def set(self, group: str, key: str, value: Any) -> None:
        """
        Set a single count.

        Raises:
            KeyError: If the group or denomination is unknown
        """
        group = canonical_group(group)
        getattr(self, group)[canonical_key(group, key)] = value

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "notes": dict(self.notes),
            "loose_coins": dict(self.loose_coins),
            "coin_rolls": dict(self.coin_rolls),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "DenominationCount":
        """
        Create a count sheet from a dictionary, merging onto blank defaults.

        Accepts both the nested form ({"notes": {...}, "loose_coins": {...}}) and the
        flat legacy form where note counts sit at the top level. Unknown keys are
        dropped so a stale draft never introduces fields the calculator ignores.
        """
        counts = cls.blank()
        if not isinstance(data, dict):
            return counts

        for raw_name, value in data.items():
            if raw_name in _GROUP_ALIASES and isinstance(value, dict):
                group = _GROUP_ALIASES[raw_name]
                for raw_key, raw_value in value.items():
                    try:
                        getattr(counts, group)[canonical_key(group, raw_key)] = raw_value
                    except KeyError:
                        continue
            elif raw_name in counts.notes:
                counts.notes[raw_name] = value

        return counts


@dataclass(frozen=True)
class RegisterBreakdown:
    """Derived monetary totals for one register."""

    notes_total: Money
    loose_total: Money
    coin_roll_total: Money
    total: Money

    @classmethod
    def empty(cls) -> "RegisterBreakdown":
        zero = Money.zero()
        return cls(notes_total=zero, loose_total=zero, coin_roll_total=zero, total=zero)

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary with decimal currency strings."""
        return {
            "notes_total": self.notes_total.to_decimal_str(),
            "loose_total": self.loose_total.to_decimal_str(),
            "coin_roll_total": self.coin_roll_total.to_decimal_str(),
            "total": self.total.to_decimal_str(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RegisterBreakdown":
        return cls(
            notes_total=Money.from_dollars(data.get("notes_total")),
            loose_total=Money.from_dollars(data.get("loose_total")),
            coin_roll_total=Money.from_dollars(data.get("coin_roll_total")),
            total=Money.from_dollars(data.get("total")),
        )
