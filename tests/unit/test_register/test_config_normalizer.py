#!/usr/bin/env python3
"""Tests for station configuration normalization."""

import pytest

from cashup.core.money import Money
from cashup.register.config_normalizer import (
    MAX_REGISTERS,
    MAX_TERMINALS,
    InvalidConfigError,
    add_register,
    add_terminal,
    default_station_config,
    normalize_config,
    remove_register,
    remove_terminal,
    rename_register,
    rename_terminal,
    resize,
    station_config_to_dict,
    toggle_terminal,
    validate_config,
)


class TestResize:
    """Test the ordered-sequence resize helper."""

    @pytest.mark.unit
    def test_grow_fills_from_factory(self):
        assert resize(["a"], 3, lambda i: f"new{i}") == ["a", "new1", "new2"]

    @pytest.mark.unit
    def test_shrink_truncates(self):
        assert resize([1, 2, 3], 1, lambda i: 0) == [1]

    @pytest.mark.unit
    def test_none_is_empty(self):
        assert resize(None, 2, lambda i: i) == [0, 1]

    @pytest.mark.unit
    def test_negative_length_rejected(self):
        with pytest.raises(ValueError):
            resize([], -1, lambda i: i)


class TestNormalizeConfig:
    """Test normalize_config repairs and rejections."""

    @pytest.mark.unit
    def test_missing_names_are_synthesized(self):
        config = normalize_config({"registers": {"count": 3, "names": ["Bar"]}, "posTerminals": {"count": 2}})

        assert config.registers.names == ("Bar", "Register 2", "Register 3")
        assert config.registers.enabled == (True, True, True)
        assert config.pos_terminals.names == ("Terminal 1", "Terminal 2")
        assert config.pos_terminals.enabled == (True, True)

    @pytest.mark.unit
    def test_surplus_entries_truncated(self):
        config = normalize_config(
            {
                "registers": {"count": 1, "names": ["A", "B", "C"]},
                "posTerminals": {"count": 2, "names": ["T1", "T2", "T3"], "enabled": [False, True, True]},
            }
        )

        assert config.registers.names == ("A",)
        assert config.pos_terminals.names == ("T1", "T2")
        assert config.pos_terminals.enabled == (False, True)

    @pytest.mark.unit
    def test_snake_case_keys_accepted(self):
        config = normalize_config(
            {
                "registers": {"count": 1, "reserve_amount": "250.00"},
                "pos_terminals": {"count": 1},
                "reconciliation": {"variance_tolerance": 2, "require_manager_approval": False},
            }
        )

        assert config.reserve_amount == Money.from_dollars(250)
        assert config.reconciliation.variance_tolerance == Money.from_dollars(2)
        assert config.reconciliation.require_manager_approval is False

    @pytest.mark.unit
    def test_default_reserve_is_400(self):
        config = normalize_config({"registers": {"count": 1}, "posTerminals": {"count": 1}})
        assert config.reserve_amount == Money.from_dollars(400)
        assert config.reconciliation.variance_tolerance == Money.from_dollars(5)

    @pytest.mark.unit
    def test_counts_above_maximum_are_clamped(self):
        config = normalize_config({"registers": {"count": 50}, "posTerminals": {"count": 99}})
        assert config.register_count == MAX_REGISTERS
        assert config.terminal_count == MAX_TERMINALS
        assert len(config.registers.names) == MAX_REGISTERS

    @pytest.mark.unit
    @pytest.mark.parametrize("count", [0, -1, "abc", None, 2.5, True])
    def test_invalid_register_count_rejected(self, count):
        with pytest.raises(InvalidConfigError):
            normalize_config({"registers": {"count": count}, "posTerminals": {"count": 1}})

    @pytest.mark.unit
    def test_missing_sections_rejected(self):
        with pytest.raises(InvalidConfigError):
            normalize_config({"posTerminals": {"count": 1}})
        with pytest.raises(InvalidConfigError):
            normalize_config({"registers": {"count": 1}})

    @pytest.mark.unit
    def test_negative_reserve_rejected(self):
        with pytest.raises(InvalidConfigError):
            normalize_config({"registers": {"count": 1, "reserveAmount": -1}, "posTerminals": {"count": 1}})

    @pytest.mark.unit
    def test_normalize_is_idempotent(self, raw_station_config):
        once = normalize_config(raw_station_config)
        twice = normalize_config(station_config_to_dict(once))

        assert twice == once
        assert normalize_config(once) == once

    @pytest.mark.unit
    def test_default_layout(self):
        config = default_station_config()

        assert config.register_count == 2
        assert config.registers.names == ("Main Register", "Secondary Register")
        assert config.terminal_count == 4
        assert config.pos_terminals.enabled == (True, True, True, False)
        assert config.reserve_amount == Money.from_dollars(400)


    @pytest.mark.unit
    def test_enabled_flags_written_as_words(self):
        """A hand-edited file may spell flags as strings; "false" switches a terminal off."""
        config = normalize_config(
            {
                "registers": {"count": 1},
                "posTerminals": {"count": 6, "enabled": ["false", "No", "0", "true", "YES", "off"]},
            }
        )

        assert config.pos_terminals.enabled == (False, False, False, True, True, False)

    @pytest.mark.unit
    def test_unrecognised_flag_words_keep_terminal_enabled(self):
        config = normalize_config(
            {"registers": {"count": 1}, "posTerminals": {"count": 3, "enabled": ["maybe", None, 0]}}
        )

        assert config.pos_terminals.enabled == (True, True, False)

    @pytest.mark.unit
    @pytest.mark.parametrize("raw_approval, expected", [("false", False), ("no", False), ("true", True), (0, False)])
    def test_manager_approval_written_as_words(self, raw_approval, expected):
        config = normalize_config(
            {
                "registers": {"count": 1},
                "posTerminals": {"count": 1},
                "reconciliation": {"requireManagerApproval": raw_approval},
            }
        )

        assert config.reconciliation.require_manager_approval is expected

    @pytest.mark.unit
    def test_known_timezone_kept(self):
        config = normalize_config(
            {"registers": {"count": 1}, "posTerminals": {"count": 1}, "tenant": {"timezone": "Australia/Sydney"}}
        )

        assert config.timezone == "Australia/Sydney"

    @pytest.mark.unit
    @pytest.mark.parametrize("timezone", ["Not/AZone", "Mars/Olympus_Mons", "../etc/passwd"])
    def test_unknown_timezone_rejected(self, timezone):
        with pytest.raises(InvalidConfigError, match="Unknown timezone"):
            normalize_config(
                {"registers": {"count": 1}, "posTerminals": {"count": 1}, "tenant": {"timezone": timezone}}
            )

    @pytest.mark.unit
    def test_blank_timezone_means_local(self):
        config = normalize_config(
            {"registers": {"count": 1}, "posTerminals": {"count": 1}, "tenant": {"timezone": " "}}
        )

        assert config.timezone is None


class TestLayoutEditing:
    """Test add/remove/toggle/rename operations."""

    @pytest.mark.unit
    def test_adding_registers_stops_at_ten(self):
        """Repeatedly adding registers stops growing at the maximum."""
        config = normalize_config({"registers": {"count": 1}, "posTerminals": {"count": 1}})
        for _ in range(10):
            config = add_register(config)

        assert config.register_count == 10
        assert len(config.registers.names) == 10
        assert len(config.registers.enabled) == 10
        assert config.registers.names[-1] == "Register 10"

    @pytest.mark.unit
    def test_removing_registers_stops_at_one(self):
        config = default_station_config()
        for _ in range(5):
            config = remove_register(config)

        assert config.register_count == 1
        assert config.registers.names == ("Main Register",)

    @pytest.mark.unit
    def test_terminal_bounds(self):
        config = default_station_config()
        for _ in range(30):
            config = add_terminal(config)
        assert config.terminal_count == MAX_TERMINALS

        for _ in range(30):
            config = remove_terminal(config)
        assert config.terminal_count == 1
        assert len(config.pos_terminals.enabled) == 1

    @pytest.mark.unit
    def test_toggle_terminal(self):
        config = toggle_terminal(default_station_config(), 3)
        assert config.pos_terminals.enabled == (True, True, True, True)

        with pytest.raises(IndexError):
            toggle_terminal(config, 4)

    @pytest.mark.unit
    def test_rename(self):
        config = rename_register(default_station_config(), 1, "  Bar  ")
        assert config.registers.names[1] == "Bar"

        config = rename_terminal(config, 0, "")
        assert config.pos_terminals.names[0] == "Terminal 1"


class TestValidateConfig:
    """Test validation without repair."""

    @pytest.mark.unit
    def test_consistent_config_has_no_errors(self, raw_station_config):
        assert validate_config(raw_station_config) == []

    @pytest.mark.unit
    def test_reports_each_problem(self):
        errors = validate_config(
            {
                "registers": {"count": 11, "names": ["A"], "reserveAmount": -5},
                "posTerminals": {"count": 2, "names": ["T1"]},
                "reconciliation": {"varianceTolerance": -1},
            }
        )

        assert "Register count must be between 1 and 10" in errors
        assert "Reserve amount must be zero or a positive number" in errors
        assert "Number of POS terminal names must match terminal count" in errors
        assert "Variance tolerance must be zero or a positive number" in errors

    @pytest.mark.unit
    def test_missing_sections(self):
        errors = validate_config({})
        assert "Registers configuration is required" in errors
        assert "POS terminals configuration is required" in errors

    @pytest.mark.unit
    def test_unknown_timezone_reported(self, raw_station_config):
        raw_station_config["tenant"] = {"name": "Harbour Cafe", "timezone": "Not/AZone"}

        assert validate_config(raw_station_config) == ["Unknown timezone 'Not/AZone'"]
