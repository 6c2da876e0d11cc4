#!/usr/bin/env python3
"""
Integration tests for CLI Main Entry Point

Tests end-to-end CLI command execution with real command invocation.
"""

import json

import pytest
from click.testing import CliRunner

from cashup.cli.main import main
from cashup.core.config import get_config
from cashup.core.json_utils import write_json
from cashup.reconciliation.datastore import JsonOutboxStore
from cashup.reconciliation.outbox import Outbox
from tests.fixtures.records import make_record


@pytest.mark.integration
class TestCLIMainIntegration:
    """Test main CLI entry point with real command execution."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_help_command_lists_all_subcommands(self):
        """Test cashup --help shows all registered subcommands."""
        result = self.runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Cash-Up" in result.output

        for command in ["stations", "calc", "reconcile", "submit", "review", "sync", "status"]:
            assert command in result.output

    def test_version_command_shows_version_info(self):
        """Test cashup version displays version and author."""
        result = self.runner.invoke(main, ["version"])

        assert result.exit_code == 0
        assert "Cash-Up v" in result.output
        assert "Author:" in result.output

    def test_config_command_shows_configuration(self):
        """Test cashup config displays current configuration."""
        result = self.runner.invoke(main, ["config"])

        assert result.exit_code == 0
        assert "Current Configuration:" in result.output
        assert "Environment: test" in result.output
        assert "Data Directory:" in result.output
        assert "Stations File:" in result.output
        assert "Records Directory:" in result.output
        assert "Outbox Directory:" in result.output
        assert "Employee: Test Employee" in result.output
        assert "Timezone: local" in result.output
        assert "Log Level:" in result.output

    def test_invalid_command_shows_error(self):
        result = self.runner.invoke(main, ["invalid-command"])

        assert result.exit_code != 0
        assert "Error" in result.output or "No such" in result.output

    def test_verbose_flag_enables_verbose_output(self):
        result = self.runner.invoke(main, ["--verbose", "config"])

        assert result.exit_code == 0
        assert "Data directory:" in result.output
        assert "Current Configuration:" in result.output

    def test_multiple_global_options(self):
        result = self.runner.invoke(main, ["--config-env", "test", "--verbose", "config"])

        assert result.exit_code == 0
        assert "Environment: test" in result.output
        assert "Data directory:" in result.output

    def test_invalid_configuration_is_reported(self, monkeypatch):
        monkeypatch.setenv("CASHUP_REVIEW_SORT", "employee")

        result = self.runner.invoke(main, ["config"])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output

    def test_subcommand_help_accessible(self):
        for subcommand in ["stations", "calc", "reconcile", "submit", "review", "sync", "status"]:
            result = self.runner.invoke(main, [subcommand, "--help"])
            assert result.exit_code == 0
            assert "Usage:" in result.output

    def test_config_json_output(self, monkeypatch):
        monkeypatch.setenv("CASHUP_TIMEZONE", "Australia/Sydney")

        result = self.runner.invoke(main, ["config", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["environment"] == "test"
        assert data["employee_name"] == "Test Employee"
        assert data["timezone"] == "Australia/Sydney"
        assert data["storage"]["records_dir"] == str(get_config().storage.records_dir)
        assert data["review"]["default_sort"] == "date"


@pytest.mark.integration
class TestStatusCommand:
    """Test cashup status."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_nothing_stored(self):
        result = self.runner.invoke(main, ["status"])

        assert result.exit_code == 0
        assert "Local Data:" in result.output
        assert "No records stored" in result.output
        assert "Outbox empty" in result.output
        assert "No saved drafts" in result.output
        assert "bytes" not in result.output

    def test_reports_each_store(self):
        config = get_config()
        for record_id in ("r1", "r2"):
            write_json(config.storage.records_dir / f"{record_id}.json", make_record(record_id).to_dict())
        Outbox(JsonOutboxStore(config.storage.outbox_dir)).enqueue(make_record("q1"))

        result = self.runner.invoke(main, ["status"])

        assert result.exit_code == 0
        assert "2 record(s) stored (" in result.output
        assert "1 record(s) waiting to sync (" in result.output
        assert "0 day(s) ago)" in result.output
        assert "No saved drafts" in result.output

    def test_corrupt_outbox_reported(self):
        outbox_dir = get_config().storage.outbox_dir
        outbox_dir.mkdir(parents=True, exist_ok=True)
        (outbox_dir / "outbox.json").write_text("{not json")

        result = self.runner.invoke(main, ["status"])

        assert result.exit_code == 0
        assert "Outbox     unreadable: Corrupt outbox file" in result.output
        assert "No records stored" in result.output
