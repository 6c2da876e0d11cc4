"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import tempfile
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def raw_station_config() -> dict[str, Any]:
    """Two registers with a $400 float, four terminals with the last switched off."""
    return {
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


@pytest.fixture
def balanced_draft() -> dict[str, Any]:
    """
    A draft that balances exactly against raw_station_config.

    Register 1 holds $1,050.00 and register 2 holds $400.00, so $650.00 is
    banked; sales $1,500 - EFTPOS $800 - payouts $50 = $650 expected.
    """
    return {
        "date": "2025-08-18",
        "total_sales": "1500.00",
        "terminal_amounts": ["500.00", "300.00", "", "999.00"],
        "payouts": "50.00",
        "registers": [
            {
                "notes": {"hundreds": 10, "fifties": 1},
                "loose_coins": {},
                "coin_rolls": {},
            },
            {
                "notes": {"hundreds": 4},
                "loose_coins": {},
                "coin_rolls": {},
            },
        ],
        "bag_number": "B-17",
        "comments": "",
    }


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables."""
    # Ensure tests don't use real data
    monkeypatch.setenv("CASHUP_ENV", "test")
    monkeypatch.setenv("CASHUP_DATA_DIR", str(tmp_path / "cashup_data"))
    monkeypatch.setenv("CASHUP_EMPLOYEE_NAME", "Test Employee")
    monkeypatch.delenv("CASHUP_STATIONS_FILE", raising=False)
    monkeypatch.delenv("CASHUP_REVIEW_SORT", raising=False)
    monkeypatch.delenv("CASHUP_TIMEZONE", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "INFO")

    # Each test gets a freshly built configuration
    monkeypatch.setattr("cashup.core.config._config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "wizard: Tests for the reconciliation wizard")
    config.addinivalue_line("markers", "workflow: Tests for manager review transitions")
