#!/usr/bin/env python3
"""
Configuration Management for Cash-Up

Handles environment-based configuration with secure defaults and validation.
Supports multiple environments (development, test, production).

This is the application configuration (where files live, how to log). The
register/terminal layout of a venue is station configuration and lives in
cashup.register.config_normalizer.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class StorageConfig:
    """Local storage locations for drafts, the outbox and stored records."""

    records_dir: Path
    autosave_dir: Path
    outbox_dir: Path
    autosave_key: str = "cashup-reconciliation"


@dataclass
class ReviewConfig:
    """Manager review settings."""

    default_sort: str = "date"
    export_dir: Path | None = None


@dataclass
class Config:
    """
    Main configuration class for the cash-up application.

    Loads configuration from environment variables with defaults
    and validation for each environment type.
    """

    environment: Environment

    # Core directories
    data_dir: Path
    stations_file: Path

    # Component configurations
    storage: StorageConfig
    review: ReviewConfig

    # Application settings
    employee_name: str = "Unknown Employee"
    timezone: str | None = None
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("CASHUP_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_cashup"
            base_dir = Path(os.getenv("CASHUP_DATA_DIR", str(default_test_dir)))
        else:
            base_dir = Path(os.getenv("CASHUP_DATA_DIR", "./data")).expanduser().resolve()

        data_dir = base_dir
        storage = StorageConfig(
            records_dir=data_dir / "records",
            autosave_dir=data_dir / "autosave",
            outbox_dir=data_dir / "outbox",
            autosave_key=os.getenv("CASHUP_AUTOSAVE_KEY", "cashup-reconciliation"),
        )

        for directory in [data_dir, storage.records_dir, storage.autosave_dir, storage.outbox_dir]:
            directory.mkdir(parents=True, exist_ok=True)

        review = ReviewConfig(
            default_sort=os.getenv("CASHUP_REVIEW_SORT", "date"),
            export_dir=data_dir / "exports",
        )

        stations_file = Path(os.getenv("CASHUP_STATIONS_FILE", str(data_dir / "stations.yaml")))

        return cls(
            environment=env,
            data_dir=data_dir,
            stations_file=stations_file,
            storage=storage,
            review=review,
            employee_name=os.getenv("CASHUP_EMPLOYEE_NAME", "Unknown Employee"),
            timezone=os.getenv("CASHUP_TIMEZONE") or None,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        for name, path in [
            ("data_dir", self.data_dir),
            ("storage.records_dir", self.storage.records_dir),
            ("storage.autosave_dir", self.storage.autosave_dir),
            ("storage.outbox_dir", self.storage.outbox_dir),
        ]:
            if not path.exists():
                errors.append(f"{name} does not exist: {path}")

        if self.review.default_sort not in ("date", "variance"):
            errors.append(f"CASHUP_REVIEW_SORT must be 'date' or 'variance', got {self.review.default_sort!r}")

        if not self.storage.autosave_key.strip():
            errors.append("CASHUP_AUTOSAVE_KEY must not be blank")

        if self.timezone:
            try:
                from zoneinfo import ZoneInfo

                ZoneInfo(self.timezone)
            except (ValueError, KeyError, OSError) as e:
                errors.append(f"Invalid CASHUP_TIMEZONE {self.timezone!r}: {e}")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        if self.environment == Environment.PRODUCTION:
            logging.getLogger("asyncio").setLevel(logging.WARNING)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a plain dictionary for display."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if hasattr(field_value, "__dict__") and not isinstance(field_value, (Path, Enum)):
                nested_dict: dict[str, Any] = {}
                for nested_name, nested_value in field_value.__dict__.items():
                    nested_dict[nested_name] = str(nested_value) if isinstance(nested_value, Path) else nested_value
                result[field_name] = nested_dict
            elif isinstance(field_value, Path):
                result[field_name] = str(field_value)
            elif isinstance(field_value, Enum):
                result[field_name] = field_value.value
            else:
                result[field_name] = field_value

        return result


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        errors = _config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()


def get_data_dir() -> Path:
    """Get the data directory path."""
    return get_config().data_dir


def is_development() -> bool:
    """Check if running in development environment."""
    return get_config().environment == Environment.DEVELOPMENT


def is_test() -> bool:
    """Check if running in test environment."""
    return get_config().environment == Environment.TEST


def is_production() -> bool:
    """Check if running in production environment."""
    return get_config().environment == Environment.PRODUCTION
