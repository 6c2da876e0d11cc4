#!/usr/bin/env python3
"""
Station Configuration Storage

Loads and saves a venue's register/terminal layout as YAML. A venue without a
stations file runs on the default two-register, four-terminal layout.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from .config_normalizer import StationConfig, default_station_config, normalize_config, station_config_to_dict

logger = logging.getLogger(__name__)


class YamlConfigProvider:
    """
    Station configuration read from a YAML file.

    The raw mapping is returned as written; normalization happens in the caller
    so invalid files still surface as InvalidConfigError there.
    """

    def __init__(self, stations_file: Path):
        """
        Initialize provider.

        Args:
            stations_file: Path to stations.yaml
        """
        self.stations_file = stations_file

    def get_config(self) -> dict[str, Any]:
        if not self.stations_file.exists():
            logger.info(f"No stations file at {self.stations_file}, using default layout")
            return station_config_to_dict(default_station_config())

        try:
            with open(self.stations_file) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load stations file {self.stations_file}: {e}")
            return station_config_to_dict(default_station_config())

        if not isinstance(data, dict):
            logger.error(f"Stations file {self.stations_file} is not a mapping, using default layout")
            return station_config_to_dict(default_station_config())
        return data

    def save(self, config: StationConfig | dict[str, Any]) -> StationConfig:
        """
        Normalize and write a station configuration.

        Args:
            config: StationConfig or raw mapping

        Returns:
            The normalized configuration that was written

        Raises:
            InvalidConfigError: If the configuration cannot be normalized
        """
        normalized = normalize_config(config)
        self.stations_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.stations_file, "w") as f:
            yaml.dump(station_config_to_dict(normalized), f, default_flow_style=False, sort_keys=False)
        logger.info(f"Saved station configuration to {self.stations_file}")
        return normalized


class StaticConfigProvider:
    """Station configuration supplied directly, for tests and embedding."""

    def __init__(self, raw: dict[str, Any] | StationConfig | None = None):
        if isinstance(raw, StationConfig):
            raw = station_config_to_dict(raw)
        self.raw = raw if raw is not None else station_config_to_dict(default_station_config())

    def get_config(self) -> dict[str, Any]:
        return self.raw
