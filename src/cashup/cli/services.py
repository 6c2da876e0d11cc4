#!/usr/bin/env python3
"""
CLI Service Wiring

Builds the storage adapters the commands share from the application Config.
"""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

from ..core.config import Config
from ..reconciliation.datastore import JsonAutosaveStore, JsonOutboxStore, JsonRecordGateway
from ..reconciliation.outbox import Outbox
from ..register.station_store import YamlConfigProvider

T = TypeVar("T")


def station_provider(config: Config) -> YamlConfigProvider:
    return YamlConfigProvider(config.stations_file)


def record_gateway(config: Config) -> JsonRecordGateway:
    return JsonRecordGateway(config.storage.records_dir)


def outbox(config: Config) -> Outbox:
    return Outbox(JsonOutboxStore(config.storage.outbox_dir))


def autosave_store(config: Config) -> JsonAutosaveStore:
    return JsonAutosaveStore(config.storage.autosave_dir)


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion from synchronous click code."""
    return asyncio.run(coro)
