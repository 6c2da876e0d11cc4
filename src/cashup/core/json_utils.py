#!/usr/bin/env python3
"""
JSON Utilities Module

Provides centralized JSON reading and writing functions with consistent formatting.
Autosave drafts, queued records and stored records all go through these helpers so
files stay pretty-printed and money never leaks out as a float.
"""

import json
import os
import tempfile
from decimal import Decimal
from pathlib import Path
from typing import Any


def json_default(value: Any) -> Any:
    """
    Serialize values the json module does not know about.

    Decimal amounts are written as strings so "650.00" keeps its two places.
    """
    if isinstance(value, Decimal):
        return str(value)
    if hasattr(value, "to_dict"):
        return value.to_dict()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def write_json(filepath: str | Path, data: Any, sort_keys: bool = False) -> None:
    """
    Write data to a JSON file with standard pretty-printing.

    The file is written to a temporary sibling and renamed into place so a reader
    never sees a half-written record.

    Args:
        filepath: Path to the JSON file
        data: Data to write to the file
        sort_keys: If True, sort dictionary keys (default: False)
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, sort_keys=sort_keys, default=json_default)
        os.replace(tmp_name, filepath)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_json(filepath: str | Path) -> Any:
    """
    Read data from a JSON file.

    Args:
        filepath: Path to the JSON file

    Returns:
        The parsed JSON data
    """
    with open(filepath, encoding="utf-8") as f:
        return json.load(f)


def format_json(data: Any, sort_keys: bool = False) -> str:
    """
    Format data as a pretty-printed JSON string.

    Args:
        data: Data to format
        sort_keys: If True, sort dictionary keys (default: False)

    Returns:
        Pretty-printed JSON string
    """
    return json.dumps(data, indent=2, ensure_ascii=False, sort_keys=sort_keys, default=json_default)
