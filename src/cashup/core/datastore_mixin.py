#!/usr/bin/env python3
"""
DataStore Mixin - Common functionality for file-backed stores.

Provides shared implementation of metadata methods and file caching
to reduce redundant file system operations.
"""

from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class DataSummary:
    """Summary of a store's current data state for the status command."""

    exists: bool
    last_updated: datetime | None
    age_days: int | None
    item_count: int
    size_bytes: int
    summary_text: str


class DataStoreMixin:
    """
    Mixin providing common file-backed store functionality.

    Provides:
    - Cached file listing to reduce redundant glob operations
    - Common metadata methods (last_modified, age_days, size_bytes)

    Subclasses must implement:
    - _store_files() -> list[Path]
    - item_count() -> int
    - summary_text() -> str
    """

    def __init__(self):
        """Initialize mixin state."""
        self._file_cache: list[Path] | None = None
        self._cache_timestamp: float | None = None
        self._cache_ttl_seconds: float = 1.0  # Cache for 1 second

    def _invalidate_cache(self) -> None:
        """Invalidate the file cache. Call after every write."""
        self._file_cache = None
        self._cache_timestamp = None

    def _is_cache_valid(self) -> bool:
        if self._file_cache is None or self._cache_timestamp is None:
            return False
        elapsed = datetime.now().timestamp() - self._cache_timestamp
        return elapsed < self._cache_ttl_seconds

    def _get_files_cached(self, directory: Path, pattern: str) -> list[Path]:
        """
        Get list of files matching pattern with caching.

        Args:
            directory: Directory to search
            pattern: Glob pattern to match files

        Returns:
            List of matching file paths, sorted by name
        """
        if self._is_cache_valid():
            return self._file_cache  # type: ignore

        if directory.exists():
            self._file_cache = sorted(directory.glob(pattern))
        else:
            self._file_cache = []

        self._cache_timestamp = datetime.now().timestamp()
        return self._file_cache

    @abstractmethod
    def _store_files(self) -> list[Path]:
        """Files currently backing this store."""
        ...

    @abstractmethod
    def item_count(self) -> int:
        """Get count of items in the store."""
        ...

    @abstractmethod
    def summary_text(self) -> str:
        """Get human-readable summary of current data state."""
        ...

    def exists(self) -> bool:
        """Check if any data has been written."""
        return len(self._store_files()) > 0

    def last_modified(self) -> datetime | None:
        """Get timestamp of the most recently modified file."""
        files = self._store_files()
        if not files:
            return None
        latest = max(files, key=lambda p: p.stat().st_mtime)
        return datetime.fromtimestamp(latest.stat().st_mtime)

    def age_days(self) -> int | None:
        """
        Get age of data in days since last modification.

        Returns:
            Number of days since last modification, or None if data doesn't exist
        """
        last_mod = self.last_modified()
        if last_mod is None:
            return None
        return (datetime.now() - last_mod).days

    def size_bytes(self) -> int:
        """Get total storage size in bytes."""
        return sum(f.stat().st_size for f in self._store_files())

    def to_data_summary(self) -> DataSummary:
        """Collect the metadata above into one DataSummary."""
        return DataSummary(
            exists=self.exists(),
            last_updated=self.last_modified(),
            age_days=self.age_days(),
            item_count=self.item_count(),
            size_bytes=self.size_bytes(),
            summary_text=self.summary_text(),
        )
