# tests/conftest.py
"""
Pytest configuration and fixtures.
"""

import dataclasses
import threading
from datetime import UTC, datetime, timedelta

import pytest

from storage_lifecycle.services.lifecycle.types import CostOptimizationConfig
from storage_lifecycle.storage.base import (
    AccessTier,
    CatalogUnavailableError,
    FileCatalog,
    ObjectRecord,
)

# Fixed evaluation instant used across lifecycle tests
NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=UTC)

MB = 1024 * 1024
GB = 1024 * 1024 * 1024


def make_record(
    name: str,
    content_type: str = "application/octet-stream",
    size_bytes: int = 1024,
    age_days: float = 0,
    age_hours: float = 0,
    tier: AccessTier | None = AccessTier.HOT,
    is_transient: bool = False,
    tags: dict[str, str] | None = None,
) -> ObjectRecord:
    """Build an ObjectRecord aged relative to NOW."""
    return ObjectRecord(
        name=name,
        content_type=content_type,
        size_bytes=size_bytes,
        last_modified=NOW - timedelta(days=age_days, hours=age_hours),
        current_tier=tier,
        is_transient=is_transient,
        tags=dict(tags or {}),
    )


class FakeFileCatalog(FileCatalog):
    """
    In-memory catalog with failure injection.

    Every call is recorded in `calls` as (method, key, *args) so tests can
    assert exactly which mutations happened.
    """

    def __init__(self, records: list[ObjectRecord] | None = None):
        self.objects: dict[str, ObjectRecord] = {r.name: r for r in records or []}
        self.calls: list[tuple] = []
        self.list_error: Exception | None = None
        self.metadata_errors: set[str] = set()
        self.missing_metadata: set[str] = set()
        self.rejected_mutations: set[str] = set()
        self.raising_mutations: set[str] = set()
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "fake"

    def add(self, record: ObjectRecord) -> ObjectRecord:
        self.objects[record.name] = record
        return record

    def _record_call(self, *call) -> None:
        with self._lock:
            self.calls.append(call)

    @property
    def mutations(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in ("delete", "set_tier", "set_tag")]

    def list_all(self) -> list[str]:
        self._record_call("list_all", None)
        if self.list_error is not None:
            raise self.list_error
        return sorted(self.objects)

    def get_metadata(self, key: str) -> ObjectRecord | None:
        self._record_call("get_metadata", key)
        if key in self.metadata_errors:
            raise RuntimeError(f"metadata backend timeout for {key}")
        if key in self.missing_metadata:
            return None
        return self.objects.get(key)

    def _check_mutation(self, key: str) -> bool:
        if key in self.raising_mutations:
            raise RuntimeError(f"backend refused {key}")
        return key in self.objects and key not in self.rejected_mutations

    def delete(self, key: str) -> bool:
        self._record_call("delete", key)
        if not self._check_mutation(key):
            return False
        with self._lock:
            del self.objects[key]
        return True

    def set_tier(self, key: str, tier: AccessTier) -> bool:
        self._record_call("set_tier", key, tier)
        if not self._check_mutation(key):
            return False
        with self._lock:
            self.objects[key] = dataclasses.replace(self.objects[key], current_tier=tier)
        return True

    def set_tag(self, key: str, tag_key: str, value: str) -> bool:
        self._record_call("set_tag", key, tag_key, value)
        if not self._check_mutation(key):
            return False
        with self._lock:
            record = self.objects[key]
            self.objects[key] = dataclasses.replace(record, tags={**record.tags, tag_key: value})
        return True


@pytest.fixture
def catalog():
    """Empty in-memory catalog."""
    return FakeFileCatalog()


@pytest.fixture
def unavailable_catalog():
    """Catalog whose enumeration always fails."""
    fake = FakeFileCatalog()
    fake.list_error = CatalogUnavailableError("container not reachable")
    return fake


@pytest.fixture
def config():
    """Everything enabled, default thresholds."""
    return CostOptimizationConfig(
        cleanup_enabled=True,
        tiering_enabled=True,
        compression_enabled=True,
    )


@pytest.fixture
def clock():
    """Frozen clock returning NOW."""
    return lambda: NOW
