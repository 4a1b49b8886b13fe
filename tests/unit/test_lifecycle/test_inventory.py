# tests/unit/test_lifecycle/test_inventory.py
"""Unit tests for storage inventory statistics."""

import pytest

from storage_lifecycle.services.lifecycle.inventory import age_bucket, collect_storage_stats
from tests.conftest import MB, NOW, FakeFileCatalog, make_record


class TestAgeBucket:
    @pytest.mark.parametrize(
        "age_days,expected",
        [(0, "recent"), (0.9, "recent"), (1, "week"), (6.5, "week"), (7, "month"), (29, "month"), (30, "old")],
    )
    def test_boundaries(self, age_days, expected):
        assert age_bucket(age_days) == expected


class TestCollectStorageStats:
    @pytest.mark.asyncio
    async def test_totals_and_histograms(self):
        catalog = FakeFileCatalog(
            [
                make_record("audio/a.mp3", content_type="audio/mpeg", size_bytes=3 * MB, age_hours=2),
                make_record("audio/b.mp3", content_type="audio/mpeg", size_bytes=MB, age_days=3),
                make_record("img/c.jpg", content_type="image/jpeg", size_bytes=MB, age_days=10),
                make_record("feeds/d.xml", content_type="application/rss+xml", size_bytes=10, age_days=90),
            ]
        )

        stats = await collect_storage_stats(catalog, now=NOW)

        assert stats.total_files == 4
        assert stats.total_size == 5 * MB + 10
        assert stats.files_by_category == {"audio": 2, "image": 1, "text": 1}
        assert stats.files_by_age == {"recent": 1, "week": 1, "month": 1, "old": 1}
        assert stats.last_modified == catalog.objects["audio/a.mp3"].last_modified
        assert stats.errors == 0

    @pytest.mark.asyncio
    async def test_unreadable_objects_counted_as_errors(self):
        catalog = FakeFileCatalog([make_record("a.bin"), make_record("b.bin")])
        catalog.metadata_errors.add("a.bin")

        stats = await collect_storage_stats(catalog, now=NOW)

        assert stats.total_files == 1
        assert stats.errors == 1

    @pytest.mark.asyncio
    async def test_unavailable_catalog(self, unavailable_catalog):
        stats = await collect_storage_stats(unavailable_catalog, now=NOW)

        assert stats.total_files == 0
        assert stats.errors == 1
        assert stats.to_dict()["last_modified"] is None

    @pytest.mark.asyncio
    async def test_read_only(self):
        catalog = FakeFileCatalog([make_record("tmp/x", age_days=400, is_transient=True)])

        await collect_storage_stats(catalog, now=NOW)

        assert catalog.mutations == []
