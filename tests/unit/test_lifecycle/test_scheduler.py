# tests/unit/test_lifecycle/test_scheduler.py
"""Unit tests for the scheduled cleanup job."""

from unittest.mock import patch

import pytest

from storage_lifecycle.services.lifecycle.scheduler import run_scheduled_cleanup
from storage_lifecycle.services.lifecycle.types import CostOptimizationConfig, RunStatus
from tests.conftest import FakeFileCatalog, make_record


class TestRunScheduledCleanup:
    @pytest.mark.asyncio
    async def test_runs_all_three_stages(self, config, clock):
        catalog = FakeFileCatalog(
            [
                make_record("audio/ep1.mp3", content_type="audio/mpeg", age_days=35),
                make_record("tmp/fresh", age_hours=1, is_transient=True),
            ]
        )

        result = await run_scheduled_cleanup(catalog, config, clock=clock)

        assert result.lifecycle.files_listed == 2
        assert result.lifecycle.files_tiered_to_cool == 1
        assert result.recommendations.errors == 0
        assert result.temporary_files_deleted == 0
        assert "tmp/fresh" in catalog.objects
        assert result.status is RunStatus.OK
        assert result.duration_ms >= 0

    @pytest.mark.asyncio
    async def test_stages_run_in_order(self, config, clock):
        catalog = FakeFileCatalog()
        order = []

        async def fake_run(self):
            order.append("lifecycle")
            from storage_lifecycle.services.lifecycle.types import LifecycleStats

            return LifecycleStats()

        async def fake_recommend(self):
            order.append("recommend")
            from storage_lifecycle.services.lifecycle.types import AdvisorReport

            return AdvisorReport()

        async def fake_reap(self):
            order.append("reap")
            return 0

        with (
            patch("storage_lifecycle.services.lifecycle.scheduler.LifecycleRunner.run", fake_run),
            patch("storage_lifecycle.services.lifecycle.scheduler.CostOptimizationAdvisor.recommend", fake_recommend),
            patch("storage_lifecycle.services.lifecycle.scheduler.TemporaryFileReaper.reap", fake_reap),
        ):
            await run_scheduled_cleanup(catalog, config, clock=clock)

        assert order == ["lifecycle", "recommend", "reap"]

    @pytest.mark.asyncio
    async def test_enumeration_failure_fails_the_job(self, unavailable_catalog, config, clock):
        result = await run_scheduled_cleanup(unavailable_catalog, config, clock=clock)

        assert result.status is RunStatus.FAILED
        assert result.to_dict()["status"] == "failed"
        assert result.recommendations.errors == 1
        assert result.temporary_files_deleted == 0

    @pytest.mark.asyncio
    async def test_partial_errors_are_a_warning(self, config, clock):
        catalog = FakeFileCatalog([make_record("a.bin"), make_record("b.bin")])
        catalog.metadata_errors.add("a.bin")

        result = await run_scheduled_cleanup(catalog, config, clock=clock)

        assert result.status is RunStatus.WARNING

    @pytest.mark.asyncio
    async def test_reaper_runs_when_cleanup_disabled(self, clock):
        catalog = FakeFileCatalog([make_record("tmp/old", age_hours=30, is_transient=True)])

        result = await run_scheduled_cleanup(catalog, CostOptimizationConfig(), clock=clock)

        assert result.lifecycle.files_processed == 0
        assert result.temporary_files_deleted == 1
        assert catalog.objects == {}

    @pytest.mark.asyncio
    async def test_to_dict_shape(self, catalog, config, clock):
        result = await run_scheduled_cleanup(catalog, config, max_concurrency=2, clock=clock)

        data = result.to_dict()
        assert set(data) == {"status", "lifecycle", "recommendations", "temporary_files_deleted", "duration_ms"}
        assert data["lifecycle"]["status"] == "ok"
