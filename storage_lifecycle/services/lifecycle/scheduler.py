# storage_lifecycle/services/lifecycle/scheduler.py
"""
Scheduled cleanup job: lifecycle pass, recommendations, then temp reaping.

Meant to be invoked daily by an outer scheduler (cron, timer function).
A non-zero error count is a warning; the job only fails outright when the
lifecycle pass reports a failed status.
"""

import logging
import time
from collections.abc import Callable
from datetime import datetime

from storage_lifecycle.services.lifecycle.advisor import CostOptimizationAdvisor
from storage_lifecycle.services.lifecycle.cost_model import CostModel
from storage_lifecycle.services.lifecycle.reaper import TemporaryFileReaper
from storage_lifecycle.services.lifecycle.runner import LifecycleRunner, utc_now
from storage_lifecycle.services.lifecycle.types import (
    CostOptimizationConfig,
    RunStatus,
    ScheduledCleanupResult,
)
from storage_lifecycle.storage.base import FileCatalog

logger = logging.getLogger(__name__)


async def run_scheduled_cleanup(
    catalog: FileCatalog,
    config: CostOptimizationConfig,
    cost_model: CostModel | None = None,
    max_concurrency: int | None = None,
    run_timeout_seconds: float | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> ScheduledCleanupResult:
    """
    Run the full scheduled storage cleanup.

    Args:
        catalog: Object store collaborator
        config: Policy parameters
        cost_model: Pricing used for savings estimates
        max_concurrency: Parallel per-object workers for the lifecycle pass
        run_timeout_seconds: Budget for the lifecycle pass
        clock: Source of the evaluation instant for every stage

    Returns:
        ScheduledCleanupResult with all three outputs
    """
    start_time = time.monotonic()
    logger.info("Starting scheduled storage cleanup and cost optimization")

    runner_kwargs = {"cost_model": cost_model, "run_timeout_seconds": run_timeout_seconds, "clock": clock}
    if max_concurrency is not None:
        runner_kwargs["max_concurrency"] = max_concurrency

    lifecycle_stats = await LifecycleRunner(catalog, config, **runner_kwargs).run()
    recommendations = await CostOptimizationAdvisor(catalog, config, cost_model=cost_model, clock=clock).recommend()
    temp_deleted = await TemporaryFileReaper(catalog, config, clock=clock).reap()

    result = ScheduledCleanupResult(
        lifecycle=lifecycle_stats,
        recommendations=recommendations,
        temporary_files_deleted=temp_deleted,
        duration_ms=int((time.monotonic() - start_time) * 1000),
    )

    if result.status is RunStatus.FAILED:
        logger.error(
            f"Scheduled storage cleanup failed: {lifecycle_stats.errors} errors",
            extra={"event": "scheduled_cleanup_failed", "items_failed": lifecycle_stats.errors},
        )
    elif result.status is RunStatus.WARNING:
        logger.warning(
            f"Scheduled storage cleanup completed with {lifecycle_stats.errors} errors",
            extra={"event": "scheduled_cleanup_warning", "items_failed": lifecycle_stats.errors},
        )
    else:
        logger.info(
            f"Scheduled storage cleanup completed successfully in {result.duration_ms}ms",
            extra={"event": "scheduled_cleanup_complete", "duration_ms": result.duration_ms},
        )
    return result
