# storage_lifecycle/services/lifecycle/runner.py
"""
Lifecycle runner: one best-effort pass over the whole catalog.

For every object: fetch metadata, decide, execute the action through the
catalog and price it. Per-object failures are counted and the pass moves
on; only a failed enumeration ends the pass early.

Per-object bodies run concurrently up to `max_concurrency`. Workers return
an outcome and all counters are updated from the gathering loop, so stats
have a single writer.
"""

import asyncio
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from storage_lifecycle.constants import RunnerDefaults
from storage_lifecycle.logging_config import ProgressTracker, log_catalog_operation, log_pass
from storage_lifecycle.services.lifecycle.cost_model import DEFAULT_COST_MODEL, CostModel
from storage_lifecycle.services.lifecycle.errors import (
    ActionExecutionFailedError,
    LifecycleError,
    MetadataUnavailableError,
)
from storage_lifecycle.services.lifecycle.policy import decide
from storage_lifecycle.services.lifecycle.types import (
    CostOptimizationConfig,
    LifecycleAction,
    LifecycleStats,
)
from storage_lifecycle.storage.base import AccessTier, FileCatalog, ObjectRecord

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class ObjectOutcome:
    """What happened to one object during a pass."""

    key: str
    record: ObjectRecord | None = None
    action: LifecycleAction | None = None
    savings: float = 0.0
    error: LifecycleError | None = None
    skipped: bool = False


@dataclass
class _StatsTally:
    """Mutable counters for a pass in progress. Frozen into LifecycleStats."""

    files_listed: int = 0
    files_processed: int = 0
    files_deleted: int = 0
    files_tiered_to_cool: int = 0
    files_tiered_to_archive: int = 0
    files_compressed: int = 0
    files_skipped: int = 0
    errors: int = 0
    total_size_freed: int = 0
    estimated_cost_savings: float = 0.0
    catalog_unavailable: bool = False
    error_messages: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors += 1
        if len(self.error_messages) < RunnerDefaults.MAX_ERROR_MESSAGES:
            self.error_messages.append(message)

    def record(self, outcome: ObjectOutcome) -> None:
        if outcome.skipped:
            self.files_skipped += 1
            return

        if outcome.record is None:
            # Metadata never arrived: counts as one error and nothing else
            self.add_error(str(outcome.error))
            return

        self.files_processed += 1
        if outcome.error is not None:
            self.add_error(str(outcome.error))
            return

        if outcome.action is LifecycleAction.DELETE:
            self.files_deleted += 1
            self.total_size_freed += outcome.record.size_bytes
        elif outcome.action is LifecycleAction.TIER_TO_COOL:
            self.files_tiered_to_cool += 1
        elif outcome.action is LifecycleAction.TIER_TO_ARCHIVE:
            self.files_tiered_to_archive += 1
        elif outcome.action is LifecycleAction.COMPRESS:
            self.files_compressed += 1
        self.estimated_cost_savings += outcome.savings

    def freeze(self, execution_time_ms: int) -> LifecycleStats:
        return LifecycleStats(
            files_listed=self.files_listed,
            files_processed=self.files_processed,
            files_deleted=self.files_deleted,
            files_archived=self.files_tiered_to_archive,
            files_tiered_to_cool=self.files_tiered_to_cool,
            files_tiered_to_archive=self.files_tiered_to_archive,
            files_compressed=self.files_compressed,
            files_skipped=self.files_skipped,
            errors=self.errors,
            total_size_freed=self.total_size_freed,
            estimated_cost_savings=self.estimated_cost_savings,
            execution_time_ms=execution_time_ms,
            catalog_unavailable=self.catalog_unavailable,
            error_messages=tuple(self.error_messages),
        )


class LifecycleRunner:
    """
    Applies the lifecycle policy across an entire catalog.

    Usage:
        runner = LifecycleRunner(catalog, config)
        stats = await runner.run()
    """

    def __init__(
        self,
        catalog: FileCatalog,
        config: CostOptimizationConfig,
        cost_model: CostModel | None = None,
        max_concurrency: int = RunnerDefaults.MAX_CONCURRENCY,
        run_timeout_seconds: float | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the runner.

        Args:
            catalog: Object store collaborator
            config: Immutable policy parameters
            cost_model: Pricing used for savings estimates
            max_concurrency: Max objects in flight at once
            run_timeout_seconds: Stop starting new objects after this budget
            clock: Source of the evaluation instant
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.catalog = catalog
        self.config = config
        self.cost_model = cost_model or DEFAULT_COST_MODEL
        self.max_concurrency = max_concurrency
        self.run_timeout_seconds = run_timeout_seconds
        self._clock = clock

    async def run(self) -> LifecycleStats:
        """
        Run one lifecycle pass.

        Returns:
            Frozen LifecycleStats for the pass
        """
        start_time = time.monotonic()
        tally = _StatsTally()

        if not self.config.cleanup_enabled:
            logger.info("Storage cleanup is disabled, skipping lifecycle management")
            return tally.freeze(0)

        with log_pass("lifecycle", run_id=uuid.uuid4().hex[:12]):
            try:
                keys = await asyncio.to_thread(self.catalog.list_all)
            except Exception as e:
                logger.error(f"Catalog enumeration failed, aborting pass: {e}")
                tally.catalog_unavailable = True
                tally.add_error(f"catalog unavailable: {e}")
                return tally.freeze(self._elapsed_ms(start_time))

            tally.files_listed = len(keys)
            logger.info(
                f"Processing {len(keys)} files for lifecycle management",
                extra={"event": "lifecycle_listed", "catalog": self.catalog.name},
            )

            await self._process_all(keys, tally, start_time)

        stats = tally.freeze(self._elapsed_ms(start_time))
        logger.info(
            f"Lifecycle pass complete: {stats.files_processed} processed, "
            f"{stats.files_deleted} deleted, {stats.files_tiered_to_cool} to cool, "
            f"{stats.files_tiered_to_archive} to archive, {stats.files_compressed} compressed, "
            f"{stats.errors} errors (${stats.estimated_cost_savings:.4f}/month saved)",
            extra={
                "event": "lifecycle_complete",
                "items_processed": stats.files_processed,
                "items_failed": stats.errors,
                "savings": round(stats.estimated_cost_savings, 6),
                "duration_ms": stats.execution_time_ms,
            },
        )
        return stats

    async def _process_all(self, keys: list[str], tally: _StatsTally, start_time: float) -> None:
        now = self._clock()
        deadline = start_time + self.run_timeout_seconds if self.run_timeout_seconds else None
        semaphore = asyncio.Semaphore(self.max_concurrency)
        tracker = ProgressTracker(
            total=len(keys),
            stage="lifecycle",
            log_every=RunnerDefaults.PROGRESS_LOG_EVERY,
        )

        async def process(key: str) -> ObjectOutcome:
            async with semaphore:
                # Budget spent: start nothing new, let in-flight work finish
                if deadline is not None and time.monotonic() >= deadline:
                    return ObjectOutcome(key=key, skipped=True)
                return await self.process_object(key, now)

        tasks = [asyncio.create_task(process(key)) for key in keys]
        for next_done in asyncio.as_completed(tasks):
            outcome = await next_done
            tally.record(outcome)
            if not outcome.skipped:
                tracker.increment(success=outcome.error is None)

        if tally.files_skipped:
            logger.warning(
                f"Run budget of {self.run_timeout_seconds}s exhausted, "
                f"{tally.files_skipped} files left for the next pass"
            )
        if keys:
            tracker.finish()

    async def process_object(self, key: str, now: datetime) -> ObjectOutcome:
        """Fetch, decide, execute and price a single object."""
        try:
            record = await asyncio.to_thread(self.catalog.get_metadata, key)
        except Exception as e:
            logger.warning(f"Failed to get file info for {key}: {e}")
            return ObjectOutcome(key=key, error=MetadataUnavailableError(key, str(e)))

        if record is None:
            logger.warning(f"No metadata for {key}, skipping")
            return ObjectOutcome(key=key, error=MetadataUnavailableError(key, "metadata not found"))

        action = decide(record, self.config, now)

        try:
            await self._execute(record, action, now)
        except ActionExecutionFailedError as e:
            logger.error(f"Error processing file {key}: {e}")
            return ObjectOutcome(key=key, record=record, action=action, error=e)
        except Exception as e:
            logger.error(f"Error processing file {key}: {e}")
            return ObjectOutcome(
                key=key,
                record=record,
                action=action,
                error=ActionExecutionFailedError(key, f"{action.value} raised {e}"),
            )

        return ObjectOutcome(key=key, record=record, action=action, savings=self.price(record, action))

    def price(self, record: ObjectRecord, action: LifecycleAction) -> float:
        """Monthly saving attributed to an executed action."""
        if action is LifecycleAction.DELETE:
            return self.cost_model.deletion_saving(record.size_bytes, record.current_tier)
        if action is LifecycleAction.TIER_TO_COOL:
            return self.cost_model.tier_delta(record.size_bytes, record.current_tier, AccessTier.COOL)
        if action is LifecycleAction.TIER_TO_ARCHIVE:
            return self.cost_model.tier_delta(record.size_bytes, record.current_tier, AccessTier.ARCHIVE)
        if action is LifecycleAction.COMPRESS:
            return self.cost_model.compression_saving(record.size_bytes)
        return 0.0

    async def _execute(self, record: ObjectRecord, action: LifecycleAction, now: datetime) -> None:
        key = record.name

        if action is LifecycleAction.KEEP:
            return

        if action is LifecycleAction.DELETE:
            await self._mutate("delete", record, self.catalog.delete, key)
            logger.info(
                f"Deleted file: {key} ({record.size_bytes} bytes)",
                extra={"event": "file_deleted", "action": action.value, "key": key, "size_bytes": record.size_bytes},
            )
        elif action in (LifecycleAction.TIER_TO_COOL, LifecycleAction.TIER_TO_ARCHIVE):
            tier = AccessTier.COOL if action is LifecycleAction.TIER_TO_COOL else AccessTier.ARCHIVE
            await self._mutate("set_tier", record, self.catalog.set_tier, key, tier)
            logger.info(
                f"Tiered file to {tier.value}: {key} ({record.size_bytes} bytes)",
                extra={"event": "file_tiered", "action": action.value, "key": key, "tier": tier.value},
            )
        elif action is LifecycleAction.COMPRESS:
            # The "compressed" marker goes last so a partial write is retried next pass
            await self._mutate("set_tag", record, self.catalog.set_tag, key, "compressed_at", now.isoformat())
            await self._mutate("set_tag", record, self.catalog.set_tag, key, "original_size", str(record.size_bytes))
            await self._mutate("set_tag", record, self.catalog.set_tag, key, "compressed", "true")
            logger.info(
                f"Marked file for compression: {key} ({record.size_bytes} bytes)",
                extra={"event": "file_compressed", "action": action.value, "key": key},
            )

    async def _mutate(self, operation: str, record: ObjectRecord, func: Callable[..., bool], *args) -> None:
        with log_catalog_operation(operation, record.name) as metrics:
            ok = await asyncio.to_thread(func, *args)
            metrics["size_bytes"] = record.size_bytes
        if not ok:
            raise ActionExecutionFailedError(record.name, f"catalog {operation} did not succeed")

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.monotonic() - start_time) * 1000)


async def run_lifecycle(
    catalog: FileCatalog,
    config: CostOptimizationConfig,
    **kwargs,
) -> LifecycleStats:
    """
    Convenience function to run a single lifecycle pass.

    Args:
        catalog: Object store collaborator
        config: Policy parameters
        **kwargs: Extra LifecycleRunner arguments
    """
    return await LifecycleRunner(catalog, config, **kwargs).run()
