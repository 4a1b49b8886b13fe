# storage_lifecycle/services/lifecycle/advisor.py
"""
Cost optimization advisor: projected savings without touching anything.

Scans the catalog with the same decision rule as the runner (tiering treated
as enabled, since the point is to show what tiering would save) and groups
the would-be actions into recommendation buckets.
"""

import asyncio
import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from storage_lifecycle.constants import RunnerDefaults
from storage_lifecycle.services.lifecycle.cost_model import DEFAULT_COST_MODEL, CostModel
from storage_lifecycle.services.lifecycle.policy import decide
from storage_lifecycle.services.lifecycle.runner import utc_now
from storage_lifecycle.services.lifecycle.types import (
    AdvisorReport,
    CostOptimizationConfig,
    LifecycleAction,
    Recommendation,
    RecommendationType,
)
from storage_lifecycle.storage.base import AccessTier, FileCatalog, ObjectRecord

logger = logging.getLogger(__name__)


@dataclass
class _Bucket:
    type: RecommendationType
    template: str
    affected_files: int = 0
    potential_savings: float = 0.0

    def add(self, savings: float) -> None:
        self.affected_files += 1
        self.potential_savings += savings

    def to_recommendation(self) -> Recommendation:
        return Recommendation(
            type=self.type,
            description=self.template.format(count=self.affected_files),
            potential_savings=self.potential_savings,
            affected_files=self.affected_files,
        )


class CostOptimizationAdvisor:
    """
    Read-only scan producing grouped savings recommendations.

    Never calls a mutating catalog operation.
    """

    def __init__(
        self,
        catalog: FileCatalog,
        config: CostOptimizationConfig,
        cost_model: CostModel | None = None,
        max_concurrency: int = RunnerDefaults.MAX_CONCURRENCY,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.catalog = catalog
        self.config = config
        self.cost_model = cost_model or DEFAULT_COST_MODEL
        self.max_concurrency = max_concurrency
        self._clock = clock
        self._projection_config = dataclasses.replace(config, tiering_enabled=True)

    async def recommend(self) -> AdvisorReport:
        """
        Scan the catalog and project savings.

        Returns:
            AdvisorReport with one recommendation per non-empty bucket
        """
        try:
            keys = await asyncio.to_thread(self.catalog.list_all)
        except Exception as e:
            logger.error(f"Failed to get cost optimization recommendations: {e}")
            return AdvisorReport(errors=1)

        now = self._clock()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def fetch(key: str) -> ObjectRecord | None:
            async with semaphore:
                try:
                    return await asyncio.to_thread(self.catalog.get_metadata, key)
                except Exception as e:
                    logger.warning(f"Skipping {key} in recommendations: {e}")
                    return None

        records = await asyncio.gather(*(fetch(key) for key in keys))

        # Ordered so the report lists buckets consistently
        buckets = {
            LifecycleAction.TIER_TO_COOL: _Bucket(
                RecommendationType.TIERING, "Move {count} files from Hot to Cool storage"
            ),
            LifecycleAction.TIER_TO_ARCHIVE: _Bucket(
                RecommendationType.TIERING, "Move {count} files from Cool to Archive storage"
            ),
            LifecycleAction.COMPRESS: _Bucket(
                RecommendationType.COMPRESSION, "Compress {count} large text files"
            ),
            LifecycleAction.DELETE: _Bucket(
                RecommendationType.DELETION, "Delete {count} files past their retention window"
            ),
        }

        errors = 0
        for record in records:
            if record is None:
                errors += 1
                continue
            action = decide(record, self._projection_config, now)
            bucket = buckets.get(action)
            if bucket is not None:
                bucket.add(self._project(record, action))

        recommendations = tuple(b.to_recommendation() for b in buckets.values() if b.affected_files > 0)
        total = sum(r.potential_savings for r in recommendations)

        logger.info(
            f"Cost optimization recommendations: {len(recommendations)} buckets, "
            f"${total:.4f}/month potential savings",
            extra={"event": "recommendations_complete", "savings": round(total, 6)},
        )
        return AdvisorReport(
            total_potential_savings=total,
            recommendations=recommendations,
            errors=errors,
        )

    def _project(self, record: ObjectRecord, action: LifecycleAction) -> float:
        if action is LifecycleAction.TIER_TO_COOL:
            return self.cost_model.tier_delta(record.size_bytes, AccessTier.HOT, AccessTier.COOL)
        if action is LifecycleAction.TIER_TO_ARCHIVE:
            return self.cost_model.tier_delta(record.size_bytes, AccessTier.COOL, AccessTier.ARCHIVE)
        if action is LifecycleAction.COMPRESS:
            return self.cost_model.compression_saving(record.size_bytes)
        return self.cost_model.deletion_saving(record.size_bytes, record.current_tier)
