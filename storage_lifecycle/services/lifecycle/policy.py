# storage_lifecycle/services/lifecycle/policy.py
"""
Lifecycle policy: one object in, one action out.

Rules are evaluated in a fixed priority order and the first match wins:
1. Transient objects (delete after the transient retention, else keep)
2. Compression candidates (supersede tiering for the current pass)
3. Category retention and tiering (audio, image, text/markup, other)
4. Keep

Tier transitions only move forward (Hot -> Cool -> Archive). Objects with
no tier never receive a tier action.
"""

from dataclasses import dataclass
from datetime import datetime

from storage_lifecycle.constants import DefaultLifecycle, ImageLifecycle, TextLifecycle
from storage_lifecycle.services.lifecycle.types import CostOptimizationConfig, LifecycleAction
from storage_lifecycle.storage.base import AccessTier, ContentCategory, ObjectRecord


@dataclass(frozen=True)
class CategoryRule:
    """Retention and tiering thresholds (days) for one content category."""

    retention_days: float
    hot_to_cool_days: float | None
    cool_to_archive_days: float | None


def category_rule(category: ContentCategory, config: CostOptimizationConfig) -> CategoryRule:
    """Thresholds that apply to a content category under this config."""
    if category is ContentCategory.AUDIO:
        return CategoryRule(
            retention_days=config.audio_retention_days,
            hot_to_cool_days=config.hot_to_cool_days,
            cool_to_archive_days=config.cool_to_archive_days,
        )
    if category is ContentCategory.IMAGE:
        return CategoryRule(
            retention_days=config.image_retention_days,
            hot_to_cool_days=ImageLifecycle.HOT_TO_COOL_DAYS,
            cool_to_archive_days=ImageLifecycle.COOL_TO_ARCHIVE_DAYS,
        )
    if category is ContentCategory.TEXT:
        return CategoryRule(
            retention_days=TextLifecycle.RETENTION_DAYS,
            hot_to_cool_days=TextLifecycle.HOT_TO_COOL_DAYS,
            cool_to_archive_days=TextLifecycle.COOL_TO_ARCHIVE_DAYS,
        )
    return CategoryRule(
        retention_days=config.default_retention_days,
        hot_to_cool_days=DefaultLifecycle.HOT_TO_COOL_DAYS,
        cool_to_archive_days=None,
    )


def _next_tier_action(record: ObjectRecord, rule: CategoryRule, age_days: float) -> LifecycleAction:
    """Forward-only tier step for the object's current tier."""
    if record.current_tier is AccessTier.HOT:
        if rule.hot_to_cool_days is not None and age_days > rule.hot_to_cool_days:
            return LifecycleAction.TIER_TO_COOL
    elif record.current_tier is AccessTier.COOL:
        if rule.cool_to_archive_days is not None and age_days > rule.cool_to_archive_days:
            return LifecycleAction.TIER_TO_ARCHIVE
    return LifecycleAction.KEEP


def is_compression_candidate(record: ObjectRecord, config: CostOptimizationConfig) -> bool:
    """Large compressible object that has not been marked compressed yet."""
    return (
        config.compression_enabled
        and record.size_bytes > config.compression_threshold_bytes
        and record.is_compressible
        and not record.is_compressed
    )


def decide(record: ObjectRecord, config: CostOptimizationConfig, now: datetime) -> LifecycleAction:
    """
    Choose the lifecycle action for one object.

    Pure and deterministic for identical inputs, including `now`.

    Args:
        record: Object metadata
        config: Active policy parameters
        now: Evaluation instant

    Returns:
        Exactly one LifecycleAction
    """
    if record.is_transient:
        if record.age_hours(now) > config.transient_retention_hours:
            return LifecycleAction.DELETE
        return LifecycleAction.KEEP

    if is_compression_candidate(record, config):
        return LifecycleAction.COMPRESS

    age_days = record.age_days(now)
    rule = category_rule(record.content_category, config)

    if age_days > rule.retention_days:
        return LifecycleAction.DELETE

    if record.current_tier is AccessTier.ARCHIVE and age_days > config.archive_to_delete_days:
        return LifecycleAction.DELETE

    if config.tiering_enabled:
        return _next_tier_action(record, rule, age_days)

    return LifecycleAction.KEEP
