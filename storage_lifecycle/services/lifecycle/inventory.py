# storage_lifecycle/services/lifecycle/inventory.py
"""
Storage inventory: counts by category and age for dashboards and the CLI.
"""

import asyncio
import logging
from datetime import datetime

from storage_lifecycle.constants import AgeBuckets
from storage_lifecycle.services.lifecycle.runner import utc_now
from storage_lifecycle.services.lifecycle.types import StorageStats
from storage_lifecycle.storage.base import FileCatalog

logger = logging.getLogger(__name__)


def age_bucket(age_days: float) -> str:
    """Histogram bucket for an object age."""
    if age_days < AgeBuckets.RECENT_DAYS:
        return "recent"
    if age_days < AgeBuckets.WEEK_DAYS:
        return "week"
    if age_days < AgeBuckets.MONTH_DAYS:
        return "month"
    return "old"


async def collect_storage_stats(catalog: FileCatalog, now: datetime | None = None) -> StorageStats:
    """
    Build a read-only inventory of the catalog.

    Objects whose metadata cannot be read are counted in `errors` and left
    out of every other figure. An unreachable catalog yields empty stats
    with one error.
    """
    stats = StorageStats()
    now = now or utc_now()

    try:
        keys = await asyncio.to_thread(catalog.list_all)
    except Exception as e:
        logger.error(f"Failed to get storage stats: {e}")
        stats.errors = 1
        return stats

    for key in keys:
        try:
            record = await asyncio.to_thread(catalog.get_metadata, key)
        except Exception as e:
            logger.error(f"Error processing file {key} for stats: {e}")
            record = None

        if record is None:
            stats.errors += 1
            continue

        stats.total_files += 1
        stats.total_size += record.size_bytes
        if stats.last_modified is None or record.last_modified > stats.last_modified:
            stats.last_modified = record.last_modified

        category = record.content_category.value
        stats.files_by_category[category] = stats.files_by_category.get(category, 0) + 1
        stats.files_by_age[age_bucket(record.age_days(now))] += 1

    return stats
