# storage_lifecycle/services/lifecycle/reaper.py
"""
Temporary file reaper.

Deletes transient objects past their retention, ignoring every other rule.
Runs independently of the lifecycle pass (typically more often) and does not
touch non-transient objects or track costs.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from storage_lifecycle.services.lifecycle.runner import utc_now
from storage_lifecycle.services.lifecycle.types import CostOptimizationConfig
from storage_lifecycle.storage.base import FileCatalog

logger = logging.getLogger(__name__)


class TemporaryFileReaper:
    """Deletes expired transient objects."""

    def __init__(
        self,
        catalog: FileCatalog,
        config: CostOptimizationConfig,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.catalog = catalog
        self.config = config
        self._clock = clock

    async def reap(self) -> int:
        """
        Delete transient objects older than the transient retention.

        Returns:
            Number of objects deleted
        """
        try:
            keys = await asyncio.to_thread(self.catalog.list_all)
        except Exception as e:
            logger.error(f"Failed to cleanup temporary files: {e}")
            return 0

        now = self._clock()
        deleted_count = 0

        for key in keys:
            try:
                record = await asyncio.to_thread(self.catalog.get_metadata, key)
                if record is None or not record.is_transient:
                    continue

                if record.age_hours(now) <= self.config.transient_retention_hours:
                    continue

                if await asyncio.to_thread(self.catalog.delete, key):
                    deleted_count += 1
                    logger.debug(f"Deleted temporary file: {key}")
                else:
                    logger.warning(f"Failed to delete temporary file {key}")
            except Exception as e:
                logger.error(f"Error cleaning up temporary file {key}: {e}")

        logger.info(
            f"Cleaned up {deleted_count} temporary files",
            extra={"event": "reap_complete", "items_processed": deleted_count},
        )
        return deleted_count
