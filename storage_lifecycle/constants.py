# storage_lifecycle/constants.py
"""
Centralized magic constants organized by domain.

Thresholds that are part of the lifecycle policy but are not exposed as
configuration live here, next to the pricing table used by the cost model.
"""


class TierPricing:
    """Approximate blob storage pricing, USD per GB per month."""

    HOT = 0.0184
    COOL = 0.01
    ARCHIVE = 0.00099
    DELETED = 0.0

    BYTES_PER_GB = 1024 * 1024 * 1024


class CompressionDefaults:
    """Assumptions used when projecting compression savings."""

    SIZE_REDUCTION_RATIO = 0.3          # Fraction of bytes freed by compression
    THRESHOLD_BYTES = 1024 * 1024       # 1 MB

    # MIME types eligible for the compression rule
    COMPRESSIBLE_CONTENT_TYPES = frozenset(
        {
            "text/plain",
            "text/html",
            "text/css",
            "text/javascript",
            "application/javascript",
            "application/json",
            "application/xml",
            "text/xml",
            "application/rss+xml",
        }
    )


class ImageLifecycle:
    """Images age out of Hot storage faster than audio."""

    HOT_TO_COOL_DAYS = 7
    COOL_TO_ARCHIVE_DAYS = 14


class TextLifecycle:
    """Transcripts, feeds and other text/markup content."""

    RETENTION_DAYS = 180
    HOT_TO_COOL_DAYS = 14
    COOL_TO_ARCHIVE_DAYS = 60


class DefaultLifecycle:
    """Unclassified content. No Archive step is defined."""

    RETENTION_DAYS = 30
    HOT_TO_COOL_DAYS = 7


class RunnerDefaults:
    """Defaults for a lifecycle pass."""

    MAX_CONCURRENCY = 8                 # Parallel per-object workers
    PROGRESS_LOG_EVERY = 100            # Objects between progress log lines
    MAX_ERROR_MESSAGES = 50             # Error strings kept on the stats object


class AgeBuckets:
    """Boundaries (days) for the storage inventory age histogram."""

    RECENT_DAYS = 1
    WEEK_DAYS = 7
    MONTH_DAYS = 30
