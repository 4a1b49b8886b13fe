# storage_lifecycle/services/lifecycle/types.py
"""
Data types for the storage lifecycle engine.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum

from storage_lifecycle.constants import CompressionDefaults, DefaultLifecycle


class LifecycleAction(str, Enum):
    """The single action chosen for an object in one evaluation."""

    KEEP = "keep"
    TIER_TO_COOL = "tier_to_cool"
    TIER_TO_ARCHIVE = "tier_to_archive"
    DELETE = "delete"
    COMPRESS = "compress"


class RecommendationType(str, Enum):
    """Category of a cost optimization recommendation."""

    TIERING = "tiering"
    COMPRESSION = "compression"
    DELETION = "deletion"


class RunStatus(str, Enum):
    """How the scheduler should treat a finished pass."""

    OK = "ok"
    WARNING = "warning"
    FAILED = "failed"


@dataclass(frozen=True)
class CostOptimizationConfig:
    """
    Policy parameters for the lifecycle engine.

    Constructed once at startup and never mutated; build a new instance
    to change the policy.

    Attributes:
        cleanup_enabled: Master switch for lifecycle passes
        tiering_enabled: Allow Hot->Cool->Archive transitions
        compression_enabled: Allow the compression rule
        hot_to_cool_days: Audio age before leaving Hot storage
        cool_to_archive_days: Audio age before leaving Cool storage
        archive_to_delete_days: Age after which Archive objects are deleted
        compression_threshold_bytes: Minimum size for compression
        transient_retention_hours: Lifetime of transient objects
        audio_retention_days: Audio retention window
        image_retention_days: Image retention window
        default_retention_days: Retention window for unclassified content
    """

    cleanup_enabled: bool = False
    tiering_enabled: bool = False
    compression_enabled: bool = False
    hot_to_cool_days: int = 30
    cool_to_archive_days: int = 90
    archive_to_delete_days: int = 365
    compression_threshold_bytes: int = CompressionDefaults.THRESHOLD_BYTES
    transient_retention_hours: int = 24
    audio_retention_days: int = 365
    image_retention_days: int = 30
    default_retention_days: int = DefaultLifecycle.RETENTION_DAYS

    def __post_init__(self):
        for name in (
            "hot_to_cool_days",
            "cool_to_archive_days",
            "archive_to_delete_days",
            "transient_retention_hours",
            "audio_retention_days",
            "image_retention_days",
            "default_retention_days",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be greater than 0")
        if self.compression_threshold_bytes < 0:
            raise ValueError("compression_threshold_bytes must be non-negative")
        if self.hot_to_cool_days >= self.cool_to_archive_days:
            raise ValueError("hot_to_cool_days must be less than cool_to_archive_days")

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class LifecycleStats:
    """
    Summary of one lifecycle pass.

    Immutable once returned by the runner. `files_archived` mirrors
    `files_tiered_to_archive`.
    """

    files_listed: int = 0
    files_processed: int = 0
    files_deleted: int = 0
    files_archived: int = 0
    files_tiered_to_cool: int = 0
    files_tiered_to_archive: int = 0
    files_compressed: int = 0
    files_skipped: int = 0
    errors: int = 0
    total_size_freed: int = 0
    estimated_cost_savings: float = 0.0
    execution_time_ms: int = 0
    catalog_unavailable: bool = False
    error_messages: tuple[str, ...] = ()

    @property
    def status(self) -> RunStatus:
        """
        Warning on any error; failed when every attempted object errored
        or the catalog could not be listed.

        Attempted objects are the listed ones minus those left for the next
        pass by the run budget. Metadata failures never reach
        `files_processed`, so it cannot be the denominator.
        """
        if self.catalog_unavailable:
            return RunStatus.FAILED
        if self.errors == 0:
            return RunStatus.OK
        if self.errors >= self.files_listed - self.files_skipped:
            return RunStatus.FAILED
        return RunStatus.WARNING

    def to_dict(self) -> dict:
        data = asdict(self)
        data["error_messages"] = list(self.error_messages)
        data["estimated_cost_savings"] = round(self.estimated_cost_savings, 6)
        data["status"] = self.status.value
        return data


@dataclass(frozen=True)
class Recommendation:
    """One grouped savings recommendation from the advisor."""

    type: RecommendationType
    description: str
    potential_savings: float
    affected_files: int

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "description": self.description,
            "potential_savings": round(self.potential_savings, 6),
            "affected_files": self.affected_files,
        }


@dataclass(frozen=True)
class AdvisorReport:
    """Advisor output. Produced fresh on every call, never persisted."""

    total_potential_savings: float = 0.0
    recommendations: tuple[Recommendation, ...] = ()
    errors: int = 0

    def to_dict(self) -> dict:
        return {
            "total_potential_savings": round(self.total_potential_savings, 6),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "errors": self.errors,
        }


@dataclass
class StorageStats:
    """Read-only inventory of the catalog."""

    total_files: int = 0
    total_size: int = 0
    last_modified: datetime | None = None
    files_by_category: dict[str, int] = field(default_factory=dict)
    files_by_age: dict[str, int] = field(
        default_factory=lambda: {"recent": 0, "week": 0, "month": 0, "old": 0}
    )
    errors: int = 0

    def to_dict(self) -> dict:
        return {
            "total_files": self.total_files,
            "total_size": self.total_size,
            "last_modified": self.last_modified.isoformat() if self.last_modified else None,
            "files_by_category": dict(self.files_by_category),
            "files_by_age": dict(self.files_by_age),
            "errors": self.errors,
        }


@dataclass
class ScheduledCleanupResult:
    """Everything one scheduled cleanup job produced."""

    lifecycle: LifecycleStats
    recommendations: AdvisorReport
    temporary_files_deleted: int
    duration_ms: int

    @property
    def status(self) -> RunStatus:
        return self.lifecycle.status

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "lifecycle": self.lifecycle.to_dict(),
            "recommendations": self.recommendations.to_dict(),
            "temporary_files_deleted": self.temporary_files_deleted,
            "duration_ms": self.duration_ms,
        }
