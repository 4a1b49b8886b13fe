# storage_lifecycle/services/lifecycle/__init__.py
"""
Storage lifecycle management: retention, tiering, compression and cost.

Tiers and pricing (per GB-month):
- Hot: frequently accessed content
- Cool: infrequently accessed content
- Archive: rarely accessed content, then deleted after its cap

Services:
- policy: Pure per-object decision rule
- cost_model: Tier pricing and savings estimates
- runner: Best-effort pass applying the policy to a catalog
- advisor: Read-only savings recommendations
- reaper: Transient file cleanup
- inventory: Storage statistics
- scheduler: Daily job composing the above
"""

from storage_lifecycle.services.lifecycle.advisor import CostOptimizationAdvisor
from storage_lifecycle.services.lifecycle.cost_model import (
    DEFAULT_COST_MODEL,
    CostModel,
    PricedTier,
    compression_saving,
    tier_delta,
)
from storage_lifecycle.services.lifecycle.errors import (
    ActionExecutionFailedError,
    CatalogUnavailableError,
    LifecycleError,
    MetadataUnavailableError,
)
from storage_lifecycle.services.lifecycle.inventory import collect_storage_stats
from storage_lifecycle.services.lifecycle.policy import decide, is_compression_candidate
from storage_lifecycle.services.lifecycle.reaper import TemporaryFileReaper
from storage_lifecycle.services.lifecycle.runner import LifecycleRunner, run_lifecycle
from storage_lifecycle.services.lifecycle.scheduler import run_scheduled_cleanup
from storage_lifecycle.services.lifecycle.types import (
    AdvisorReport,
    CostOptimizationConfig,
    LifecycleAction,
    LifecycleStats,
    Recommendation,
    RecommendationType,
    RunStatus,
    ScheduledCleanupResult,
    StorageStats,
)

__all__ = [
    # Policy
    "decide",
    "is_compression_candidate",
    "CostOptimizationConfig",
    "LifecycleAction",
    # Cost
    "CostModel",
    "PricedTier",
    "DEFAULT_COST_MODEL",
    "tier_delta",
    "compression_saving",
    # Runner
    "LifecycleRunner",
    "run_lifecycle",
    "LifecycleStats",
    "RunStatus",
    # Advisor
    "CostOptimizationAdvisor",
    "AdvisorReport",
    "Recommendation",
    "RecommendationType",
    # Reaper / inventory / scheduler
    "TemporaryFileReaper",
    "collect_storage_stats",
    "StorageStats",
    "run_scheduled_cleanup",
    "ScheduledCleanupResult",
    # Errors
    "LifecycleError",
    "MetadataUnavailableError",
    "ActionExecutionFailedError",
    "CatalogUnavailableError",
]
