# storage_lifecycle/services/__init__.py
"""
Business logic services.
"""

from storage_lifecycle.services.lifecycle import (
    CostOptimizationAdvisor,
    LifecycleRunner,
    TemporaryFileReaper,
)

__all__ = [
    "LifecycleRunner",
    "CostOptimizationAdvisor",
    "TemporaryFileReaper",
]
