# storage_lifecycle/services/lifecycle/cost_model.py
"""
Cost model for tier transitions, deletions and compression.

Pure functions of size and tier. Nothing here reads the clock.
"""

from dataclasses import dataclass
from enum import Enum

from storage_lifecycle.constants import CompressionDefaults, TierPricing
from storage_lifecycle.storage.base import AccessTier


class PricedTier(str, Enum):
    """Tiers with a price, including the virtual Deleted tier."""

    HOT = "Hot"
    COOL = "Cool"
    ARCHIVE = "Archive"
    DELETED = "Deleted"

    @classmethod
    def of(cls, tier: "AccessTier | PricedTier | None") -> "PricedTier":
        """Map an access tier onto the price list. Untiered objects price as Hot."""
        if tier is None:
            return cls.HOT
        return cls(tier.value)


@dataclass(frozen=True)
class CostModel:
    """
    Per-gigabyte-per-month pricing for each tier.

    Rates must decrease monotonically Hot > Cool > Archive > Deleted = 0,
    so forward transitions and deletions never price negative.
    """

    hot_rate: float = TierPricing.HOT
    cool_rate: float = TierPricing.COOL
    archive_rate: float = TierPricing.ARCHIVE
    compression_ratio: float = CompressionDefaults.SIZE_REDUCTION_RATIO

    def __post_init__(self):
        if not self.hot_rate >= self.cool_rate >= self.archive_rate >= 0:
            raise ValueError(
                f"Tier rates must satisfy hot >= cool >= archive >= 0 "
                f"(got {self.hot_rate}, {self.cool_rate}, {self.archive_rate})"
            )
        if not 0 <= self.compression_ratio <= 1:
            raise ValueError(f"compression_ratio must be within [0, 1], got {self.compression_ratio}")

    def rate(self, tier: "AccessTier | PricedTier | None") -> float:
        """Monthly price per GB for a tier."""
        priced = PricedTier.of(tier)
        if priced is PricedTier.HOT:
            return self.hot_rate
        elif priced is PricedTier.COOL:
            return self.cool_rate
        elif priced is PricedTier.ARCHIVE:
            return self.archive_rate
        elif priced is PricedTier.DELETED:
            return TierPricing.DELETED
        raise ValueError(f"No price defined for tier {tier!r}")

    def tier_delta(
        self,
        size_bytes: int,
        from_tier: "AccessTier | PricedTier | None",
        to_tier: "AccessTier | PricedTier",
    ) -> float:
        """Monthly saving of moving size_bytes between two tiers."""
        size_gb = size_bytes / TierPricing.BYTES_PER_GB
        return (self.rate(from_tier) - self.rate(to_tier)) * size_gb

    def deletion_saving(self, size_bytes: int, from_tier: AccessTier | None) -> float:
        return self.tier_delta(size_bytes, from_tier, PricedTier.DELETED)

    def compression_saving(self, size_bytes: int) -> float:
        """
        Monthly saving of compressing an object.

        Compressible objects are assumed to sit in Hot storage when flagged.
        """
        freed_gb = size_bytes * self.compression_ratio / TierPricing.BYTES_PER_GB
        return freed_gb * self.hot_rate


DEFAULT_COST_MODEL = CostModel()


def tier_delta(size_bytes: int, from_tier, to_tier) -> float:
    """tier_delta() against the default price list."""
    return DEFAULT_COST_MODEL.tier_delta(size_bytes, from_tier, to_tier)


def compression_saving(size_bytes: int) -> float:
    """compression_saving() against the default price list."""
    return DEFAULT_COST_MODEL.compression_saving(size_bytes)
