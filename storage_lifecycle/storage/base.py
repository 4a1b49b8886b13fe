# storage_lifecycle/storage/base.py
"""
File catalog interface consumed by the lifecycle engine.

Design principles:
- The catalog enumerates stored objects and exposes per-object metadata
- Mutations (delete, tier change, tagging) report success as a boolean
- Only enumeration failure raises; per-object problems return None/False
- Retries for transient network failures belong to the implementation
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from storage_lifecycle.constants import CompressionDefaults


class AccessTier(str, Enum):
    """Storage tiers, ordered Hot > Cool > Archive by cost and retrieval speed."""

    HOT = "Hot"
    COOL = "Cool"
    ARCHIVE = "Archive"


class ContentCategory(str, Enum):
    """Coarse classification derived from content type."""

    AUDIO = "audio"
    IMAGE = "image"
    TEXT = "text"
    OTHER = "other"

    @classmethod
    def classify(cls, content_type: str, name: str = "") -> "ContentCategory":
        """
        Derive the category for an object.

        Anything whose name suggests a transcript is treated as text,
        whatever its declared content type.
        """
        content_type = (content_type or "").lower()
        if content_type.startswith("audio/"):
            return cls.AUDIO
        if content_type.startswith("image/"):
            return cls.IMAGE
        if "text" in content_type or content_type.endswith("xml") or "transcript" in name.lower():
            return cls.TEXT
        return cls.OTHER


class CatalogUnavailableError(Exception):
    """Raised when the catalog cannot be enumerated at all."""

    pass


@dataclass
class ObjectRecord:
    """One stored object as seen by the lifecycle engine."""

    name: str
    content_type: str
    size_bytes: int
    last_modified: datetime
    current_tier: AccessTier | None = None
    is_transient: bool = False
    tags: dict[str, str] = field(default_factory=dict)
    content_category: ContentCategory | None = None

    def __post_init__(self):
        if self.size_bytes < 0:
            raise ValueError(f"size_bytes must be non-negative, got {self.size_bytes} for {self.name}")
        if self.last_modified.tzinfo is None:
            self.last_modified = self.last_modified.replace(tzinfo=UTC)
        if self.content_category is None:
            self.content_category = ContentCategory.classify(self.content_type, self.name)

    @property
    def media_type(self) -> str:
        """Content type without parameters, e.g. 'text/plain; charset=utf-8' -> 'text/plain'."""
        return (self.content_type or "").split(";")[0].strip().lower()

    @property
    def is_compressible(self) -> bool:
        """True for plain text, markup and the JSON/XML family."""
        return self.media_type in CompressionDefaults.COMPRESSIBLE_CONTENT_TYPES

    @property
    def is_compressed(self) -> bool:
        return self.tags.get("compressed") == "true"

    def age_seconds(self, now: datetime) -> float:
        """Age relative to now. Clock skew is treated as zero age."""
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        return max(0.0, (now - self.last_modified).total_seconds())

    def age_hours(self, now: datetime) -> float:
        return self.age_seconds(now) / 3600

    def age_days(self, now: datetime) -> float:
        return self.age_seconds(now) / 86400


class FileCatalog(ABC):
    """
    Abstract interface for an object store as seen by the lifecycle engine.

    Implementations must handle:
    - Complete enumeration (no pagination cursor is exposed)
    - Returning None from get_metadata for missing or unreadable objects
    - Returning False from mutations that did not take effect
    - Treating set_tier to the current tier as a no-op
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Catalog name (e.g., 's3', 'local')."""
        pass

    @abstractmethod
    def list_all(self) -> list[str]:
        """
        List every object identifier in the catalog.

        Raises:
            CatalogUnavailableError: If the catalog cannot be enumerated
        """
        pass

    @abstractmethod
    def get_metadata(self, key: str) -> ObjectRecord | None:
        """
        Get metadata for one object.

        Returns:
            ObjectRecord or None if not found
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete object from storage.

        Returns:
            True if deleted, False otherwise
        """
        pass

    @abstractmethod
    def set_tier(self, key: str, tier: AccessTier) -> bool:
        """Move object to the given access tier."""
        pass

    @abstractmethod
    def set_tag(self, key: str, tag_key: str, value: str) -> bool:
        """Set a single tag on the object, preserving the others."""
        pass
