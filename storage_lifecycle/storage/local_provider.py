# storage_lifecycle/storage/local_provider.py
"""
Local filesystem file catalog for development and testing.

Mimics a tiered blob container but stores files locally, with a JSON
sidecar per object carrying content type, tier, transient flag and tags.
NOT for production use.
"""

import json
import logging
import os
import shutil
from datetime import UTC, datetime
from pathlib import Path

from storage_lifecycle.storage.base import (
    AccessTier,
    CatalogUnavailableError,
    FileCatalog,
    ObjectRecord,
)

logger = logging.getLogger(__name__)


class LocalFileCatalog(FileCatalog):
    """
    Local filesystem file catalog.

    Stores files in a directory structure that mimics a blob container.
    Useful for development and testing without cloud access.

    Configuration:
    - LOCAL_STORAGE_PATH: Base directory (default: ./storage)
    """

    def __init__(self, base_path: str | None = None):
        """
        Initialize local catalog.

        Args:
            base_path: Base directory for storage (or LOCAL_STORAGE_PATH env)
        """
        self._base_path = Path(base_path or os.getenv("LOCAL_STORAGE_PATH", "./storage"))
        self._base_path.mkdir(parents=True, exist_ok=True)
        self._metadata_suffix = ".meta.json"

        logger.info(f"Local catalog initialized: {self._base_path}")

    @property
    def name(self) -> str:
        return "local"

    def _get_path(self, key: str) -> Path:
        """Get filesystem path for key, with path traversal protection."""
        resolved = (self._base_path / key).resolve()
        if not resolved.is_relative_to(self._base_path.resolve()):
            raise ValueError("Path traversal detected")
        return resolved

    def _get_metadata_path(self, key: str) -> Path:
        """Get metadata file path for key, with path traversal protection."""
        resolved = (self._base_path / f"{key}{self._metadata_suffix}").resolve()
        if not resolved.is_relative_to(self._base_path.resolve()):
            raise ValueError("Path traversal detected")
        return resolved

    def put(
        self,
        key: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        tier: AccessTier | None = AccessTier.HOT,
        is_transient: bool = False,
        tags: dict[str, str] | None = None,
        last_modified: datetime | None = None,
    ) -> ObjectRecord:
        """Store content and its sidecar metadata (used for seeding)."""
        file_path = self._get_path(key)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(content)

        meta_dict = {
            "content_type": content_type,
            "access_tier": tier.value if tier else None,
            "is_transient": is_transient,
            "last_modified": (last_modified or datetime.now(UTC)).isoformat(),
            "tags": tags or {},
        }
        self._write_metadata(key, meta_dict)

        logger.debug(f"Stored locally: {key} ({len(content)} bytes)")
        return self.get_metadata(key)

    def _read_metadata(self, key: str) -> dict | None:
        meta_path = self._get_metadata_path(key)
        if not meta_path.exists():
            return None
        try:
            return json.loads(meta_path.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to load metadata for {key}: {e}")
            return None

    def _write_metadata(self, key: str, meta_dict: dict) -> None:
        self._get_metadata_path(key).write_text(json.dumps(meta_dict, indent=2))

    def list_all(self) -> list[str]:
        """List every object that has a sidecar metadata file."""
        try:
            return sorted(
                str(meta_file.relative_to(self._base_path)).removesuffix(self._metadata_suffix)
                for meta_file in self._base_path.rglob(f"*{self._metadata_suffix}")
            )
        except OSError as e:
            raise CatalogUnavailableError(f"Cannot enumerate {self._base_path}: {e}") from e

    def get_metadata(self, key: str) -> ObjectRecord | None:
        """Build an ObjectRecord from the stored file and its sidecar."""
        file_path = self._get_path(key)
        if not file_path.exists():
            return None

        meta_dict = self._read_metadata(key)
        if meta_dict is None:
            return None

        try:
            tier = meta_dict.get("access_tier")
            last_modified = meta_dict.get("last_modified")
            return ObjectRecord(
                name=key,
                content_type=meta_dict.get("content_type", "application/octet-stream"),
                size_bytes=file_path.stat().st_size,
                last_modified=(
                    datetime.fromisoformat(last_modified)
                    if last_modified
                    else datetime.fromtimestamp(file_path.stat().st_mtime, UTC)
                ),
                current_tier=AccessTier(tier) if tier else None,
                is_transient=bool(meta_dict.get("is_transient", False)),
                tags=dict(meta_dict.get("tags", {})),
            )
        except (KeyError, ValueError) as e:
            logger.warning(f"Invalid metadata for {key}: {e}")
            return None

    def delete(self, key: str) -> bool:
        """Delete object and metadata."""
        file_path = self._get_path(key)
        meta_path = self._get_metadata_path(key)

        deleted = False
        if file_path.exists():
            file_path.unlink()
            deleted = True
        if meta_path.exists():
            meta_path.unlink()
            deleted = True

        return deleted

    def set_tier(self, key: str, tier: AccessTier) -> bool:
        """Record the new access tier in the sidecar."""
        meta_dict = self._read_metadata(key)
        if meta_dict is None:
            return False
        meta_dict["access_tier"] = tier.value
        self._write_metadata(key, meta_dict)
        return True

    def set_tag(self, key: str, tag_key: str, value: str) -> bool:
        """Merge a tag into the sidecar."""
        meta_dict = self._read_metadata(key)
        if meta_dict is None:
            return False
        meta_dict.setdefault("tags", {})[tag_key] = value
        self._write_metadata(key, meta_dict)
        return True

    def cleanup(self) -> None:
        """Remove all stored content (for testing)."""
        if self._base_path.exists():
            shutil.rmtree(self._base_path)
            self._base_path.mkdir(parents=True, exist_ok=True)
