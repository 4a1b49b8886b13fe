# storage_lifecycle/storage/__init__.py
"""
File catalog abstraction for the storage lifecycle engine.

The engine never talks to a blob store directly; it goes through a
FileCatalog, which enumerates objects and applies tier/tag/delete changes.
"""

from storage_lifecycle.storage.base import (
    AccessTier,
    CatalogUnavailableError,
    ContentCategory,
    FileCatalog,
    ObjectRecord,
)
from storage_lifecycle.storage.factory import (
    get_file_catalog,
    reset_file_catalog,
    set_file_catalog,
)
from storage_lifecycle.storage.local_provider import LocalFileCatalog

__all__ = [
    "FileCatalog",
    "ObjectRecord",
    "AccessTier",
    "ContentCategory",
    "CatalogUnavailableError",
    "LocalFileCatalog",
    "get_file_catalog",
    "set_file_catalog",
    "reset_file_catalog",
]
