# storage_lifecycle/storage/factory.py
"""
Factory function for creating file catalogs.
"""

import logging
import os

from storage_lifecycle.storage.base import FileCatalog

logger = logging.getLogger(__name__)

# Global singleton instance
_file_catalog: FileCatalog | None = None


def get_file_catalog(
    provider_name: str | None = None,
    **kwargs,
) -> FileCatalog:
    """
    Get or create the file catalog instance.

    Args:
        provider_name: 's3' or 'local' (default from STORAGE_PROVIDER env)
        **kwargs: Additional arguments for the catalog

    Returns:
        FileCatalog instance (singleton)

    Environment:
        STORAGE_PROVIDER: 'local' (default) or 's3'
    """
    global _file_catalog

    if _file_catalog is not None:
        return _file_catalog

    name = provider_name or os.getenv("STORAGE_PROVIDER", "local")
    name = name.lower().strip()

    if name == "s3":
        from storage_lifecycle.storage.s3_provider import S3FileCatalog

        _file_catalog = S3FileCatalog(**kwargs)
    elif name == "local":
        from storage_lifecycle.storage.local_provider import LocalFileCatalog

        _file_catalog = LocalFileCatalog(**kwargs)
    else:
        raise ValueError(f"Unknown storage provider: {name}. Available: s3, local")

    logger.info(f"File catalog initialized: {_file_catalog.name}")
    return _file_catalog


def set_file_catalog(catalog: FileCatalog) -> None:
    """
    Set a custom file catalog (useful for testing).
    """
    global _file_catalog
    _file_catalog = catalog


def reset_file_catalog() -> None:
    """
    Reset the file catalog singleton (for testing).
    """
    global _file_catalog
    _file_catalog = None
