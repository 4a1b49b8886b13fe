# storage_lifecycle/services/lifecycle/errors.py
"""
Error taxonomy for lifecycle passes.

Only CatalogUnavailableError is fatal for a pass. The others are raised
inside the per-object body and recovered by the runner.
"""

from storage_lifecycle.storage.base import CatalogUnavailableError


class LifecycleError(Exception):
    """Base class for per-object lifecycle failures."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{key}: {message}")


class MetadataUnavailableError(LifecycleError):
    """Metadata for one object could not be fetched."""

    pass


class ActionExecutionFailedError(LifecycleError):
    """The catalog rejected or failed the chosen mutation."""

    pass


__all__ = [
    "CatalogUnavailableError",
    "LifecycleError",
    "MetadataUnavailableError",
    "ActionExecutionFailedError",
]
