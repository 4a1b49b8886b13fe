"""
Structured JSON logging for lifecycle observability.

Provides structured logging with run IDs for correlating log lines across a
lifecycle pass, plus context managers for passes and catalog operations.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime

# Context variables for run correlation
run_id_var: ContextVar[str | None] = ContextVar("run_id", default=None)
stage_var: ContextVar[str | None] = ContextVar("stage", default=None)

# Extra record attributes copied into the JSON payload
EXTRA_FIELDS = (
    "event",
    "duration_ms",
    "items_processed",
    "items_failed",
    "operation",
    "key",
    "size_bytes",
    "action",
    "tier",
    "savings",
    "catalog",
)


# -----------------------------------------------------------------------------
# JSON Formatter
# -----------------------------------------------------------------------------


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON.

    Output format:
    {"timestamp": "...", "level": "INFO", "message": "...", "run_id": "...", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        run_id = run_id_var.get()
        if run_id:
            log_data["run_id"] = run_id

        stage = stage_var.get()
        if stage:
            log_data["stage"] = stage

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data, default=str)


def configure_logging(json_format: bool = True, level: str = "INFO") -> None:
    """
    Configure logging for scheduled jobs or local development.

    Args:
        json_format: If True, use JSON format. If False, use human-readable format.
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# -----------------------------------------------------------------------------
# Context Managers
# -----------------------------------------------------------------------------


@contextmanager
def log_pass(stage: str, run_id: str | None = None):
    """
    Context manager for pass-level logging.

    Logs pass start and end with duration.

    Usage:
        with log_pass("lifecycle", run_id=run_id):
            # ... pass logic ...
    """
    run_token = run_id_var.set(run_id) if run_id else None
    stage_token = stage_var.set(stage)

    start_time = time.time()
    logger = logging.getLogger("storage_lifecycle.pass")

    logger.info(f"Pass {stage} started", extra={"event": "pass_start"})

    try:
        yield
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Pass {stage} completed",
            extra={"event": "pass_complete", "duration_ms": duration_ms},
        )
    except Exception as e:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.error(
            f"Pass {stage} failed: {e}",
            extra={"event": "pass_failed", "duration_ms": duration_ms},
            exc_info=True,
        )
        raise
    finally:
        stage_var.reset(stage_token)
        if run_token is not None:
            run_id_var.reset(run_token)


@contextmanager
def log_catalog_operation(operation: str, key: str):
    """
    Context manager for catalog operation instrumentation.

    Logs operation end with timing and size.

    Usage:
        with log_catalog_operation("delete", "audio/ep1.mp3") as metrics:
            catalog.delete(key)
            metrics["size_bytes"] = record.size_bytes
    """
    start_time = time.time()
    logger = logging.getLogger("storage_lifecycle.catalog")
    metrics: dict = {"size_bytes": 0}

    try:
        yield metrics

        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            f"Catalog {operation} completed: {key} ({metrics['size_bytes']} bytes, {duration_ms}ms)",
            extra={
                "event": f"catalog_{operation}_complete",
                "operation": operation,
                "key": key,
                "duration_ms": duration_ms,
                "size_bytes": metrics["size_bytes"],
            },
        )
    except Exception as e:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.warning(
            f"Catalog {operation} failed: {key} - {e}",
            extra={
                "event": f"catalog_{operation}_failed",
                "operation": operation,
                "key": key,
                "duration_ms": duration_ms,
            },
        )
        raise


# -----------------------------------------------------------------------------
# Progress Tracker
# -----------------------------------------------------------------------------


@dataclass
class ProgressTracker:
    """
    Track progress for batch operations with periodic logging.

    Usage:
        tracker = ProgressTracker(total=100, stage="lifecycle", log_every=10)
        for item in items:
            process(item)
            tracker.increment()
        tracker.finish()
    """

    total: int
    stage: str
    log_every: int = 10

    processed: int = field(default=0, init=False)
    succeeded: int = field(default=0, init=False)
    failed: int = field(default=0, init=False)
    _start_time: float = field(default_factory=time.time, init=False)
    _logger: logging.Logger = field(init=False)

    def __post_init__(self):
        self._logger = logging.getLogger("storage_lifecycle.progress")

    def increment(self, success: bool = True) -> None:
        """Increment progress counter."""
        self.processed += 1
        if success:
            self.succeeded += 1
        else:
            self.failed += 1

        if self.processed % self.log_every == 0 or self.processed == self.total:
            self._log_progress()

    def _log_progress(self) -> None:
        elapsed = time.time() - self._start_time
        rate = self.processed / elapsed if elapsed > 0 else 0

        self._logger.info(
            f"{self.stage}: {self.processed}/{self.total} "
            f"({self.succeeded} ok, {self.failed} failed) [{rate:.1f}/s]",
            extra={
                "event": "progress_update",
                "items_processed": self.processed,
                "items_failed": self.failed,
            },
        )

    def finish(self) -> dict:
        """Finalize progress tracking and return summary."""
        elapsed = time.time() - self._start_time

        self._logger.info(
            f"{self.stage}: Completed {self.processed}/{self.total} "
            f"({self.succeeded} ok, {self.failed} failed) in {elapsed:.1f}s",
            extra={
                "event": "progress_complete",
                "items_processed": self.processed,
                "items_failed": self.failed,
            },
        )

        return {
            "processed": self.processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "duration_seconds": round(elapsed, 1),
        }
