# storage_lifecycle/config.py
"""
Centralized configuration with validation.

Uses pydantic-settings to load and validate all environment variables at startup.
Fail fast with clear error messages if the policy is inconsistent.
"""

from functools import lru_cache
from typing import ClassVar

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from storage_lifecycle.constants import CompressionDefaults, DefaultLifecycle, RunnerDefaults
from storage_lifecycle.services.lifecycle.types import CostOptimizationConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Feature switches
    STORAGE_CLEANUP_ENABLED: bool = Field(
        default=False,
        description="Enable lifecycle passes (deletes, tiering, compression)",
    )
    STORAGE_TIERING_ENABLED: bool = Field(
        default=False,
        description="Enable Hot -> Cool -> Archive tier transitions",
    )
    STORAGE_COMPRESSION_ENABLED: bool = Field(
        default=False,
        description="Enable compression marking for large text content",
    )

    # Tiering thresholds
    HOT_TO_COOL_DAYS: int = Field(
        default=30,
        description="Audio age in days before moving Hot -> Cool",
    )
    COOL_TO_ARCHIVE_DAYS: int = Field(
        default=90,
        description="Audio age in days before moving Cool -> Archive",
    )
    ARCHIVE_TO_DELETE_DAYS: int = Field(
        default=365,
        description="Age in days after which Archive objects are deleted",
    )

    # Compression
    COMPRESSION_THRESHOLD: int = Field(
        default=CompressionDefaults.THRESHOLD_BYTES,
        description="Minimum size in bytes for compression",
    )

    # Retention
    TEMP_FILE_RETENTION_HOURS: int = Field(
        default=24,
        description="Hours to keep transient files",
    )
    AUDIO_RETENTION_DAYS: int = Field(
        default=365,
        description="Days to retain audio files",
    )
    IMAGE_RETENTION_DAYS: int = Field(
        default=30,
        description="Days to retain image files",
    )
    DEFAULT_RETENTION_DAYS: int = Field(
        default=DefaultLifecycle.RETENTION_DAYS,
        description="Days to retain unclassified files",
    )

    # Storage
    STORAGE_PROVIDER: str = Field(
        default="local",
        description="Storage provider: s3, local",
    )
    LOCAL_STORAGE_PATH: str = Field(
        default="./storage",
        description="Path for local storage provider",
    )
    S3_BUCKET: str | None = None
    S3_ENDPOINT_URL: str | None = None
    S3_REGION: str = "us-east-1"
    S3_PREFIX: str = ""

    # Runner
    LIFECYCLE_MAX_CONCURRENCY: int = Field(
        default=RunnerDefaults.MAX_CONCURRENCY,
        description="Max objects processed concurrently in a lifecycle pass",
    )
    LIFECYCLE_RUN_TIMEOUT_SECONDS: float | None = Field(
        default=None,
        description="Stop starting new objects after this many seconds (unset = no budget)",
    )

    # Logging
    LOG_FORMAT: str = Field(
        default="json",
        description="Log output format: json, text",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR",
    )

    # Application
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )

    SUPPORTED_PROVIDERS: ClassVar[set[str]] = {"local", "s3"}
    SUPPORTED_LOG_FORMATS: ClassVar[set[str]] = {"json", "text"}

    @field_validator(
        "HOT_TO_COOL_DAYS",
        "COOL_TO_ARCHIVE_DAYS",
        "ARCHIVE_TO_DELETE_DAYS",
        "TEMP_FILE_RETENTION_HOURS",
        "AUDIO_RETENTION_DAYS",
        "IMAGE_RETENTION_DAYS",
        "DEFAULT_RETENTION_DAYS",
        "LIFECYCLE_MAX_CONCURRENCY",
    )
    @classmethod
    def require_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be greater than 0")
        return v

    @field_validator("COMPRESSION_THRESHOLD")
    @classmethod
    def require_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be non-negative")
        return v

    @field_validator("STORAGE_PROVIDER")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        v = v.lower().strip()
        if v not in cls.SUPPORTED_PROVIDERS:
            raise ValueError(f"unknown storage provider '{v}', expected one of: s3, local")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def normalize_log_format(cls, v: str) -> str:
        v = v.lower().strip()
        if v not in cls.SUPPORTED_LOG_FORMATS:
            raise ValueError(f"unknown log format '{v}', expected json or text")
        return v

    @model_validator(mode="after")
    def check_tier_ordering(self) -> "Settings":
        """Hot -> Cool must happen before Cool -> Archive."""
        if self.HOT_TO_COOL_DAYS >= self.COOL_TO_ARCHIVE_DAYS:
            raise ValueError("HOT_TO_COOL_DAYS must be less than COOL_TO_ARCHIVE_DAYS")
        return self

    def cost_optimization_config(self) -> CostOptimizationConfig:
        """Build the immutable policy config used by the lifecycle engine."""
        return CostOptimizationConfig(
            cleanup_enabled=self.STORAGE_CLEANUP_ENABLED,
            tiering_enabled=self.STORAGE_TIERING_ENABLED,
            compression_enabled=self.STORAGE_COMPRESSION_ENABLED,
            hot_to_cool_days=self.HOT_TO_COOL_DAYS,
            cool_to_archive_days=self.COOL_TO_ARCHIVE_DAYS,
            archive_to_delete_days=self.ARCHIVE_TO_DELETE_DAYS,
            compression_threshold_bytes=self.COMPRESSION_THRESHOLD,
            transient_retention_hours=self.TEMP_FILE_RETENTION_HOURS,
            audio_retention_days=self.AUDIO_RETENTION_DAYS,
            image_retention_days=self.IMAGE_RETENTION_DAYS,
            default_retention_days=self.DEFAULT_RETENTION_DAYS,
        )

    def catalog_kwargs(self) -> dict:
        """Constructor arguments for the configured file catalog."""
        if self.STORAGE_PROVIDER == "s3":
            return {
                "bucket": self.S3_BUCKET,
                "prefix": self.S3_PREFIX,
                "endpoint_url": self.S3_ENDPOINT_URL,
                "region": self.S3_REGION,
            }
        return {"base_path": self.LOCAL_STORAGE_PATH}

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings. Call at startup to validate config."""
    return Settings()
