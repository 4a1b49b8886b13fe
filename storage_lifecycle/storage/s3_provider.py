# storage_lifecycle/storage/s3_provider.py
"""
S3 file catalog implementation using boto3.

Supports:
- AWS S3
- S3-compatible services (MinIO, DigitalOcean Spaces, etc.)

Tiers map onto storage classes: Hot=STANDARD, Cool=STANDARD_IA,
Archive=GLACIER. Tier changes are in-place copies with a new storage class.
"""

import logging
import os
from datetime import UTC, datetime

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from storage_lifecycle.storage.base import (
    AccessTier,
    CatalogUnavailableError,
    FileCatalog,
    ObjectRecord,
)

logger = logging.getLogger(__name__)

STORAGE_CLASS_BY_TIER = {
    AccessTier.HOT: "STANDARD",
    AccessTier.COOL: "STANDARD_IA",
    AccessTier.ARCHIVE: "GLACIER",
}

TIER_BY_STORAGE_CLASS = {
    "STANDARD": AccessTier.HOT,
    "STANDARD_IA": AccessTier.COOL,
    "ONEZONE_IA": AccessTier.COOL,
    "GLACIER_IR": AccessTier.ARCHIVE,
    "GLACIER": AccessTier.ARCHIVE,
    "DEEP_ARCHIVE": AccessTier.ARCHIVE,
}

# Object metadata key marking short-lived artifacts
TRANSIENT_METADATA_KEY = "is-temporary"


class S3FileCatalog(FileCatalog):
    """
    S3/S3-compatible file catalog.

    Configuration via environment:
    - S3_BUCKET: Bucket name (required)
    - S3_PREFIX: Key prefix to manage (default: whole bucket)
    - S3_ENDPOINT_URL: Custom endpoint for S3-compatible services
    - S3_REGION: AWS region (default: us-east-1)
    - AWS_ACCESS_KEY_ID: AWS credentials
    - AWS_SECRET_ACCESS_KEY: AWS credentials
    """

    def __init__(
        self,
        bucket: str | None = None,
        prefix: str | None = None,
        endpoint_url: str | None = None,
        region: str | None = None,
    ):
        """
        Initialize S3 catalog.

        Args:
            bucket: S3 bucket name (or S3_BUCKET env var)
            prefix: Only manage keys under this prefix
            endpoint_url: Custom endpoint for S3-compatible services
            region: AWS region
        """
        self._bucket = bucket or os.getenv("S3_BUCKET")
        if not self._bucket:
            raise ValueError("S3 bucket required. Set S3_BUCKET env var or pass bucket.")

        self._prefix = prefix if prefix is not None else os.getenv("S3_PREFIX", "")
        self._endpoint_url = endpoint_url or os.getenv("S3_ENDPOINT_URL")
        self._region = region or os.getenv("S3_REGION", "us-east-1")

        # Retries live here, not in the lifecycle engine
        config = Config(
            retries={"max_attempts": 3, "mode": "adaptive"},
            connect_timeout=5,
            read_timeout=30,
        )

        self._client = boto3.client(
            "s3",
            endpoint_url=self._endpoint_url,
            region_name=self._region,
            config=config,
        )

        logger.info(f"S3 catalog initialized: bucket={self._bucket} prefix={self._prefix!r}")

    @property
    def name(self) -> str:
        return "s3"

    @property
    def bucket(self) -> str:
        return self._bucket

    def list_all(self) -> list[str]:
        """List all objects under the configured prefix."""
        all_keys = []

        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self._bucket, Prefix=self._prefix):
                for obj in page.get("Contents", []):
                    all_keys.append(obj["Key"])
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list objects in {self._bucket}: {e}")
            raise CatalogUnavailableError(f"Cannot list bucket {self._bucket}: {e}") from e

        return all_keys

    def get_metadata(self, key: str) -> ObjectRecord | None:
        """Get object metadata and tags without downloading content."""
        try:
            response = self._client.head_object(Bucket=self._bucket, Key=key)
            tagging = self._client.get_object_tagging(Bucket=self._bucket, Key=key)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code in ("404", "NoSuchKey"):
                return None
            raise

        s3_metadata = response.get("Metadata", {})
        tags = {tag["Key"]: tag["Value"] for tag in tagging.get("TagSet", [])}
        # HEAD omits StorageClass for STANDARD objects
        storage_class = response.get("StorageClass", "STANDARD")

        return ObjectRecord(
            name=key,
            content_type=response.get("ContentType", "application/octet-stream"),
            size_bytes=response.get("ContentLength", 0),
            last_modified=response.get("LastModified", datetime.now(UTC)),
            current_tier=TIER_BY_STORAGE_CLASS.get(storage_class),
            is_transient=s3_metadata.get(TRANSIENT_METADATA_KEY) == "true",
            tags=tags,
        )

    def delete(self, key: str) -> bool:
        """Delete object from S3."""
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
            logger.debug(f"Deleted from S3: {key}")
            return True
        except ClientError as e:
            logger.error(f"S3 delete failed for {key}: {e}")
            return False

    def set_tier(self, key: str, tier: AccessTier) -> bool:
        """Change storage class with an in-place copy."""
        try:
            self._client.copy_object(
                Bucket=self._bucket,
                Key=key,
                CopySource={"Bucket": self._bucket, "Key": key},
                StorageClass=STORAGE_CLASS_BY_TIER[tier],
                MetadataDirective="COPY",
                TaggingDirective="COPY",
            )
            logger.debug(f"Changed S3 storage class: {key} -> {STORAGE_CLASS_BY_TIER[tier]}")
            return True
        except ClientError as e:
            logger.error(f"S3 storage class change failed for {key}: {e}")
            return False

    def set_tag(self, key: str, tag_key: str, value: str) -> bool:
        """Merge one tag into the object's tag set."""
        try:
            tagging = self._client.get_object_tagging(Bucket=self._bucket, Key=key)
            tags = {tag["Key"]: tag["Value"] for tag in tagging.get("TagSet", [])}
            tags[tag_key] = value
            self._client.put_object_tagging(
                Bucket=self._bucket,
                Key=key,
                Tagging={"TagSet": [{"Key": k, "Value": v} for k, v in tags.items()]},
            )
            return True
        except ClientError as e:
            logger.error(f"S3 tagging failed for {key}: {e}")
            return False
