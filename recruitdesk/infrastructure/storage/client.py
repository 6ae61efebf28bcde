"""
Object storage client for coach list exports.

Supports Cloudflare R2 (S3-compatible) with mock mode for local development.
Exports live in the `coach-exports` bucket under `{campaign_id}/{file_name}`
and are shared through presigned download URLs.

Mock mode stores files in memory, enabling API testing without
provisioning actual object storage.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ...core.coaches.export import ExportStorage, StorageError

logger = logging.getLogger(__name__)


@dataclass
class StorageConfig:
    """Configuration for R2/S3-compatible storage."""
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    endpoint_url: str
    region: str = "auto"  # R2 uses 'auto' for region


def build_export_path(campaign_id: str, file_name: str) -> str:
    return f"{campaign_id}/{file_name}"


class R2StorageClient:
    """
    Cloudflare R2 object storage client.

    Uses boto3 because R2 is S3-compatible. All methods are async to match
    the `ExportStorage` protocol even though boto3 is synchronous.
    """

    def __init__(self, config: StorageConfig) -> None:
        try:
            import boto3
            from botocore.config import Config
        except ImportError:
            raise ImportError(
                "boto3 is required for R2 storage. Install with: pip install boto3"
            )

        self._config = config

        # R2 requires v4 signatures
        boto_config = Config(
            signature_version='s3v4',
            s3={'addressing_style': 'path'},
        )

        self._s3_client = boto3.client(
            's3',
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=boto_config,
        )

        logger.info(
            "Initialized R2 storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.endpoint_url,
            }
        )

    async def upload_export(
        self,
        data: bytes,
        campaign_id: str,
        file_name: str,
    ) -> str:
        """
        Upload an export CSV.

        `IfNoneMatch='*'` makes the put conditional, so an existing file at
        the same path is never overwritten.
        """
        storage_path = build_export_path(campaign_id, file_name)

        try:
            self._s3_client.put_object(
                Bucket=self._config.bucket_name,
                Key=storage_path,
                Body=data,
                ContentType='text/csv',
                CacheControl='max-age=3600',
                IfNoneMatch='*',
                Metadata={'campaign-id': campaign_id},
            )
        except Exception as e:
            logger.error(
                "Failed to upload export",
                extra={"storage_path": storage_path, "error": str(e)}
            )
            raise StorageError(f"Upload failed: {e}")

        logger.info(
            "Uploaded export",
            extra={"storage_path": storage_path, "size_bytes": len(data)}
        )

        return storage_path

    async def get_presigned_url(
        self,
        storage_path: str,
        expiry_seconds: int = 3600,
    ) -> str:
        try:
            return self._s3_client.generate_presigned_url(
                'get_object',
                Params={
                    'Bucket': self._config.bucket_name,
                    'Key': storage_path,
                },
                ExpiresIn=expiry_seconds,
            )
        except Exception as e:
            logger.error(
                "Failed to generate presigned URL",
                extra={"storage_path": storage_path, "error": str(e)}
            )
            raise StorageError(f"Presigned URL generation failed: {e}")

    async def delete_object(self, storage_path: str) -> None:
        try:
            self._s3_client.delete_object(
                Bucket=self._config.bucket_name,
                Key=storage_path,
            )
        except Exception as e:
            logger.error(
                "Failed to delete object",
                extra={"storage_path": storage_path, "error": str(e)}
            )
            raise StorageError(f"Delete failed: {e}")

        logger.info("Deleted object", extra={"storage_path": storage_path})


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageClient:
    """
    In-memory storage for local development and tests.

    Files are kept in a dict keyed by storage path and "URLs" are mock URIs.
    Individual operations can be made to fail by name through `fail_on`.
    """

    def __init__(self, fail_on: Optional[set[str]] = None) -> None:
        self._objects: dict[str, bytes] = {}
        self.fail_on = set(fail_on or ())
        logger.info("Initialized mock storage client (in-memory)")

    async def upload_export(
        self,
        data: bytes,
        campaign_id: str,
        file_name: str,
    ) -> str:
        self._maybe_fail("upload")
        storage_path = build_export_path(campaign_id, file_name)
        if storage_path in self._objects:
            raise StorageError(f"Object already exists: {storage_path}")

        self._objects[storage_path] = data
        logger.debug(
            "Stored export in mock storage",
            extra={"storage_path": storage_path, "size_bytes": len(data)}
        )
        return storage_path

    async def get_presigned_url(
        self,
        storage_path: str,
        expiry_seconds: int = 3600,
    ) -> str:
        self._maybe_fail("sign")
        if storage_path not in self._objects:
            raise StorageError(f"Object not found: {storage_path}")

        return f"mock://storage/{storage_path}?expires={expiry_seconds}"

    async def delete_object(self, storage_path: str) -> None:
        self._maybe_fail("delete")
        self._objects.pop(storage_path, None)

    def get_object(self, storage_path: str) -> bytes:
        """Stored bytes for a path (test helper)."""
        if storage_path not in self._objects:
            raise StorageError(f"Object not found: {storage_path}")
        return self._objects[storage_path]

    def list_paths(self) -> list[str]:
        return sorted(self._objects)

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StorageError(f"Mock {operation} failure")


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> ExportStorage:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return mock client for testing

    Returns:
        ExportStorage implementation (R2 or Mock)
    """
    if mock_mode:
        return MockStorageClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return R2StorageClient(config)
