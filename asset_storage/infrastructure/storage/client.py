"""
Object storage backends for uploaded assets.

Supports AWS S3 and S3-compatible stores (MinIO, LocalStack) through boto3,
plus an in-memory mock for local development.

Backends only move bytes. Naming, content types and error labelling are
the asset service's job; here every failure becomes a StorageError that
chains the underlying boto/botocore exception.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


@dataclass
class StorageConfig:
    """
    Configuration for the S3 client.
    
    Credentials are optional: when both are None boto3 falls back to its
    default chain (environment, shared config, instance role).
    """
    region: str
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    endpoint_url: Optional[str] = None


@dataclass(frozen=True)
class StoredAsset:
    """An object as held by the store."""
    bucket: str
    key: str
    data: bytes
    content_type: str


class S3StorageBackend:
    """
    AWS S3 object storage backend.
    
    One boto3 client is created per backend and reused for every call;
    boto3 clients are thread-safe, so the blocking calls run in worker
    threads without extra locking.
    """
    
    def __init__(self, config: StorageConfig) -> None:
        """
        Initialize the boto3 S3 client.
        
        boto3 is imported here (not at module level) so mock mode
        doesn't need it.
        """
        try:
            import boto3
            from botocore.config import Config
        except ImportError:
            raise ImportError(
                "boto3 is required for S3 storage. Install with: pip install boto3"
            )
        
        self._config = config
        
        boto_config = Config(signature_version='s3v4')
        
        self._s3_client = boto3.client(
            's3',
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=boto_config,
        )
        
        logger.info(
            "Initialized S3 storage client",
            extra={
                "region": config.region,
                "endpoint": config.endpoint_url or "aws",
            }
        )
    
    async def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
    ) -> None:
        """Upload bytes to S3."""
        def _put() -> None:
            self._s3_client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        
        try:
            await asyncio.to_thread(_put)
        except Exception as e:
            logger.error(
                "Failed to upload object",
                extra={"bucket": bucket, "key": key, "error": str(e)}
            )
            raise StorageError(f"Upload failed: {e}") from e
        
        logger.debug(
            "Uploaded object",
            extra={
                "bucket": bucket,
                "key": key,
                "content_type": content_type,
                "size_bytes": len(data),
            }
        )
    
    async def delete_object(self, bucket: str, key: str) -> None:
        """
        Delete an object from S3.
        
        S3 answers 204 for keys that don't exist, so repeated deletes
        succeed.
        """
        def _delete() -> None:
            self._s3_client.delete_object(Bucket=bucket, Key=key)
        
        try:
            await asyncio.to_thread(_delete)
        except Exception as e:
            logger.error(
                "Failed to delete object",
                extra={"bucket": bucket, "key": key, "error": str(e)}
            )
            raise StorageError(f"Delete failed: {e}") from e
        
        logger.debug("Deleted object", extra={"bucket": bucket, "key": key})


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageBackend:
    """
    In-memory storage for local development and tests.
    
    Objects live in a dict keyed by (bucket, key). Every call is appended
    to `operations` as (action, bucket, key) so tests can assert ordering.
    Deleting a missing key is a no-op, like S3.
    """
    
    def __init__(self) -> None:
        self._objects: dict[tuple[str, str], StoredAsset] = {}
        self.operations: list[tuple[str, str, str]] = []
        logger.info("Initialized mock storage backend (in-memory)")
    
    async def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
    ) -> None:
        """Store object in memory."""
        self.operations.append(("put", bucket, key))
        self._objects[(bucket, key)] = StoredAsset(
            bucket=bucket,
            key=key,
            data=data,
            content_type=content_type,
        )
        
        logger.debug(
            "Stored object in mock storage",
            extra={"bucket": bucket, "key": key, "size_bytes": len(data)}
        )
    
    async def delete_object(self, bucket: str, key: str) -> None:
        """Remove object from memory."""
        self.operations.append(("delete", bucket, key))
        self._objects.pop((bucket, key), None)
        
        logger.debug("Deleted object from mock storage", extra={"bucket": bucket, "key": key})
    
    def get(self, bucket: str, key: str) -> Optional[StoredAsset]:
        return self._objects.get((bucket, key))
    
    def keys(self, bucket: str) -> list[str]:
        return sorted(k for b, k in self._objects if b == bucket)


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_backend(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> S3StorageBackend | MockStorageBackend:
    """
    Create storage backend based on configuration.
    
    Args:
        config: S3 configuration (required if not mock_mode)
        mock_mode: If True, return the in-memory backend
    
    Returns:
        S3StorageBackend or MockStorageBackend
    """
    if mock_mode:
        return MockStorageBackend()
    
    if config is None:
        raise ValueError("config is required when not in mock mode")
    
    return S3StorageBackend(config)
