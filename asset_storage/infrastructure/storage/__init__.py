"""
Object storage integration for uploaded assets.

Supports AWS S3 and S3-compatible stores via boto3.
Includes mock mode for local development without credentials.
"""

from .client import (
    MockStorageBackend,
    S3StorageBackend,
    StorageConfig,
    StorageError,
    StoredAsset,
    create_storage_backend,
)

__all__ = [
    "MockStorageBackend",
    "S3StorageBackend",
    "StorageConfig",
    "StorageError",
    "StoredAsset",
    "create_storage_backend",
]
