"""
Asset payload decoding, key naming and the upload/delete flow.

Re-exports the main types for convenient importing:
    from asset_storage.core.assets import AssetStorageService, StorageOperationFailed
"""

from .codec import NO_FILE_SENTINEL, classify_payload, is_encoded_payload
from .errors import InvalidPayloadError, StorageOperationFailed
from .models import (
    AssetKind,
    DecodedPayload,
    EmptyPayload,
    PassThrough,
    ReplaceProgress,
    StorageKey,
)
from .naming import KeyClock, build_asset_url
from .service import AssetStorageService, ObjectStorageBackend

__all__ = [
    "AssetKind",
    "AssetStorageService",
    "DecodedPayload",
    "EmptyPayload",
    "InvalidPayloadError",
    "KeyClock",
    "NO_FILE_SENTINEL",
    "ObjectStorageBackend",
    "PassThrough",
    "ReplaceProgress",
    "StorageKey",
    "StorageOperationFailed",
    "build_asset_url",
    "classify_payload",
    "is_encoded_payload",
]
