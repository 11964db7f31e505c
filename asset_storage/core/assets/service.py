"""
Asset upload flow.

AssetStorageService ties the pieces together: classify the payload, name
the new object (retiring the previous one as part of naming), write it and
hand back its public URL.

Replacing uploads delete the old object before the new one is written.
If the delete fails nothing else happens and the call fails. If the write
fails after the delete, the raised StorageOperationFailed reports
ReplaceProgress.OLD_DELETED so callers can tell the two apart.
"""

import logging
from typing import Optional, Protocol

from .codec import classify_payload, is_encoded_payload, is_sentinel
from .errors import DELETING_FILE, UPLOADING_FILE, UPLOADING_IMAGE, StorageOperationFailed
from .models import (
    AssetKind,
    ClassifiedPayload,
    DecodedPayload,
    PassThrough,
    ReplaceProgress,
    StorageKey,
)
from .naming import KeyClock, build_asset_url, resolve_file_key, resolve_image_key

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class ObjectStorageBackend(Protocol):
    """
    Interface for S3-style object stores.
    
    The service only ever writes whole objects and deletes them by key.
    Implementations raise on failure; the service does the wrapping.
    """
    
    async def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
    ) -> None:
        """Store bytes under bucket/key."""
        ...
    
    async def delete_object(self, bucket: str, key: str) -> None:
        """Remove bucket/key."""
        ...


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class AssetStorageService:
    """
    Stores text-encoded assets and manages their replacement.
    
    The service keeps no per-call state. One instance (and its backend)
    is shared by all requests.
    """
    
    def __init__(
        self,
        backend: ObjectStorageBackend,
        bucket_name: str,
        region: str,
        clock: Optional[KeyClock] = None,
        strict_payloads: bool = False,
    ) -> None:
        self._backend = backend
        self._bucket = bucket_name
        self._region = region
        self._clock = clock or KeyClock()
        self._strict = strict_payloads
    
    @property
    def bucket_name(self) -> str:
        return self._bucket
    
    @property
    def backend(self) -> ObjectStorageBackend:
        return self._backend
    
    def is_encoded_payload(self, payload: str) -> bool:
        return is_encoded_payload(payload)
    
    def url_for(self, key: str) -> str:
        return build_asset_url(self._bucket, self._region, key)
    
    async def upload_image(self, payload: str, file_name: str = "") -> str:
        """
        Store an image and return its URL.
        
        `file_name` is the key of the image being replaced; it is deleted
        unless empty or the sentinel. Keys end in .svg when the data URL
        marker mentions svg and .png otherwise.
        """
        classified = classify_payload(payload, strict=self._strict)
        if not isinstance(classified, DecodedPayload):
            return self._unchanged(classified)
        
        key, progress = await self._generate_key(
            classified,
            AssetKind.IMAGE,
            previous_key=file_name,
        )
        return await self._write(classified, key, UPLOADING_IMAGE, progress)
    
    async def upload_file(
        self,
        payload: str,
        file_name: str = "",
        old_file_name: str = "",
    ) -> str:
        """
        Store an arbitrary file and return its URL.
        
        The key takes its extension from `file_name` and the object its
        content type from the data URL marker. `old_file_name` is the key
        being replaced.
        """
        classified = classify_payload(payload, strict=self._strict)
        if not isinstance(classified, DecodedPayload):
            return self._unchanged(classified)
        
        key, progress = await self._generate_key(
            classified,
            AssetKind.FILE,
            previous_key=old_file_name,
            file_name=file_name,
        )
        return await self._write(classified, key, UPLOADING_FILE, progress)
    
    async def delete_asset(self, key: str) -> str:
        """Delete an object and return its key."""
        try:
            await self._backend.delete_object(self._bucket, key)
        except Exception as e:
            logger.error(
                "Failed to delete asset",
                extra={"bucket": self._bucket, "key": key, "error": str(e)}
            )
            raise StorageOperationFailed(DELETING_FILE, e) from e
        
        logger.info("Deleted asset", extra={"bucket": self._bucket, "key": key})
        return key
    
    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------
    
    async def _generate_key(
        self,
        payload: DecodedPayload,
        kind: AssetKind,
        previous_key: str,
        file_name: str = "",
    ) -> tuple[StorageKey, ReplaceProgress]:
        """
        Name the new object, retiring the previous one first.
        
        This is the only place keys are produced, for images and files
        alike. The timestamp is read after the delete completes.
        """
        progress = ReplaceProgress.NOTHING_DONE
        if not is_sentinel(previous_key):
            await self.delete_asset(previous_key)
            progress = ReplaceProgress.OLD_DELETED
        
        moment = self._clock.next_timestamp()
        if kind is AssetKind.IMAGE:
            key = resolve_image_key(moment, payload.marker)
        else:
            key = resolve_file_key(moment, file_name, payload.declared_type)
        return key, progress
    
    async def _write(
        self,
        payload: DecodedPayload,
        key: StorageKey,
        operation: str,
        progress: ReplaceProgress,
    ) -> str:
        try:
            await self._backend.put_object(
                self._bucket,
                key.name,
                payload.data,
                key.content_type,
            )
        except Exception as e:
            logger.error(
                "Failed to store asset",
                extra={
                    "bucket": self._bucket,
                    "key": key.name,
                    "operation": operation,
                    "progress": progress.value,
                    "error": str(e),
                }
            )
            raise StorageOperationFailed(operation, e, progress) from e
        
        logger.info(
            "Stored asset",
            extra={
                "bucket": self._bucket,
                "key": key.name,
                "extension": key.extension,
                "content_type": key.content_type,
                "size_bytes": payload.size_bytes,
                "replaced": progress is ReplaceProgress.OLD_DELETED,
            }
        )
        return self.url_for(key.name)
    
    @staticmethod
    def _unchanged(classified: ClassifiedPayload) -> str:
        if isinstance(classified, PassThrough):
            return classified.value
        return ""
