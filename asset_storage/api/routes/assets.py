"""
Asset upload and delete endpoints.

Clients (typically a browser form) send files as base64 or data URLs in a
JSON body and get back the public URL of the stored object. Sending back a
URL the service returned earlier is harmless: it is echoed unchanged.

Upload flow:
1. Client posts payload (+ the key it replaces, if any)
2. Old object is deleted, new key is generated
3. Object is written to the bucket
4. Public URL is returned
"""

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from ...config.settings import Settings
from ...core.assets import InvalidPayloadError, StorageOperationFailed
from ..dependencies import AssetServiceDep, SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class ImageUploadRequest(BaseModel):
    """Image to store, optionally replacing an earlier one."""
    payload: str = Field(description="Base64 data or data URL (data:image/png;base64,...)")
    file_name: str = Field(
        default="",
        description="Key of the image being replaced. Empty or 'none.jpg' for none."
    )


class FileUploadRequest(BaseModel):
    """Generic file to store, optionally replacing an earlier one."""
    payload: str = Field(description="Base64 data or data URL")
    file_name: str = Field(
        default="",
        description="Original file name; its extension is kept on the stored key"
    )
    old_file_name: str = Field(
        default="",
        description="Key of the file being replaced. Empty or 'none.jpg' for none."
    )


class AssetUrlResponse(BaseModel):
    """Where the asset can be fetched. Empty when no asset was supplied."""
    url: str = Field(description="Public URL of the stored asset, or an unchanged reference")


class DeleteAssetResponse(BaseModel):
    key: str = Field(description="Key that was deleted")


class ValidatePayloadRequest(BaseModel):
    payload: str = Field(description="String to check")


class ValidatePayloadResponse(BaseModel):
    encoded: bool = Field(description="True if the string is strictly valid base64")


# ---------------------------------------------------------------------------
# Helper Functions
# ---------------------------------------------------------------------------

def _check_payload_size(payload: str, settings: Settings) -> None:
    if len(payload) > settings.max_payload_size_bytes:
        logger.warning(
            "Rejected oversized payload",
            extra={"length": len(payload), "limit_mb": settings.max_payload_size_mb}
        )
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"Payload too large. Maximum size: {settings.max_payload_size_mb}MB"
        )


def _storage_failure(error: StorageOperationFailed) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={
            "message": str(error),
            "operation": error.operation,
            "progress": error.progress.value,
        }
    )


def _invalid_payload(error: InvalidPayloadError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(error),
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/images",
    response_model=AssetUrlResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload image",
    description="Store a PNG or SVG image and return its public URL",
)
async def upload_image(
    request: ImageUploadRequest,
    service: AssetServiceDep,
    settings: SettingsDep,
) -> AssetUrlResponse:
    _check_payload_size(request.payload, settings)
    
    try:
        url = await service.upload_image(request.payload, request.file_name)
    except InvalidPayloadError as e:
        raise _invalid_payload(e)
    except StorageOperationFailed as e:
        raise _storage_failure(e)
    
    return AssetUrlResponse(url=url)


@router.post(
    "/files",
    response_model=AssetUrlResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload file",
    description="Store any file, keeping its extension and declared content type",
)
async def upload_file(
    request: FileUploadRequest,
    service: AssetServiceDep,
    settings: SettingsDep,
) -> AssetUrlResponse:
    _check_payload_size(request.payload, settings)
    
    try:
        url = await service.upload_file(
            request.payload,
            request.file_name,
            request.old_file_name,
        )
    except InvalidPayloadError as e:
        raise _invalid_payload(e)
    except StorageOperationFailed as e:
        raise _storage_failure(e)
    
    return AssetUrlResponse(url=url)


@router.post(
    "/validate",
    response_model=ValidatePayloadResponse,
    status_code=status.HTTP_200_OK,
    summary="Check payload encoding",
    description="Report whether a string is strictly valid base64. Touches no storage.",
)
async def validate_payload(
    request: ValidatePayloadRequest,
    service: AssetServiceDep,
) -> ValidatePayloadResponse:
    return ValidatePayloadResponse(encoded=service.is_encoded_payload(request.payload))


@router.delete(
    "/{key:path}",
    response_model=DeleteAssetResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete asset",
    description="Delete an object by key. Deleting a missing key succeeds.",
)
async def delete_asset(
    key: str,
    service: AssetServiceDep,
) -> DeleteAssetResponse:
    try:
        deleted = await service.delete_asset(key)
    except StorageOperationFailed as e:
        raise _storage_failure(e)
    
    return DeleteAssetResponse(key=deleted)
