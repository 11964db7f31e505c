"""
FastAPI dependency injection.

Dependencies provide the settings and the shared asset service to route
handlers. The storage backend wraps a boto3 client with its own connection pool;
one instance per process is shared by every request.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends

from ..config.settings import Settings, get_settings
from ..core.assets import AssetStorageService
from ..infrastructure.storage.client import StorageConfig, create_storage_backend

logger = logging.getLogger(__name__)

# Shared service instance (one backend client per process)
_asset_service: Optional[AssetStorageService] = None


def build_asset_service(settings: Settings) -> AssetStorageService:
    """Create the asset service and its storage backend from settings."""
    if settings.storage_mock_mode:
        backend = create_storage_backend(mock_mode=True)
    else:
        config = StorageConfig(
            region=settings.aws_region,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
            endpoint_url=settings.s3_endpoint_url,
        )
        backend = create_storage_backend(config=config)
    
    return AssetStorageService(
        backend=backend,
        bucket_name=settings.assets_bucket_name,
        region=settings.aws_region,
        strict_payloads=settings.strict_payloads,
    )


def get_asset_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AssetStorageService:
    """
    Provide the shared AssetStorageService.
    
    Created on first use (normally during application startup) and
    reused afterwards.
    """
    global _asset_service
    
    if _asset_service is None:
        _asset_service = build_asset_service(settings)
        logger.info(
            "Created shared asset service",
            extra={
                "bucket": settings.assets_bucket_name,
                "mock_mode": settings.storage_mock_mode,
            }
        )
    
    return _asset_service


def set_asset_service(service: Optional[AssetStorageService]) -> None:
    """Replace the shared service (None forces a rebuild on next use)."""
    global _asset_service
    _asset_service = service


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

AssetServiceDep = Annotated[AssetStorageService, Depends(get_asset_service)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
