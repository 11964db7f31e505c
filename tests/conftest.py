"""Shared fixtures for API tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from asset_storage.api import dependencies
from asset_storage.config.settings import Settings, get_settings
from asset_storage.core.assets import AssetStorageService
from asset_storage.infrastructure.storage.client import MockStorageBackend


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        assets_bucket_name="test-assets",
        aws_region="eu-west-1",
        storage_mock_mode=True,
        max_payload_size_mb=1,
    )


@pytest.fixture
def mock_backend() -> MockStorageBackend:
    return MockStorageBackend()


@pytest.fixture
def app(test_settings, mock_backend):
    from asset_storage.main import create_app
    
    application = create_app()
    application.dependency_overrides[get_settings] = lambda: test_settings
    dependencies.set_asset_service(AssetStorageService(
        backend=mock_backend,
        bucket_name=test_settings.assets_bucket_name,
        region=test_settings.aws_region,
    ))
    yield application
    dependencies.set_asset_service(None)


@pytest.fixture
def client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
