"""
Unit tests for the storage backends.

The S3 backend runs against botocore's Stubber, so requests are checked
for the right parameters but never leave the process.
"""

import pytest
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from asset_storage.infrastructure.storage.client import (
    MockStorageBackend,
    S3StorageBackend,
    StorageConfig,
    StorageError,
    create_storage_backend,
)


@pytest.fixture
def s3_backend() -> S3StorageBackend:
    return S3StorageBackend(StorageConfig(
        region="us-east-1",
        access_key_id="testing",
        secret_access_key="testing",
    ))


class TestS3StorageBackend:
    
    @pytest.mark.asyncio
    async def test_put_object_sends_content_type(self, s3_backend):
        with Stubber(s3_backend._s3_client) as stubber:
            stubber.add_response(
                "put_object",
                {},
                {
                    "Bucket": "assets",
                    "Key": "20240101T000000000.svg",
                    "Body": b"<svg/>",
                    "ContentType": "image/svg+xml",
                },
            )
            
            await s3_backend.put_object("assets", "20240101T000000000.svg", b"<svg/>", "image/svg+xml")
            
            stubber.assert_no_pending_responses()
    
    @pytest.mark.asyncio
    async def test_delete_object(self, s3_backend):
        with Stubber(s3_backend._s3_client) as stubber:
            stubber.add_response("delete_object", {}, {"Bucket": "assets", "Key": "old.png"})
            
            await s3_backend.delete_object("assets", "old.png")
            
            stubber.assert_no_pending_responses()
    
    @pytest.mark.asyncio
    async def test_client_error_becomes_storage_error(self, s3_backend):
        with Stubber(s3_backend._s3_client) as stubber:
            stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
            
            with pytest.raises(StorageError, match="Upload failed") as exc_info:
                await s3_backend.put_object("assets", "k.png", b"x", "image/png")
        
        assert isinstance(exc_info.value.__cause__, ClientError)
    
    @pytest.mark.asyncio
    async def test_delete_error_becomes_storage_error(self, s3_backend):
        with Stubber(s3_backend._s3_client) as stubber:
            stubber.add_client_error("delete_object", service_error_code="NoSuchBucket", http_status_code=404)
            
            with pytest.raises(StorageError, match="Delete failed"):
                await s3_backend.delete_object("assets", "k.png")


class TestMockStorageBackend:
    
    @pytest.mark.asyncio
    async def test_stores_and_deletes(self):
        backend = MockStorageBackend()
        
        await backend.put_object("b", "k.png", b"data", "image/png")
        assert backend.get("b", "k.png").data == b"data"
        assert backend.keys("b") == ["k.png"]
        
        await backend.delete_object("b", "k.png")
        assert backend.get("b", "k.png") is None
    
    @pytest.mark.asyncio
    async def test_deleting_missing_key_is_a_noop(self):
        backend = MockStorageBackend()
        
        await backend.delete_object("b", "missing")
        
        assert backend.operations == [("delete", "b", "missing")]


class TestFactory:
    
    def test_mock_mode_returns_mock(self):
        assert isinstance(create_storage_backend(mock_mode=True), MockStorageBackend)
    
    def test_real_mode_requires_config(self):
        with pytest.raises(ValueError, match="config is required"):
            create_storage_backend()
    
    def test_real_mode_builds_s3_backend(self):
        backend = create_storage_backend(StorageConfig(region="eu-west-1"))
        
        assert isinstance(backend, S3StorageBackend)
