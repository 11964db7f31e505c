"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (or a local .env file).
The service itself only needs a bucket and a region; everything else is
either optional credentials for the S3 client or knobs for the HTTP layer.

Mock mode swaps the S3 backend for an in-memory store so the API can be
exercised without provisioning a bucket.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """
    
    # API Configuration
    api_title: str = "Asset Storage API"
    api_version: str = "v1"
    
    # Object Storage Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="Region of the assets bucket. Also part of every public asset URL."
    )
    assets_bucket_name: str = Field(
        default="",
        description="Bucket that receives uploaded assets"
    )
    aws_access_key_id: Optional[str] = Field(
        default=None,
        description="Access key ID. When unset, boto3's default credential chain is used."
    )
    aws_secret_access_key: Optional[str] = Field(
        default=None,
        description="Secret access key matching aws_access_key_id"
    )
    s3_endpoint_url: Optional[str] = Field(
        default=None,
        description="Custom endpoint for S3-compatible stores (MinIO, LocalStack). Leave unset for AWS."
    )
    storage_mock_mode: bool = Field(
        default=False,
        description="Use in-memory storage instead of S3. Enables local dev without a bucket."
    )
    
    # Upload Behavior
    strict_payloads: bool = Field(
        default=False,
        description="Reject data URLs whose body is not valid base64 instead of passing them through."
    )
    max_payload_size_mb: int = Field(
        default=25,
        description="Maximum size of an encoded payload accepted by the HTTP API, in MB."
    )
    
    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    
    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )
    
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
    
    @property
    def max_payload_size_bytes(self) -> int:
        return self.max_payload_size_mb * 1024 * 1024
    
    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set based on mock mode settings.
        
        Returns list of missing required fields. Mock mode still needs a
        bucket name because it appears in every returned URL.
        """
        missing = []
        
        if not self.assets_bucket_name:
            missing.append("ASSETS_BUCKET_NAME")
        
        if not self.storage_mock_mode:
            if not self.aws_region:
                missing.append("AWS_REGION")
            # Explicit keys must come as a pair
            if bool(self.aws_access_key_id) != bool(self.aws_secret_access_key):
                missing.append("AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY")
        
        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    
    Settings are loaded once per process. For tests, call
    get_settings.cache_clear() to reset.
    """
    return Settings()
