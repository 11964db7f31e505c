"""Unit tests for settings loading and validation."""

from asset_storage.config.settings import Settings, get_settings


class TestSettings:
    
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ASSETS_BUCKET_NAME", "env-bucket")
        monkeypatch.setenv("AWS_REGION", "ap-southeast-2")
        monkeypatch.setenv("STORAGE_MOCK_MODE", "true")
        get_settings.cache_clear()
        
        try:
            settings = get_settings()
        finally:
            get_settings.cache_clear()
        
        assert settings.assets_bucket_name == "env-bucket"
        assert settings.aws_region == "ap-southeast-2"
        assert settings.storage_mock_mode is True
    
    def test_bucket_always_required(self):
        settings = Settings(assets_bucket_name="", storage_mock_mode=True)
        
        assert settings.validate_required_fields() == ["ASSETS_BUCKET_NAME"]
    
    def test_credentials_must_come_in_pairs(self):
        settings = Settings(assets_bucket_name="b", aws_access_key_id="AKIA", aws_secret_access_key=None)
        
        assert settings.validate_required_fields() == ["AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY"]
    
    def test_default_credential_chain_is_allowed(self):
        settings = Settings(assets_bucket_name="b", aws_access_key_id=None, aws_secret_access_key=None)
        
        assert settings.validate_required_fields() == []
    
    def test_cors_origins_list(self):
        assert Settings(cors_origins="https://a.example, https://b.example").cors_origins_list == [
            "https://a.example",
            "https://b.example",
        ]
        assert Settings(cors_origins="*").cors_origins_list == ["*"]
