"""Object storage configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Settings for the S3-compatible object store holding chat images."""

    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", env_prefix="STORAGE_"
    )

    region: str = Field(default="us-east-1", description="S3 region")
    endpoint_url: str | None = Field(
        default=None, description="Custom endpoint for S3-compatible stores"
    )
    access_key_id: str | None = Field(default=None)
    secret_access_key: str | None = Field(default=None)
    chat_images_bucket: str = Field(default="chat-images")
    signed_url_ttl_seconds: int = Field(
        default=3600, gt=0, description="Lifetime of signed image URLs"
    )
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, gt=0)


_storage_settings: StorageSettings | None = None


def get_storage_settings() -> StorageSettings:
    global _storage_settings
    if _storage_settings is None:
        _storage_settings = StorageSettings()
    return _storage_settings


def set_storage_settings(settings: StorageSettings) -> None:
    global _storage_settings
    _storage_settings = settings
