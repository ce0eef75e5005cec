"""
Configuration for the Renoplan API client.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", env_prefix="RENOPLAN_"
    )

    api_url: str = Field(
        default="http://localhost:8000/api", description="Base URL of the Renoplan API"
    )
    timeout: float = Field(default=120.0, description="Request timeout in seconds")
    local_storage_path: Path = Field(
        default=Path.home() / ".renoplan" / "local_storage.json",
        description="File backing the client's local storage",
    )


_client_settings: ClientSettings | None = None


def get_client_settings() -> ClientSettings:
    global _client_settings
    if _client_settings is None:
        _client_settings = ClientSettings()
    return _client_settings


def set_client_settings(settings: ClientSettings) -> None:
    global _client_settings
    _client_settings = settings
