"""
Configuration management for the auth package.

Tokens are validated against the hosted platform's auth service, so only its
base URL and public API key are needed here.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from renoplan.utils.logger import logger


class AuthSettings(BaseSettings):
    """Configuration for the auth system using Pydantic settings."""

    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", env_prefix="AUTH_"
    )

    url: str = Field(
        default="http://localhost:54321/auth/v1",
        description="Base URL of the platform auth service",
    )
    api_key: str | None = Field(
        default=None, description="Public API key sent as the apikey header"
    )
    timeout_seconds: float = Field(default=10.0, description="Token validation timeout")


_auth_settings: AuthSettings | None = None


def get_auth_settings() -> AuthSettings:
    """
    Get the global auth settings instance.

    Returns:
        AuthSettings: The global settings instance
    """
    global _auth_settings
    if _auth_settings is None:
        _auth_settings = AuthSettings()
        logger.info("AuthSettings loaded", auth_url=_auth_settings.url)
    return _auth_settings


def set_auth_settings(settings: AuthSettings) -> None:
    """
    Set the global auth settings instance.

    Args:
        settings: The settings to set
    """
    global _auth_settings
    _auth_settings = settings
