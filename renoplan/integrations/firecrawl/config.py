"""
Configuration management for the Firecrawl integration package.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from renoplan.utils.logger import logger


class FirecrawlSettings(BaseSettings):
    """Configuration for Firecrawl integration using Pydantic settings."""

    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", env_prefix="FIRECRAWL_"
    )

    api_key: str = Field(default="", description="Firecrawl API key")
    base_url: str = Field(
        default="https://api.firecrawl.dev", description="Firecrawl API base URL"
    )
    timeout: int = Field(default=60, description="Request timeout in seconds")


# Global settings instance
_firecrawl_settings: FirecrawlSettings | None = None


def get_firecrawl_settings() -> FirecrawlSettings:
    """
    Get the global Firecrawl settings instance.

    Returns:
        FirecrawlSettings: The global settings instance
    """
    global _firecrawl_settings
    if _firecrawl_settings is None:
        _firecrawl_settings = FirecrawlSettings()
        logger.info("FirecrawlSettings loaded")
    return _firecrawl_settings


def set_firecrawl_settings(settings: FirecrawlSettings) -> None:
    global _firecrawl_settings
    _firecrawl_settings = settings
