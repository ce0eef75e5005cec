"""AI gateway configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GatewaySettings(BaseSettings):
    """Settings for the OpenAI-compatible AI gateway.

    Attributes:
        base_url: Gateway API root; `/chat/completions` is appended
        api_key: Bearer key for the gateway
        text_model: Model for text-only chat and function calls
        vision_model: Model used when any chat message carries an image
        image_model: Model that returns generated images
        request_timeout: HTTP timeout in seconds for non-streaming calls
    """

    model_config = SettingsConfigDict(
        env_prefix="AI_GATEWAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(
        default="https://ai.gateway.lovable.dev/v1",
        description="OpenAI-compatible gateway base URL",
    )
    api_key: str = Field(default="", description="AI gateway API key")
    text_model: str = Field(default="google/gemini-2.5-flash")
    vision_model: str = Field(default="google/gemini-2.5-pro")
    image_model: str = Field(default="google/gemini-2.5-flash-image-preview")
    request_timeout: int = Field(
        default=120, gt=0, description="HTTP request timeout in seconds"
    )


_gateway_settings: GatewaySettings | None = None


def get_gateway_settings() -> GatewaySettings:
    """Get the global gateway settings instance.

    Returns:
        GatewaySettings: Settings instance, created on first use
    """
    global _gateway_settings
    if _gateway_settings is None:
        _gateway_settings = GatewaySettings()
    return _gateway_settings


def set_gateway_settings(settings: GatewaySettings) -> None:
    global _gateway_settings
    _gateway_settings = settings
