"""
Renovation image generation.

Text-to-image when the user has no photo, image-to-image (restyle the photo,
keep the layout) when they do. The rendering is stored in the chat image
bucket and returned as a signed URL.
"""

import base64
import binascii
import re
from typing import Any

import httpx

from renoplan.ai.gateway.client import GatewayClient
from renoplan.ai.images.schemas import (
    GenerateImageRequest,
    GenerateImageResponse,
    ProjectContext,
    StyleDetails,
)
from renoplan.storage.service import ImageStorageService
from renoplan.utils.logger import logger

DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")

TEXT_TO_IMAGE_REQUIREMENTS = """Requirements:
- Photorealistic quality with accurate lighting and shadows
- High attention to materials, textures, and finishes
- Practical and achievable design (not fantasy)
- Professional architectural visualization style
- Show realistic furniture placement and decor
- Include ambient and task lighting
- Modern, clean aesthetic
- Natural color palette that's inviting and livable

The image should look like it was photographed by a professional interior photographer in a completed, staged space."""

TRANSFORMATION_REQUIREMENTS = """Create a realistic renovation transformation that shows:
- High-quality, professional interior design
- Realistic materials and lighting
- Practical and achievable renovation
- Modern, clean aesthetic
- Attention to detail and craftsmanship

Maintain the room layout and architectural features while transforming the style, materials, and finishes."""


class ImageGenerationError(Exception):
    """Image generation failed after the gateway call; carries the client message."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _budget(value: float | None) -> str:
    if not value:
        return "flexible"
    return str(int(value)) if float(value).is_integer() else str(value)


def describe_project(context: ProjectContext | None) -> str:
    if not context:
        return ""
    styles = ", ".join(context.style_preferences or []) or "modern"
    return f"Project: {context.name}. Budget: ${_budget(context.budget)}. Style: {styles}."


def describe_style(details: StyleDetails | None) -> str:
    if not details:
        return ""
    return (
        f"Space Type: {details.space_type or 'interior'}. "
        f"Style: {details.style or 'modern'}. "
        f"Colors: {', '.join(details.colors or []) or 'neutral'}. "
        f"Features: {', '.join(details.features or []) or 'functional'}."
    )


def build_text_to_image_prompt(request: GenerateImageRequest) -> str:
    return (
        "Create a highly realistic, professional interior design rendering.\n\n"
        f"{request.transformation_request}\n\n"
        f"{describe_project(request.project_context)}\n"
        f"{describe_style(request.style_details)}\n\n"
        f"{TEXT_TO_IMAGE_REQUIREMENTS}"
    )


def build_transformation_prompt(request: GenerateImageRequest) -> str:
    return (
        f"{request.transformation_request}\n\n"
        f"{describe_project(request.project_context)}\n\n"
        f"{TRANSFORMATION_REQUIREMENTS}"
    )


def decode_image(data_url: str) -> bytes:
    """Raw bytes of a base64 image, with or without the data URL prefix."""
    try:
        return base64.b64decode(DATA_URL_PREFIX.sub("", data_url), validate=True)
    except binascii.Error as e:
        logger.error("AI returned undecodable image data", error=str(e), preview=data_url[:80])
        raise ImageGenerationError("Invalid image data returned by AI model") from e


class RenovationImageService:
    def __init__(
        self,
        gateway: GatewayClient,
        storage: ImageStorageService,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.gateway = gateway
        self.storage = storage
        self._http_client = http_client

    async def _fetch_as_data_url(self, url: str) -> str:
        logger.info("Fetching original image", url=url[:100])
        try:
            if self._http_client is not None:
                response = await self._http_client.get(url)
            else:
                async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as client:
                    response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Failed to fetch image", error=str(e))
            raise ImageGenerationError("Failed to fetch original image", status_code=400) from e

        mime_type = response.headers.get("content-type", "image/jpeg").split(";")[0]
        encoded = base64.b64encode(response.content).decode("ascii")
        return f"data:{mime_type};base64,{encoded}"

    async def build_messages(self, request: GenerateImageRequest) -> list[dict[str, Any]]:
        if not request.original_image_url:
            logger.info("Text-to-image mode")
            return [{"role": "user", "content": build_text_to_image_prompt(request)}]

        logger.info("Image-to-image mode")
        data_url = await self._fetch_as_data_url(request.original_image_url)
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": build_transformation_prompt(request)},
                    {"type": "image_url", "image_url": {"url": data_url}},
                ],
            }
        ]

    async def generate(self, request: GenerateImageRequest) -> GenerateImageResponse:
        """
        Generate, store and sign a renovation rendering.

        Raises:
            ImageGenerationError: Original image unreachable or no image returned
            GatewayError: Gateway failures
            StorageError: Upload or signing failures
        """
        messages = await self.build_messages(request)

        image = await self.gateway.generate_image(messages)
        if not image:
            logger.error("No image in AI response")
            raise ImageGenerationError("No image generated by AI model")

        key = self.storage.build_key("generated", "image/png")
        await self.storage.upload(key, decode_image(image), "image/png")
        signed_url = await self.storage.create_signed_url(key)

        logger.info("Image transformation complete", key=key)
        return GenerateImageResponse(
            generated_image_url=signed_url,
            original_image_url=request.original_image_url,
        )
