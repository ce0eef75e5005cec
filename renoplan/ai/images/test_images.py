"""
Tests for renovation image generation.
"""

import base64
from unittest.mock import AsyncMock

import httpx
import pytest

from renoplan.ai.gateway.exceptions import GatewayPaymentRequiredError
from renoplan.ai.images.schemas import GenerateImageRequest, ProjectContext, StyleDetails
from renoplan.ai.images.service import (
    ImageGenerationError,
    RenovationImageService,
    build_text_to_image_prompt,
    decode_image,
    describe_project,
)
from renoplan.conftest import auth_headers
from renoplan.storage.service import get_storage_service

PNG_DATA_URL = "data:image/png;base64," + base64.b64encode(b"png-bytes").decode()


@pytest.fixture
def storage():
    fake = AsyncMock()
    fake.build_key = lambda prefix, content_type: f"{prefix}/abc.png"
    fake.create_signed_url.return_value = "https://signed/generated/abc.png"
    return fake


def test_decode_image_with_and_without_prefix():
    assert decode_image(PNG_DATA_URL) == b"png-bytes"
    assert decode_image(base64.b64encode(b"raw").decode()) == b"raw"


def test_decode_image_rejects_urls():
    with pytest.raises(ImageGenerationError, match="Invalid image data"):
        decode_image("https://cdn.test/render.png")


def test_describe_project_defaults():
    assert describe_project(ProjectContext(name="Den")) == (
        "Project: Den. Budget: $flexible. Style: modern."
    )
    assert describe_project(None) == ""


def test_text_to_image_prompt_includes_style_details():
    request = GenerateImageRequest(
        transformationRequest="Scandinavian living room",
        styleDetails=StyleDetails(spaceType="living room", colors=["white", "oak"]),
    )

    prompt = build_text_to_image_prompt(request)

    assert prompt.startswith("Create a highly realistic")
    assert "Scandinavian living room" in prompt
    assert "Space Type: living room. Style: modern. Colors: white, oak." in prompt


class TestRenovationImageService:
    @pytest.mark.asyncio
    async def test_text_to_image_stores_under_generated(self, gateway, storage):
        gateway.generate_image.return_value = PNG_DATA_URL
        service = RenovationImageService(gateway, storage)

        response = await service.generate(
            GenerateImageRequest(transformationRequest="Modern kitchen")
        )

        assert response.generated_image_url == "https://signed/generated/abc.png"
        assert response.original_image_url is None
        storage.upload.assert_awaited_once_with("generated/abc.png", b"png-bytes", "image/png")
        messages = gateway.generate_image.call_args.args[0]
        assert isinstance(messages[0]["content"], str)

    @pytest.mark.asyncio
    async def test_image_to_image_sends_original_as_data_url(self, gateway, storage):
        gateway.generate_image.return_value = PNG_DATA_URL
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(
                lambda request: httpx.Response(
                    200, content=b"jpeg", headers={"content-type": "image/jpeg"}
                )
            )
        )
        service = RenovationImageService(gateway, storage, http_client=http_client)

        response = await service.generate(
            GenerateImageRequest(
                transformationRequest="Paint it green",
                originalImageUrl="https://img/kitchen.jpg",
            )
        )

        assert response.original_image_url == "https://img/kitchen.jpg"
        content = gateway.generate_image.call_args.args[0][0]["content"]
        assert content[1]["image_url"]["url"] == (
            "data:image/jpeg;base64," + base64.b64encode(b"jpeg").decode()
        )
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_unreachable_original(self, gateway, storage):
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(404))
        )
        service = RenovationImageService(gateway, storage, http_client=http_client)

        with pytest.raises(ImageGenerationError) as exc_info:
            await service.generate(
                GenerateImageRequest(
                    transformationRequest="x", originalImageUrl="https://img/gone.jpg"
                )
            )
        assert exc_info.value.status_code == 400
        gateway.generate_image.assert_not_called()
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_no_image_returned(self, gateway, storage):
        gateway.generate_image.return_value = None
        service = RenovationImageService(gateway, storage)

        with pytest.raises(ImageGenerationError, match="No image generated"):
            await service.generate(GenerateImageRequest(transformationRequest="x"))
        storage.upload.assert_not_called()


class TestGenerateImageRoute:
    @pytest.fixture
    def app_with_storage(self, app, storage):
        app.dependency_overrides[get_storage_service] = lambda: storage
        return app

    @pytest.mark.asyncio
    async def test_generate(self, client, gateway, app_with_storage):
        gateway.generate_image.return_value = PNG_DATA_URL

        response = await client.post(
            "/api/ai/generate-image",
            json={"transformationRequest": "Cozy reading nook"},
            headers=auth_headers(),
        )

        assert response.status_code == 200
        assert response.json()["generatedImageUrl"] == "https://signed/generated/abc.png"

    @pytest.mark.asyncio
    async def test_missing_transformation_request(self, client, app_with_storage):
        response = await client.post("/api/ai/generate-image", json={}, headers=auth_headers())

        assert response.status_code == 400
        assert response.json() == {"error": "Missing transformation request"}

    @pytest.mark.asyncio
    async def test_payment_required(self, client, gateway, app_with_storage):
        gateway.generate_image.side_effect = GatewayPaymentRequiredError()

        response = await client.post(
            "/api/ai/generate-image",
            json={"transformationRequest": "x"},
            headers=auth_headers(),
        )

        assert response.status_code == 402

    @pytest.mark.asyncio
    async def test_no_image_is_500(self, client, gateway, app_with_storage):
        gateway.generate_image.return_value = None

        response = await client.post(
            "/api/ai/generate-image",
            json={"transformationRequest": "x"},
            headers=auth_headers(),
        )

        assert response.status_code == 500
        assert response.json() == {"error": "No image generated by AI model"}

    @pytest.mark.asyncio
    async def test_url_instead_of_image_data_is_500(
        self, client, gateway, storage, app_with_storage
    ):
        gateway.generate_image.return_value = "https://cdn.test/render.png"

        response = await client.post(
            "/api/ai/generate-image",
            json={"transformationRequest": "x"},
            headers=auth_headers(),
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Invalid image data returned by AI model"}
        storage.upload.assert_not_called()
