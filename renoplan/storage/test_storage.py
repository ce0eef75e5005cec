"""
Tests for chat image storage against a mocked S3.
"""

import os

import pytest
from moto import mock_aws

from renoplan.conftest import USER_ID, auth_headers
from renoplan.storage.config import StorageSettings
from renoplan.storage.exceptions import InvalidUploadError, StorageError
from renoplan.storage.service import ImageStorageService, get_storage_service

BUCKET = "test-chat-images"
JPEG = b"\xff\xd8\xff\xe0fake-jpeg"


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"


@pytest.fixture
def s3(aws_credentials):
    with mock_aws():
        import boto3

        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield client


@pytest.fixture
def storage(s3) -> ImageStorageService:
    settings = StorageSettings(chat_images_bucket=BUCKET, max_upload_bytes=1024)
    return ImageStorageService(settings=settings, client=s3)


def test_build_key():
    key = ImageStorageService.build_key("user-1", "image/jpeg")

    prefix, name = key.split("/")
    assert prefix == "user-1"
    assert name.endswith(".jpg")
    assert len(name) == 32 + len(".jpg")


class TestImageStorageService:
    @pytest.mark.asyncio
    async def test_upload_chat_photo(self, storage, s3):
        key, signed_url = await storage.upload_chat_photo("user-1", JPEG, "image/jpeg")

        assert key.startswith("user-1/")
        stored = s3.get_object(Bucket=BUCKET, Key=key)
        assert stored["Body"].read() == JPEG
        assert stored["ContentType"] == "image/jpeg"
        assert key in signed_url
        assert "Expires=" in signed_url or "X-Amz-Expires=3600" in signed_url

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "data, content_type",
        [(JPEG, "application/pdf"), (b"", "image/png"), (b"x" * 2048, "image/png"), (JPEG, None)],
    )
    async def test_rejects_bad_uploads(self, storage, data, content_type):
        with pytest.raises(InvalidUploadError):
            await storage.upload_chat_photo("user-1", data, content_type)

    @pytest.mark.asyncio
    async def test_missing_bucket_is_storage_error(self, s3):
        storage = ImageStorageService(
            settings=StorageSettings(chat_images_bucket="no-such-bucket"), client=s3
        )

        with pytest.raises(StorageError) as exc_info:
            await storage.upload("generated/x.png", b"png", "image/png")
        assert exc_info.value.message == "Failed to save image"


class TestUploadRoute:
    @pytest.fixture
    def app_with_storage(self, app, storage):
        app.dependency_overrides[get_storage_service] = lambda: storage
        return app

    @pytest.mark.asyncio
    async def test_upload(self, client, app_with_storage, s3):
        response = await client.post(
            "/api/storage/images",
            files={"file": ("kitchen.jpg", JPEG, "image/jpeg")},
            headers=auth_headers(),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["path"].startswith(f"{USER_ID}/")
        assert data["path"] in data["signedUrl"]

    @pytest.mark.asyncio
    async def test_invalid_type(self, client, app_with_storage):
        response = await client.post(
            "/api/storage/images",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers(),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Unsupported image type: text/plain"

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client, app_with_storage):
        response = await client.post(
            "/api/storage/images", files={"file": ("kitchen.jpg", JPEG, "image/jpeg")}
        )

        assert response.status_code == 401
