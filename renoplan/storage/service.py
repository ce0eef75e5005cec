"""
Chat image storage on S3.

boto3 is synchronous, so calls run in a worker thread.
"""

import asyncio
import mimetypes
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from renoplan.storage.config import StorageSettings, get_storage_settings
from renoplan.storage.exceptions import InvalidUploadError, StorageError
from renoplan.utils.logger import logger

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}


class ImageStorageService:
    """Stores chat photos and generated renderings, hands out signed URLs."""

    def __init__(self, settings: StorageSettings | None = None, client=None):
        self.settings = settings or get_storage_settings()
        self._client = client

    @property
    def bucket(self) -> str:
        return self.settings.chat_images_bucket

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=self.settings.region,
                endpoint_url=self.settings.endpoint_url,
                aws_access_key_id=self.settings.access_key_id,
                aws_secret_access_key=self.settings.secret_access_key,
            )
            logger.info("[Storage] S3 client initialized", bucket=self.bucket)
        return self._client

    @staticmethod
    def build_key(prefix: str, content_type: str) -> str:
        """Unique object key under a prefix, with an extension matching the type."""
        extension = mimetypes.guess_extension(content_type) or ".bin"
        if extension == ".jpe":
            extension = ".jpg"
        return f"{prefix}/{uuid4().hex}{extension}"

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        """
        Store an object.

        Returns:
            str: The object key

        Raises:
            StorageError: If S3 rejects the upload
        """
        try:
            await asyncio.to_thread(
                self._get_client().put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                CacheControl="max-age=3600",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("[Storage] Upload failed", key=key, error=str(e))
            raise StorageError("Failed to save image", original_error=e) from e

        logger.info("[Storage] Uploaded object", key=key, size_bytes=len(data))
        return key

    async def create_signed_url(self, key: str, expires_in: int | None = None) -> str:
        """Presigned GET URL for an object, valid for one hour by default."""
        try:
            return await asyncio.to_thread(
                self._get_client().generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in or self.settings.signed_url_ttl_seconds,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("[Storage] Signing failed", key=key, error=str(e))
            raise StorageError("Failed to generate image URL", original_error=e) from e

    async def upload_chat_photo(
        self, user_id: str, data: bytes, content_type: str | None
    ) -> tuple[str, str]:
        """
        Validate and store a user's chat photo.

        Returns:
            tuple[str, str]: Object key and signed URL

        Raises:
            InvalidUploadError: Wrong type, empty or too large
            StorageError: If S3 fails
        """
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise InvalidUploadError(f"Unsupported image type: {content_type}")
        if not data:
            raise InvalidUploadError("Empty upload")
        if len(data) > self.settings.max_upload_bytes:
            raise InvalidUploadError("Image is too large")

        key = await self.upload(self.build_key(user_id, content_type), data, content_type)
        return key, await self.create_signed_url(key)


_storage_service: ImageStorageService | None = None


def get_storage_service() -> ImageStorageService:
    """FastAPI dependency returning the shared storage service."""
    global _storage_service
    if _storage_service is None:
        _storage_service = ImageStorageService()
    return _storage_service
