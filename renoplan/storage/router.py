"""Chat photo upload API."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel, ConfigDict, Field

from renoplan.auth.dependencies import get_session_context
from renoplan.auth.schemas import SessionContext
from renoplan.storage.exceptions import InvalidUploadError, StorageError
from renoplan.storage.service import ImageStorageService, get_storage_service
from renoplan.utils.logger import logger

router = APIRouter(prefix="/storage", tags=["Storage"])


class UploadImageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    path: str
    signed_url: str = Field(..., alias="signedUrl")


@router.post("/images", response_model=UploadImageResponse)
async def upload_image(
    file: UploadFile = File(...),
    context: SessionContext = Depends(get_session_context),
    storage: ImageStorageService = Depends(get_storage_service),
) -> UploadImageResponse:
    """Upload a photo for the chat; the signed URL is what goes into messages."""
    data = await file.read()
    try:
        path, signed_url = await storage.upload_chat_photo(
            context.user_id, data, file.content_type
        )
    except InvalidUploadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except StorageError as e:
        logger.error("Chat photo upload failed", user_id=context.user_id, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message
        )

    return UploadImageResponse(path=path, signed_url=signed_url)
