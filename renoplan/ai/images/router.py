"""FastAPI router for renovation image generation."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from renoplan.ai.gateway.client import GatewayClient, get_gateway_client
from renoplan.ai.gateway.exceptions import (
    GatewayError,
    GatewayPaymentRequiredError,
    GatewayRateLimitError,
)
from renoplan.ai.images.schemas import GenerateImageRequest, GenerateImageResponse
from renoplan.ai.images.service import ImageGenerationError, RenovationImageService
from renoplan.auth.dependencies import get_session_context
from renoplan.auth.schemas import SessionContext
from renoplan.storage.exceptions import StorageError
from renoplan.storage.service import ImageStorageService, get_storage_service
from renoplan.utils.logger import logger
from renoplan.utils.responses import error_response

router = APIRouter(prefix="/ai", tags=["AI"])


def get_image_service(
    gateway: GatewayClient = Depends(get_gateway_client),
    storage: ImageStorageService = Depends(get_storage_service),
) -> RenovationImageService:
    return RenovationImageService(gateway, storage)


@router.post("/generate-image", response_model=GenerateImageResponse)
async def generate_image(
    request: GenerateImageRequest,
    context: SessionContext = Depends(get_session_context),
    service: RenovationImageService = Depends(get_image_service),
) -> GenerateImageResponse | JSONResponse:
    """Render a renovation idea, optionally on top of the user's photo."""
    if not request.transformation_request:
        return error_response("Missing transformation request", status_code=400)

    logger.info(
        "Generate renovation image request",
        user_id=context.user_id,
        has_image=bool(request.original_image_url),
        has_context=request.project_context is not None,
        has_style_details=request.style_details is not None,
    )

    try:
        return await service.generate(request)
    except ImageGenerationError as e:
        return error_response(e.message, status_code=e.status_code)
    except (GatewayRateLimitError, GatewayPaymentRequiredError) as e:
        return error_response(e.message, status_code=e.status_code)
    except GatewayError as e:
        logger.error("Image generation failed", error=e.message, status_code=e.status_code)
        return error_response("Failed to generate image", status_code=500)
    except StorageError as e:
        return error_response(e.message, status_code=500)
