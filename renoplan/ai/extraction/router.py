"""FastAPI router for project info extraction."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from renoplan.ai.extraction.schemas import (
    ExtractProjectInfoRequest,
    ExtractProjectInfoResponse,
)
from renoplan.ai.extraction.service import ProjectExtractionService
from renoplan.ai.gateway.client import GatewayClient, get_gateway_client
from renoplan.ai.gateway.exceptions import GatewayError, GatewayNoToolCallError
from renoplan.utils.logger import logger
from renoplan.utils.responses import error_response

router = APIRouter(prefix="/ai", tags=["AI"])


def get_extraction_service(
    gateway: GatewayClient = Depends(get_gateway_client),
) -> ProjectExtractionService:
    return ProjectExtractionService(gateway)


@router.post("/extract-project-info", response_model=ExtractProjectInfoResponse)
async def extract_project_info(
    request: ExtractProjectInfoRequest,
    service: ProjectExtractionService = Depends(get_extraction_service),
) -> ExtractProjectInfoResponse | JSONResponse:
    """
    Extract structured project details from a chat transcript.

    A model answer without the function call is not an error: the body then
    carries `error` with status 200.
    """
    messages = [m.to_gateway() for m in request.messages]
    try:
        project_data = await service.extract(messages)
    except GatewayNoToolCallError:
        logger.info("No project data extracted", message_count=len(messages))
        return error_response("No project data extracted", status_code=200)
    except GatewayError as e:
        logger.error("Project extraction failed", error=e.message, status_code=e.status_code)
        return error_response("Failed to extract project data", status_code=500)

    return ExtractProjectInfoResponse(project_data=project_data)
