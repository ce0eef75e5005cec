"""FastAPI router for BOM generation."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from renoplan.ai.gateway.client import GatewayClient, get_gateway_client
from renoplan.ai.gateway.exceptions import GatewayError
from renoplan.auth.dependencies import get_session_context
from renoplan.auth.schemas import SessionContext
from renoplan.bom.schemas import GenerateBOMRequest, GenerateBOMResponse
from renoplan.bom.service import BOMGenerationService
from renoplan.db.boms.repository import BOMRepository
from renoplan.db.conversations.repository import ConversationRepository
from renoplan.db.dependencies import (
    get_bom_repository,
    get_conversation_repository,
    get_project_repository,
)
from renoplan.db.projects.repository import ProjectRepository
from renoplan.utils.logger import logger
from renoplan.utils.responses import error_response

router = APIRouter(prefix="/boms", tags=["BOMs"])


def get_bom_generation_service(
    gateway: GatewayClient = Depends(get_gateway_client),
    boms: BOMRepository = Depends(get_bom_repository),
    conversations: ConversationRepository = Depends(get_conversation_repository),
) -> BOMGenerationService:
    return BOMGenerationService(gateway, boms, conversations)


@router.post("/generate", response_model=GenerateBOMResponse)
async def generate_bom(
    request: GenerateBOMRequest,
    context: SessionContext = Depends(get_session_context),
    projects: ProjectRepository = Depends(get_project_repository),
    conversations: ConversationRepository = Depends(get_conversation_repository),
    service: BOMGenerationService = Depends(get_bom_generation_service),
) -> GenerateBOMResponse | JSONResponse:
    """Generate a draft bill of materials from a project and, optionally, a conversation."""
    if not request.project_id:
        return error_response("projectId is required", status_code=400)

    project = await projects.get_project(request.project_id, context.user_id)
    if not project:
        return error_response("Project not found", status_code=404)

    if request.conversation_id and not await conversations.get_conversation(
        request.conversation_id, context.user_id
    ):
        return error_response("Conversation not found", status_code=404)

    try:
        return await service.generate(project, request.conversation_id)
    except GatewayError as e:
        await projects.session.rollback()
        logger.error(
            "Error generating BOM",
            project_id=request.project_id,
            error=e.message,
            status_code=e.status_code,
        )
        return error_response(e.message, status_code=500)
