"""
Project info extraction.

Turns a chat transcript into structured project details through a forced
`extract_project_data` function call, and keeps a project's AI fields in sync
with its conversations in the background.
"""

import asyncio
from typing import Any

from pydantic import ValidationError

from renoplan.ai.gateway.client import GatewayClient
from renoplan.ai.gateway.exceptions import GatewayError
from renoplan.db.conversations.repository import ConversationRepository
from renoplan.db.projects.repository import ProjectRepository
from renoplan.db.projects.schemas import ExtractedProjectData
from renoplan.utils.logger import logger

EXTRACTION_SYSTEM_PROMPT = (
    "You are a project data extraction assistant. "
    "Extract structured project information from the conversation."
)

EXTRACT_FUNCTION_NAME = "extract_project_data"


def _string_list(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def build_extraction_tool(include_identity: bool = True) -> dict[str, Any]:
    """
    Function definition for project extraction.

    Args:
        include_identity: Also ask for a project name and description. The
            background sync leaves those to the user.
    """
    properties: dict[str, Any] = {}
    if include_identity:
        properties["name"] = {"type": "string", "description": "Project name/title"}
        properties["description"] = {"type": "string", "description": "Detailed description"}
    properties.update(
        {
            "budget_estimate": {"type": "number", "description": "Estimated budget in USD"},
            "timeline_weeks": {"type": "number", "description": "Estimated timeline in weeks"},
            "key_features": _string_list("Key features/requirements mentioned"),
            "materials_mentioned": _string_list("Materials or products discussed"),
            "style_preferences": _string_list("Design styles mentioned (modern, rustic, etc.)"),
        }
    )
    return {
        "type": "function",
        "function": {
            "name": EXTRACT_FUNCTION_NAME,
            "description": "Extract structured project information from conversation",
            "parameters": {"type": "object", "properties": properties},
        },
    }


class ProjectExtractionService:
    """Extracts structured project details from conversations."""

    def __init__(self, gateway: GatewayClient):
        self.gateway = gateway

    async def extract(
        self, messages: list[dict[str, Any]], include_identity: bool = True
    ) -> ExtractedProjectData:
        """
        Extract project details from chat-completions formatted messages.

        Raises:
            GatewayNoToolCallError: If the model returned no function call
            GatewayError: For gateway failures or unusable arguments
        """
        logger.info("Extracting project info", message_count=len(messages))
        arguments = await self.gateway.call_function(
            model=self.gateway.settings.text_model,
            messages=[{"role": "system", "content": EXTRACTION_SYSTEM_PROMPT}, *messages],
            tool=build_extraction_tool(include_identity),
        )
        try:
            return ExtractedProjectData.model_validate(arguments)
        except ValidationError as e:
            raise GatewayError(f"Invalid project data: {e}", original_error=e) from e

    async def sync_project_from_conversation(
        self,
        projects: ProjectRepository,
        conversations: ConversationRepository,
        project_id: str,
        conversation_id: str,
    ) -> bool:
        """
        Re-extract a project's AI fields from a stored conversation.

        Returns:
            bool: True if the project was updated
        """
        transcript = await conversations.get_transcript(conversation_id)
        if not transcript:
            logger.info(
                "No messages found for extraction", conversation_id=conversation_id
            )
            return False

        extracted = await self.extract(
            [{"role": m.role, "content": m.content} for m in transcript],
            include_identity=False,
        )
        updated = await projects.apply_extracted_data(project_id, extracted)
        logger.info(
            "Project data updated from conversation",
            project_id=project_id,
            conversation_id=conversation_id,
            updated=updated,
        )
        return updated


# Strong references so pending tasks are not garbage collected
_background_tasks: set[asyncio.Task] = set()


async def _run_background_sync(
    gateway: GatewayClient, project_id: str, conversation_id: str
) -> None:
    # Import here to avoid circular dependencies
    from renoplan.db.database import get_async_session_local

    # The request session is closed by the time this runs
    session_factory = get_async_session_local()
    try:
        async with session_factory() as session:
            service = ProjectExtractionService(gateway)
            await service.sync_project_from_conversation(
                ProjectRepository(session),
                ConversationRepository(session),
                project_id,
                conversation_id,
            )
            await session.commit()
    except Exception as e:
        logger.error(
            "Background project extraction failed",
            project_id=project_id,
            conversation_id=conversation_id,
            error=str(e),
            error_type=type(e).__name__,
        )


def schedule_project_sync(
    gateway: GatewayClient, project_id: str, conversation_id: str
) -> asyncio.Task:
    """Start a fire-and-forget project sync; failures are only logged."""
    task = asyncio.create_task(_run_background_sync(gateway, project_id, conversation_id))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    logger.info(
        "Started background project extraction",
        project_id=project_id,
        conversation_id=conversation_id,
    )
    return task
