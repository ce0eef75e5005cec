"""FastAPI router for the renovation chat SSE relay."""

import json
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field

from renoplan.ai.base import ChatMessage, SSEEvent
from renoplan.ai.chat.service import RenovationChatService
from renoplan.ai.extraction.service import schedule_project_sync
from renoplan.ai.gateway.client import GatewayClient, get_gateway_client
from renoplan.ai.gateway.exceptions import (
    GatewayBadRequestError,
    GatewayError,
    GatewayPaymentRequiredError,
    GatewayRateLimitError,
)
from renoplan.ai.sse import SSEDecoder
from renoplan.auth.dependencies import get_optional_session_context
from renoplan.auth.schemas import SessionContext
from renoplan.db.conversations.repository import ConversationRepository
from renoplan.db.dependencies import get_conversation_repository, get_project_repository
from renoplan.db.projects.repository import ProjectRepository
from renoplan.utils.logger import logger
from renoplan.utils.responses import error_response

router = APIRouter(prefix="/ai", tags=["AI"])

GATEWAY_ERROR = "AI gateway error"


class ChatRequest(BaseModel):
    """Chat request with message history."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage] = Field(..., min_length=1)
    project_id: str | None = Field(None, alias="projectId")
    conversation_id: str | None = Field(None, alias="conversationId")
    is_anonymous: bool = Field(False, alias="isAnonymous")


def get_chat_service(
    gateway: GatewayClient = Depends(get_gateway_client),
    projects: ProjectRepository = Depends(get_project_repository),
    conversations: ConversationRepository = Depends(get_conversation_repository),
) -> RenovationChatService:
    return RenovationChatService(gateway, projects, conversations)


@router.post("/chat", response_model=None)
async def stream_chat(
    request: ChatRequest,
    context: Annotated[SessionContext | None, Depends(get_optional_session_context)],
    chat_service: Annotated[RenovationChatService, Depends(get_chat_service)],
    gateway: Annotated[GatewayClient, Depends(get_gateway_client)],
) -> StreamingResponse | JSONResponse:
    """
    Relay a chat completion stream from the AI gateway as Server-Sent Events.

    The gateway's decoded bytes are forwarded as they arrive. Anonymous callers get the
    sign-up oriented prompt and no project context.
    """
    user_id = context.user_id if context else None
    logger.info(
        "Chat request",
        user_id=user_id,
        anonymous=context is None,
        message_count=len(request.messages),
        project_id=request.project_id,
    )

    try:
        upstream = await chat_service.open_stream(
            request.messages,
            context,
            project_id=request.project_id,
            conversation_id=request.conversation_id,
        )
    except (GatewayRateLimitError, GatewayPaymentRequiredError, GatewayBadRequestError) as e:
        return error_response(e.message, status_code=e.status_code)
    except GatewayError as e:
        logger.error("AI gateway error", error=e.message, status_code=e.status_code)
        return error_response(GATEWAY_ERROR, status_code=500)

    if context and request.project_id and request.conversation_id:
        schedule_project_sync(gateway, request.project_id, request.conversation_id)

    async def relay():
        # Tap the stream to log what the assistant said
        decoder = SSEDecoder()
        try:
            async for chunk in upstream.aiter_bytes():
                decoder.feed(chunk)
                yield chunk
            decoder.flush()

            if decoder.text:
                logger.info("[AGENT_OUTPUT]", user_id=user_id, output=decoder.text)
        except httpx.HTTPError as e:
            logger.error(
                "Error in chat stream", error=str(e), error_type=type(e).__name__
            )
            yield SSEEvent(event="error", data=json.dumps({"error": GATEWAY_ERROR})).format()
        finally:
            await upstream.aclose()

    return StreamingResponse(
        relay(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )
