"""
Conversation router with endpoints for chat conversations and their messages.
"""

from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException

from renoplan.auth.dependencies import get_session_context
from renoplan.auth.schemas import SessionContext
from renoplan.db.conversations.repository import ConversationRepository
from renoplan.db.conversations.schemas import (
    ConversationListResponse,
    ConversationResponse,
    CreateConversationRequest,
    CreateMessageRequest,
    MessageListResponse,
    MessageResponse,
    UpdateConversationRequest,
)
from renoplan.db.dependencies import get_conversation_repository, get_project_repository
from renoplan.db.projects.repository import ProjectRepository
from renoplan.utils.logger import logger

router = APIRouter(prefix="/conversations", tags=["Conversations"])


def _not_found(conversation_id: str) -> HTTPException:
    return HTTPException(
        status_code=HTTPStatus.NOT_FOUND,
        detail=f"Conversation {conversation_id} not found",
    )


# ========== Conversation Operations ==========


@router.post("", response_model=ConversationResponse, status_code=HTTPStatus.CREATED)
async def create_conversation(
    request: CreateConversationRequest,
    context: SessionContext = Depends(get_session_context),
    conversation_repository: ConversationRepository = Depends(get_conversation_repository),
    project_repository: ProjectRepository = Depends(get_project_repository),
) -> ConversationResponse:
    """
    Create a conversation, optionally attached to one of the caller's projects.

    Raises:
        HTTPException: 404 if the project is not the caller's
    """
    try:
        if request.project_id and not await project_repository.get_project(
            request.project_id, context.user_id
        ):
            raise HTTPException(
                status_code=HTTPStatus.NOT_FOUND,
                detail=f"Project {request.project_id} not found",
            )

        conversation = await conversation_repository.create_conversation(
            user_id=context.user_id,
            title=request.title,
            project_id=request.project_id,
        )
        await conversation_repository.session.commit()

        return ConversationResponse.model_validate(conversation)

    except HTTPException:
        raise
    except Exception as e:
        await conversation_repository.session.rollback()
        logger.error("Failed to create conversation", error=str(e))
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to create conversation: {str(e)}",
        )


@router.get("", response_model=ConversationListResponse)
async def list_conversations(
    project_id: str | None = None,
    context: SessionContext = Depends(get_session_context),
    conversation_repository: ConversationRepository = Depends(get_conversation_repository),
) -> ConversationListResponse:
    """List the caller's conversations, most recently active first."""
    try:
        conversations = await conversation_repository.list_conversations(
            user_id=context.user_id, project_id=project_id
        )
        return ConversationListResponse(
            conversations=[ConversationResponse.model_validate(c) for c in conversations],
            total=len(conversations),
        )

    except Exception as e:
        logger.error("Failed to list conversations", error=str(e))
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to list conversations: {str(e)}",
        )


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: str,
    context: SessionContext = Depends(get_session_context),
    conversation_repository: ConversationRepository = Depends(get_conversation_repository),
) -> ConversationResponse:
    conversation = await conversation_repository.get_conversation(
        conversation_id, context.user_id
    )
    if not conversation:
        raise _not_found(conversation_id)
    return ConversationResponse.model_validate(conversation)


@router.patch("/{conversation_id}", response_model=ConversationResponse)
async def update_conversation(
    conversation_id: str,
    request: UpdateConversationRequest,
    context: SessionContext = Depends(get_session_context),
    conversation_repository: ConversationRepository = Depends(get_conversation_repository),
) -> ConversationResponse:
    """
    Update a conversation's title and/or summary.

    Raises:
        HTTPException: If conversation not found or an error occurs
    """
    try:
        conversation = await conversation_repository.update_conversation(
            conversation_id=conversation_id,
            user_id=context.user_id,
            title=request.title,
            summary=request.summary,
        )
        if not conversation:
            raise _not_found(conversation_id)

        await conversation_repository.session.commit()
        return ConversationResponse.model_validate(conversation)

    except HTTPException:
        raise
    except Exception as e:
        await conversation_repository.session.rollback()
        logger.error(
            "Failed to update conversation", error=str(e), conversation_id=conversation_id
        )
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to update conversation: {str(e)}",
        )


@router.delete("/{conversation_id}", status_code=HTTPStatus.NO_CONTENT)
async def delete_conversation(
    conversation_id: str,
    context: SessionContext = Depends(get_session_context),
    conversation_repository: ConversationRepository = Depends(get_conversation_repository),
) -> None:
    """
    Delete a conversation and all its messages.

    Raises:
        HTTPException: If conversation not found or an error occurs
    """
    try:
        deleted = await conversation_repository.delete_conversation(
            conversation_id, context.user_id
        )
        if not deleted:
            raise _not_found(conversation_id)

        await conversation_repository.session.commit()

    except HTTPException:
        raise
    except Exception as e:
        await conversation_repository.session.rollback()
        logger.error(
            "Failed to delete conversation", error=str(e), conversation_id=conversation_id
        )
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete conversation: {str(e)}",
        )


# ========== Message Operations ==========


@router.get("/{conversation_id}/messages", response_model=MessageListResponse)
async def list_messages(
    conversation_id: str,
    context: SessionContext = Depends(get_session_context),
    conversation_repository: ConversationRepository = Depends(get_conversation_repository),
) -> MessageListResponse:
    """List a conversation's messages in creation order."""
    conversation = await conversation_repository.get_conversation(
        conversation_id, context.user_id
    )
    if not conversation:
        raise _not_found(conversation_id)

    messages = await conversation_repository.get_transcript(conversation_id)
    return MessageListResponse(
        messages=[MessageResponse.model_validate(m) for m in messages],
        total=len(messages),
    )


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=HTTPStatus.CREATED,
)
async def create_message(
    conversation_id: str,
    request: CreateMessageRequest,
    context: SessionContext = Depends(get_session_context),
    conversation_repository: ConversationRepository = Depends(get_conversation_repository),
) -> MessageResponse:
    """
    Append a message to a conversation.

    Raises:
        HTTPException: If conversation not found or an error occurs
    """
    try:
        message = await conversation_repository.create_message(
            conversation_id=conversation_id,
            user_id=context.user_id,
            role=request.role.value,
            content=request.content,
            image_url=request.image_url,
        )
        if not message:
            raise _not_found(conversation_id)

        await conversation_repository.session.commit()
        return MessageResponse.model_validate(message)

    except HTTPException:
        raise
    except Exception as e:
        await conversation_repository.session.rollback()
        logger.error(
            "Failed to create message", error=str(e), conversation_id=conversation_id
        )
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to create message: {str(e)}",
        )
