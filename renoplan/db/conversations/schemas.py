"""
Pydantic schemas for conversation and message operations.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    """Roles a stored message can have."""

    USER = "user"
    ASSISTANT = "assistant"


# ========== Conversation Schemas ==========


class CreateConversationRequest(BaseModel):
    """Request model for creating a conversation."""

    title: str = Field("New conversation", description="Conversation title")
    project_id: str | None = Field(None, description="Project the chat belongs to")


class UpdateConversationRequest(BaseModel):
    """Request model for updating title and/or summary."""

    title: str | None = Field(None, min_length=1, description="New title")
    summary: str | None = Field(None, description="New summary")


class ConversationResponse(BaseModel):
    """Response model for a single conversation."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    project_id: str | None = None
    title: str
    summary: str | None = None
    created_at: datetime
    updated_at: datetime


class ConversationListResponse(BaseModel):
    """Response model for a list of conversations."""

    conversations: list[ConversationResponse]
    total: int


# ========== Message Schemas ==========


class CreateMessageRequest(BaseModel):
    """Request model for appending a message."""

    role: MessageRole = Field(..., description="Message role: user or assistant")
    content: str = Field("", description="Message text")
    image_url: str | None = Field(None, description="Attached photo URL")


class MessageResponse(BaseModel):
    """Response model for a single message."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    conversation_id: str
    role: MessageRole
    content: str
    image_url: str | None = None
    created_at: datetime


class MessageListResponse(BaseModel):
    """Response model for a list of messages."""

    messages: list[MessageResponse]
    total: int
