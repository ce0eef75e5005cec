"""
Renovation chat service.

Builds the system prompt for a chat turn (who is asking, whether photos are
attached, what is known about the project) and opens the streaming completion
on the AI gateway.
"""

from datetime import datetime

import httpx

from renoplan.ai.base import ChatMessage
from renoplan.ai.chat import prompts
from renoplan.ai.gateway.client import GatewayClient
from renoplan.auth.schemas import SessionContext
from renoplan.db.conversations.model import Conversation
from renoplan.db.conversations.repository import ConversationRepository
from renoplan.db.projects.model import Project
from renoplan.db.projects.repository import ProjectRepository
from renoplan.utils.logger import logger

PREVIOUS_CONVERSATION_LIMIT = 3


def _number(value: float | int) -> str:
    """Render 25000.0 as 25000 and 12.5 as 12.5."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _date(value: datetime) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def has_images(messages: list[ChatMessage]) -> bool:
    return any(m.image_url for m in messages)


def build_base_prompt(authenticated: bool, with_images: bool) -> str:
    if not authenticated:
        return prompts.ANONYMOUS_PROMPT.format(
            language_policy=prompts.ANONYMOUS_LANGUAGE_POLICY
        )
    return prompts.AUTHENTICATED_PROMPT.format(
        language_policy=prompts.LANGUAGE_POLICY,
        visual_analysis=prompts.VISUAL_ANALYSIS if with_images else "",
    )


def build_project_context(project: Project, previous: list[Conversation]) -> str:
    """Prompt section describing a project and its earlier conversations."""
    budget = f"${_number(project.budget)}" if project.budget else "Not set"
    if project.start_date:
        timeline = f"{project.start_date.isoformat()} to " + (
            project.end_date.isoformat() if project.end_date else "TBD"
        )
    else:
        timeline = "Not set"

    section = (
        "\n\nCURRENT PROJECT CONTEXT:"
        f"\n- Project Name: {project.name}"
        f"\n- Description: {project.description or 'Not provided'}"
        f"\n- Current Phase: {project.phase or 'Planning'}"
        f"\n- Status: {project.status}"
        f"\n- Budget: {budget}"
        f"\n- Timeline: {timeline}"
    )

    extracted = project.ai_extracted_data
    if extracted:
        section += "\n\nPREVIOUSLY EXTRACTED PROJECT DETAILS:"
        if extracted.get("budget_estimate"):
            section += f"\n- Estimated Budget: ${_number(extracted['budget_estimate'])}"
        if extracted.get("timeline_weeks"):
            section += f"\n- Estimated Timeline: {_number(extracted['timeline_weeks'])} weeks"
        for key, label in (
            ("key_features", "Key Features"),
            ("materials_mentioned", "Materials Mentioned"),
            ("style_preferences", "Style Preferences"),
        ):
            values = extracted.get(key)
            if values:
                section += f"\n- {label}: {', '.join(values)}"

    if previous:
        section += "\n\nPREVIOUS PROJECT CONVERSATIONS:"
        for conversation in previous:
            section += (
                f"\n- [{_date(conversation.updated_at)}] "
                f"{conversation.title or 'Untitled conversation'}"
            )
            if conversation.summary:
                section += f"\n  Summary: {conversation.summary}"
        section += f"\n\n{prompts.PREVIOUS_CONVERSATIONS_NOTE}"

    section += f"\n\n{prompts.PROJECT_GUIDANCE}"
    return section


class RenovationChatService:
    """Service for streaming renovation chat through the AI gateway."""

    def __init__(
        self,
        gateway: GatewayClient,
        projects: ProjectRepository,
        conversations: ConversationRepository,
    ):
        self.gateway = gateway
        self.projects = projects
        self.conversations = conversations

    def select_model(self, messages: list[ChatMessage]) -> str:
        """Vision model when any message carries a photo, text model otherwise."""
        settings = self.gateway.settings
        return settings.vision_model if has_images(messages) else settings.text_model

    async def build_system_prompt(
        self,
        messages: list[ChatMessage],
        context: SessionContext | None,
        project_id: str | None = None,
        conversation_id: str | None = None,
    ) -> str:
        """
        Assemble the system prompt for one chat turn.

        Project context is only added for the project's owner.
        """
        prompt = build_base_prompt(context is not None, has_images(messages))
        if not (context and project_id):
            return prompt

        project = await self.projects.get_project(project_id, context.user_id)
        if not project:
            logger.warning(
                "Chat project not found for user",
                project_id=project_id,
                user_id=context.user_id,
            )
            return prompt

        previous = await self.conversations.list_recent_for_project(
            project_id,
            exclude_conversation_id=conversation_id,
            limit=PREVIOUS_CONVERSATION_LIMIT,
        )
        return prompt + build_project_context(project, previous)

    async def open_stream(
        self,
        messages: list[ChatMessage],
        context: SessionContext | None,
        project_id: str | None = None,
        conversation_id: str | None = None,
    ) -> httpx.Response:
        """
        Start the gateway stream for a chat turn.

        Returns:
            httpx.Response: Open streaming response; the caller closes it

        Raises:
            GatewayError: If the gateway refuses the request
        """
        system_prompt = await self.build_system_prompt(
            messages, context, project_id, conversation_id
        )
        model = self.select_model(messages)

        logger.info(
            "Calling AI gateway",
            model=model,
            message_count=len(messages),
            authenticated=context is not None,
        )
        return await self.gateway.open_chat_stream(
            model,
            [{"role": "system", "content": system_prompt}, *(m.to_gateway() for m in messages)],
        )
