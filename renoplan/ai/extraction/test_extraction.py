"""
Tests for project info extraction: the endpoint and the conversation sync.
"""

import pytest

from renoplan.ai.extraction.service import ProjectExtractionService, build_extraction_tool
from renoplan.ai.gateway.exceptions import GatewayNoToolCallError, GatewayRateLimitError
from renoplan.db.conversations.repository import ConversationRepository
from renoplan.db.projects.repository import ProjectRepository

TRANSCRIPT = {
    "messages": [
        {"role": "user", "content": "I want a farmhouse kitchen for about $30k"},
        {"role": "assistant", "content": "Great, shaker cabinets and butcher block?"},
    ]
}


def test_background_tool_leaves_out_identity():
    properties = build_extraction_tool(include_identity=False)["function"]["parameters"][
        "properties"
    ]

    assert "name" not in properties
    assert "description" not in properties
    assert "budget_estimate" in properties


class TestExtractEndpoint:
    @pytest.mark.asyncio
    async def test_returns_project_data(self, client, gateway):
        gateway.call_function.return_value = {
            "name": "Farmhouse kitchen",
            "budget_estimate": 30000,
            "style_preferences": ["farmhouse"],
        }

        response = await client.post("/api/ai/extract-project-info", json=TRANSCRIPT)

        assert response.status_code == 200
        data = response.json()["projectData"]
        assert data["name"] == "Farmhouse kitchen"
        assert data["budget_estimate"] == 30000
        assert data["style_preferences"] == ["farmhouse"]
        tool = gateway.call_function.call_args.kwargs["tool"]
        assert tool["function"]["name"] == "extract_project_data"

    @pytest.mark.asyncio
    async def test_no_function_call_is_not_a_failure(self, client, gateway):
        gateway.call_function.side_effect = GatewayNoToolCallError("no call")

        response = await client.post("/api/ai/extract-project-info", json=TRANSCRIPT)

        assert response.status_code == 200
        assert response.json() == {"error": "No project data extracted"}

    @pytest.mark.asyncio
    async def test_gateway_failure(self, client, gateway):
        gateway.call_function.side_effect = GatewayRateLimitError()

        response = await client.post("/api/ai/extract-project-info", json=TRANSCRIPT)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to extract project data"}


class TestConversationSync:
    @pytest.mark.asyncio
    async def test_updates_ai_fields_only(self, db_session, gateway):
        projects = ProjectRepository(db_session)
        conversations = ConversationRepository(db_session)
        project = await projects.create_project("user-123", "Kitchen", description="Mine")
        conversation = await conversations.create_conversation("user-123", project_id=project.id)
        await conversations.create_message(conversation.id, "user-123", "user", "Budget 30k")
        gateway.call_function.return_value = {
            "budget_estimate": 30000,
            "timeline_weeks": 6.4,
            "materials_mentioned": ["oak"],
        }

        updated = await ProjectExtractionService(gateway).sync_project_from_conversation(
            projects, conversations, project.id, conversation.id
        )
        await db_session.commit()
        await db_session.refresh(project)

        assert updated is True
        assert project.name == "Kitchen"
        assert project.description == "Mine"
        assert project.budget_estimate == 30000
        assert project.timeline_weeks == 6
        assert project.materials_mentioned == ["oak"]
        assert project.ai_extracted_data["timeline_weeks"] == 6.4
        assert project.last_chat_update is not None

    @pytest.mark.asyncio
    async def test_empty_conversation_is_skipped(self, db_session, gateway):
        projects = ProjectRepository(db_session)
        conversations = ConversationRepository(db_session)
        project = await projects.create_project("user-123", "Kitchen")
        conversation = await conversations.create_conversation("user-123", project_id=project.id)

        updated = await ProjectExtractionService(gateway).sync_project_from_conversation(
            projects, conversations, project.id, conversation.id
        )

        assert updated is False
        gateway.call_function.assert_not_called()
