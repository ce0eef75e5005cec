"""
BOM generation pipeline.

Project details and the conversation transcript go to the gateway with a forced
`create_bom` function; the returned items get their totals computed here and
are stored as a draft BOM.
"""

from typing import Any

from pydantic import ValidationError

from renoplan.ai.gateway.client import GatewayClient
from renoplan.ai.gateway.exceptions import GatewayError
from renoplan.bom.constants import (
    BOM_CATEGORIES,
    BOM_ITEM_INSTRUCTIONS,
    BOM_SYSTEM_PROMPT,
    CREATE_BOM_TOOL,
)
from renoplan.bom.schemas import GeneratedBOMItem, GenerateBOMResponse
from renoplan.db.boms.repository import BOMRepository
from renoplan.db.conversations.model import Message
from renoplan.db.conversations.repository import ConversationRepository
from renoplan.db.projects.model import Project
from renoplan.utils.logger import logger


def item_total(quantity: float | None, unit_price: float | None) -> float:
    """quantity x unit price, treating missing values as 0."""
    return (quantity or 0) * (unit_price or 0)


def bom_total(items: list[GeneratedBOMItem]) -> float:
    return sum(item_total(i.quantity, i.estimated_unit_price) for i in items)


def _joined(values: list[str] | None) -> str:
    return ", ".join(values) if values else "Not specified"


def build_bom_prompt(project: Project, transcript: list[Message]) -> str:
    conversation = "\n".join(f"{m.role}: {m.content}" for m in transcript)
    budget = project.budget if project.budget else "Not specified"

    project_context = (
        f"Project: {project.name}\n"
        f"Description: {project.description or 'N/A'}\n"
        f"Budget: {budget}\n"
        f"Style: {_joined(project.style_preferences)}\n"
        f"Materials: {_joined(project.materials_mentioned)}\n"
        f"Features: {_joined(project.key_features)}"
    )
    source = "conversation and details" if conversation else "details"
    conversation_block = f"Conversation:\n{conversation}\n" if conversation else ""
    categories = ", ".join(BOM_CATEGORIES[:-1]) + f", and {BOM_CATEGORIES[-1]}"

    return (
        f"Based on the following renovation project {source}, "
        "generate a detailed Bill of Materials (BOM).\n\n"
        f"{project_context}\n\n"
        f"{conversation_block}\n"
        f"Generate a comprehensive BOM with items categorized by: {categories}.\n\n"
        f"{BOM_ITEM_INSTRUCTIONS}"
    )


def parse_items(arguments: dict[str, Any]) -> list[GeneratedBOMItem]:
    """Validate the function arguments; malformed items are dropped."""
    raw_items = arguments.get("items")
    if not isinstance(raw_items, list):
        raise GatewayError("create_bom call has no items list")

    items: list[GeneratedBOMItem] = []
    for raw in raw_items:
        try:
            items.append(GeneratedBOMItem.model_validate(raw))
        except ValidationError as e:
            logger.warning("Dropping invalid BOM item", item=raw, error=str(e))
    return items


class BOMGenerationService:
    def __init__(
        self,
        gateway: GatewayClient,
        boms: BOMRepository,
        conversations: ConversationRepository,
    ):
        self.gateway = gateway
        self.boms = boms
        self.conversations = conversations

    async def generate(
        self, project: Project, conversation_id: str | None = None
    ) -> GenerateBOMResponse:
        """
        Generate and store a draft BOM for a project the caller owns.

        Raises:
            GatewayError: Gateway failure or no create_bom call
        """
        transcript = (
            await self.conversations.get_transcript(conversation_id) if conversation_id else []
        )
        logger.info(
            "Generating BOM",
            project_id=project.id,
            conversation_id=conversation_id,
            message_count=len(transcript),
        )

        arguments = await self.gateway.call_function(
            model=self.gateway.settings.text_model,
            messages=[
                {"role": "system", "content": BOM_SYSTEM_PROMPT},
                {"role": "user", "content": build_bom_prompt(project, transcript)},
            ],
            tool=CREATE_BOM_TOOL,
        )
        items = parse_items(arguments)
        total = bom_total(items)

        bom = await self.boms.create_bom(
            project_id=project.id,
            conversation_id=conversation_id,
            total_estimated_cost=total,
            items=[
                {
                    "category": item.category,
                    "item_name": item.item_name,
                    "description": item.description or None,
                    "quantity": item.quantity or 0,
                    "unit": item.unit,
                    "estimated_unit_price": item.estimated_unit_price or None,
                    "estimated_total_price": item_total(
                        item.quantity, item.estimated_unit_price
                    ),
                    "priority": item.priority.value,
                    "notes": item.notes or None,
                }
                for item in items
            ],
        )

        return GenerateBOMResponse(bom_id=bom.id, total_cost=total, item_count=len(items))
