"""Request/response models for BOM generation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from renoplan.db.boms.schemas import ItemPriority


class GenerateBOMRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional here so a missing id is answered with the function-style 400
    project_id: str | None = Field(None, alias="projectId")
    conversation_id: str | None = Field(None, alias="conversationId")


class GenerateBOMResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    bom_id: str = Field(..., alias="bomId")
    total_cost: float = Field(..., alias="totalCost")
    item_count: int = Field(..., alias="itemCount")


class GeneratedBOMItem(BaseModel):
    """One item as returned by the `create_bom` function."""

    category: str = Field(..., min_length=1)
    item_name: str = Field(..., min_length=1)
    description: str | None = None
    quantity: float | None = None
    unit: str
    estimated_unit_price: float | None = None
    priority: ItemPriority = ItemPriority.MEDIUM
    notes: str | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def default_priority(cls, value: object) -> object:
        if value not in {p.value for p in ItemPriority}:
            return ItemPriority.MEDIUM
        return value
