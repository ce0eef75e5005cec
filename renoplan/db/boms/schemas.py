"""
Pydantic schemas for bills of materials, BOM items, product matches and the
shopping list.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BOMStatus(str, Enum):
    """Review status of a bill of materials."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"


class ItemPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BOMItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    bom_id: str
    category: str
    item_name: str
    description: str | None = None
    quantity: float
    unit: str
    estimated_unit_price: float | None = None
    estimated_total_price: float
    priority: ItemPriority
    notes: str | None = None
    created_at: datetime


class BOMResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    conversation_id: str | None = None
    total_estimated_cost: float
    status: BOMStatus
    created_at: datetime
    updated_at: datetime


class BOMListResponse(BaseModel):
    boms: list[BOMResponse]
    total: int


class BOMDetailResponse(BaseModel):
    """A BOM with its items, also grouped by category for review screens."""

    bom: BOMResponse
    items: list[BOMItemResponse]
    items_by_category: dict[str, list[BOMItemResponse]]


class UpdateBOMStatusRequest(BaseModel):
    status: BOMStatus


class BOMStatsResponse(BaseModel):
    """Per-project BOM counters."""

    bom_count: int
    item_count: int
    shopping_list_count: int
    total_estimated_cost: float


class ProductMatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    bom_item_id: str
    vendor: str
    product_name: str
    product_url: str
    image_url: str | None = None
    price: float | None = None
    in_stock: bool
    match_score: float
    is_selected: bool
    product_details: dict[str, Any] | None = None
    created_at: datetime


class ProductMatchListResponse(BaseModel):
    matches: list[ProductMatchResponse]
    total: int


class ShoppingListEntry(BaseModel):
    """A selected product together with the BOM item it was chosen for."""

    match: ProductMatchResponse
    item_name: str
    category: str
    quantity: float
    unit: str
    line_total: float | None = Field(
        None, description="price x quantity when the product has a price"
    )


class ShoppingListResponse(BaseModel):
    bom_id: str
    entries: list[ShoppingListEntry]
    total: int
    estimated_total: float
