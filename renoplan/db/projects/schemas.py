"""
Pydantic schemas for project operations.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    PLANNING = "planning"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"


class CreateProjectRequest(BaseModel):
    """Quick-create: a name is enough, the AI fills in the rest through chat."""

    name: str = Field(..., min_length=1, description="Project name")
    description: str = Field("", description="Free-form description")
    budget: float | None = Field(None, ge=0, description="Budget in USD")


class UpdateProjectRequest(BaseModel):
    """Partial update of user-editable project fields."""

    name: str | None = Field(None, min_length=1)
    description: str | None = None
    budget: float | None = Field(None, ge=0)
    phase: str | None = None
    status: ProjectStatus | None = None
    start_date: date | None = None
    end_date: date | None = None


class ExtractedProjectData(BaseModel):
    """Project details extracted by the AI from a conversation."""

    name: str | None = None
    description: str | None = None
    budget_estimate: float | None = None
    timeline_weeks: float | None = None
    key_features: list[str] | None = None
    materials_mentioned: list[str] | None = None
    style_preferences: list[str] | None = None


class ProjectResponse(BaseModel):
    """Response model for a single project."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: str
    budget: float | None = None
    phase: str | None = None
    status: ProjectStatus
    start_date: date | None = None
    end_date: date | None = None
    ai_extracted_data: dict[str, Any] | None = None
    budget_estimate: float | None = None
    timeline_weeks: int | None = None
    key_features: list[str] | None = None
    materials_mentioned: list[str] | None = None
    style_preferences: list[str] | None = None
    last_chat_update: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]
    total: int


class ProjectStatsResponse(BaseModel):
    """Dashboard counters by status."""

    total: int
    planning: int
    in_progress: int
    completed: int
