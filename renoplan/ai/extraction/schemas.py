"""Request/response models for project info extraction."""

from pydantic import BaseModel, ConfigDict, Field

from renoplan.ai.base import ChatMessage
from renoplan.db.projects.schemas import ExtractedProjectData


class ExtractProjectInfoRequest(BaseModel):
    messages: list[ChatMessage] = Field(..., min_length=1)


class ExtractProjectInfoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_data: ExtractedProjectData = Field(..., alias="projectData")
