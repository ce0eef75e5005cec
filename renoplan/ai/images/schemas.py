"""Request/response models for renovation image generation."""

from pydantic import BaseModel, ConfigDict, Field


class ProjectContext(BaseModel):
    name: str | None = None
    budget: float | None = None
    style_preferences: list[str] | None = None


class StyleDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    space_type: str | None = Field(None, alias="spaceType")
    style: str | None = None
    colors: list[str] | None = None
    features: list[str] | None = None


class GenerateImageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transformation_request: str | None = Field(None, alias="transformationRequest")
    original_image_url: str | None = Field(None, alias="originalImageUrl")
    project_context: ProjectContext | None = Field(None, alias="projectContext")
    style_details: StyleDetails | None = Field(None, alias="styleDetails")


class GenerateImageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    generated_image_url: str = Field(..., alias="generatedImageUrl")
    original_image_url: str | None = Field(None, alias="originalImageUrl")
