"""
Pydantic schemas for vendor administration.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateVendorRequest(BaseModel):
    name: str = Field(..., min_length=1)
    website_url: str = Field(..., min_length=1)
    search_url_template: str = Field(
        ..., description="Search page URL containing a {query} placeholder"
    )
    logo_url: str | None = None
    is_active: bool = True
    priority: int = 0

    @field_validator("search_url_template")
    @classmethod
    def must_contain_query(cls, value: str) -> str:
        if "{query}" not in value:
            raise ValueError("search_url_template must contain {query}")
        return value


class UpdateVendorRequest(BaseModel):
    name: str | None = Field(None, min_length=1)
    website_url: str | None = None
    search_url_template: str | None = None
    logo_url: str | None = None
    is_active: bool | None = None
    priority: int | None = None

    @field_validator("search_url_template")
    @classmethod
    def must_contain_query(cls, value: str | None) -> str | None:
        if value is not None and "{query}" not in value:
            raise ValueError("search_url_template must contain {query}")
        return value


class VendorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    website_url: str
    search_url_template: str
    logo_url: str | None = None
    is_active: bool
    priority: int
    created_at: datetime
    updated_at: datetime


class VendorListResponse(BaseModel):
    vendors: list[VendorResponse]
    total: int
