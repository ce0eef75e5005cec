"""
Auth-specific Pydantic schemas.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """User information."""

    id: str = Field(..., description="User's unique identifier")
    email: str | None = Field(None, description="User's email address")
    name: str | None = Field(None, description="User's full name")
    created_at: datetime | None = Field(None, description="User creation timestamp")


class Session(BaseModel):
    """A validated access token and the user it belongs to."""

    user: User
    access_token: str = Field(..., description="Access token")


class SessionContext(BaseModel):
    """
    Everything a request handler needs to know about the caller.

    Resolved once per request so handlers never re-query the admin flag.
    """

    user: User
    is_admin: bool = False

    @property
    def user_id(self) -> str:
        return self.user.id


class MeResponse(BaseModel):
    user: User
    is_admin: bool
