"""
Pydantic schemas for the admin dashboard.
"""

from pydantic import BaseModel


class AdminStatsResponse(BaseModel):
    """Platform-wide counters."""

    total_users: int
    active_users: int
    total_projects: int
    total_conversations: int
    total_messages: int


class AdminUserResponse(BaseModel):
    user_id: str
    is_admin: bool
    project_count: int
    conversation_count: int
    message_count: int


class AdminUserListResponse(BaseModel):
    users: list[AdminUserResponse]
    total: int


class RoleChangeResponse(BaseModel):
    user_id: str
    is_admin: bool
    changed: bool
