"""
FastAPI dependencies for database repositories.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from renoplan.db.boms.repository import BOMRepository
from renoplan.db.conversations.repository import ConversationRepository
from renoplan.db.database import get_db
from renoplan.db.projects.repository import ProjectRepository
from renoplan.db.user_roles.repository import UserRoleRepository
from renoplan.db.vendors.repository import VendorRepository


def get_conversation_repository(
    session: AsyncSession = Depends(get_db),
) -> ConversationRepository:
    """
    FastAPI dependency for getting the conversation repository.

    Args:
        session: Database session from get_db dependency

    Returns:
        ConversationRepository: Repository instance with injected session
    """
    return ConversationRepository(session)


def get_project_repository(session: AsyncSession = Depends(get_db)) -> ProjectRepository:
    return ProjectRepository(session)


def get_bom_repository(session: AsyncSession = Depends(get_db)) -> BOMRepository:
    return BOMRepository(session)


def get_vendor_repository(session: AsyncSession = Depends(get_db)) -> VendorRepository:
    return VendorRepository(session)


def get_user_role_repository(session: AsyncSession = Depends(get_db)) -> UserRoleRepository:
    return UserRoleRepository(session)
