"""
Repository for project database operations.
"""

from typing import Any

from sqlalchemy import delete, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from renoplan.db.boms.model import BillOfMaterial, BOMItem, ProductMatch
from renoplan.db.conversations.model import Conversation
from renoplan.db.database import utcnow
from renoplan.db.projects.model import Project
from renoplan.db.projects.schemas import ExtractedProjectData, ProjectStatus
from renoplan.utils.logger import logger


class ProjectRepository:
    """Repository for managing renovation projects."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_project(
        self,
        user_id: str,
        name: str,
        description: str = "",
        budget: float | None = None,
    ) -> Project:
        """
        Create a project in the planning status.

        Args:
            user_id: Owner user ID
            name: Project name
            description: Optional description
            budget: Optional budget in USD

        Returns:
            Project: Created project
        """
        project = Project(
            user_id=user_id,
            name=name,
            description=description,
            budget=budget,
            status=ProjectStatus.PLANNING.value,
        )
        self.session.add(project)
        await self.session.flush()
        await self.session.refresh(project)

        logger.info(
            "[ProjectRepository] Created project", project_id=project.id, user_id=user_id
        )
        return project

    async def get_project(self, project_id: str, user_id: str) -> Project | None:
        """Get a project scoped to its owner."""
        stmt = select(Project).where(Project.id == project_id, Project.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_project_by_id(self, project_id: str) -> Project | None:
        """Get a project without an ownership check (background pipelines)."""
        result = await self.session.execute(select(Project).where(Project.id == project_id))
        return result.scalar_one_or_none()

    async def list_projects(self, user_id: str) -> list[Project]:
        """List a user's projects, newest first."""
        stmt = (
            select(Project)
            .where(Project.user_id == user_id)
            .order_by(desc(Project.created_at))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_project(
        self, project_id: str, user_id: str, changes: dict[str, Any]
    ) -> Project | None:
        """
        Apply a partial update.

        Args:
            project_id: Project UUID
            user_id: Owner user ID
            changes: Column values to set; enum values are stored by value

        Returns:
            Project | None: Updated project, None if not found
        """
        project = await self.get_project(project_id, user_id)
        if not project:
            return None

        for field, value in changes.items():
            if isinstance(value, ProjectStatus):
                value = value.value
            setattr(project, field, value)
        project.updated_at = utcnow()

        await self.session.flush()
        await self.session.refresh(project)

        logger.info(
            "[ProjectRepository] Updated project",
            project_id=project_id,
            fields=sorted(changes),
        )
        return project

    async def apply_extracted_data(
        self, project_id: str, extracted: ExtractedProjectData
    ) -> bool:
        """
        Store AI-extracted details on a project.

        Missing values clear the corresponding columns, matching the latest
        extraction.

        Returns:
            bool: True if the project exists and was updated
        """
        timeline = extracted.timeline_weeks
        stmt = (
            update(Project)
            .where(Project.id == project_id)
            .values(
                ai_extracted_data=extracted.model_dump(exclude_none=True),
                last_chat_update=utcnow(),
                budget_estimate=extracted.budget_estimate or None,
                timeline_weeks=round(timeline) if timeline else None,
                key_features=extracted.key_features or None,
                materials_mentioned=extracted.materials_mentioned or None,
                style_preferences=extracted.style_preferences or None,
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def delete_project(self, project_id: str, user_id: str) -> bool:
        """
        Delete a project with its BOMs, BOM items and product matches.

        Conversations are kept and detached from the project.

        Returns:
            bool: True if deleted, False if not found or not owned
        """
        project = await self.get_project(project_id, user_id)
        if not project:
            return False

        bom_ids = select(BillOfMaterial.id).where(BillOfMaterial.project_id == project_id)
        item_ids = select(BOMItem.id).where(BOMItem.bom_id.in_(bom_ids))

        await self.session.execute(
            delete(ProductMatch).where(ProductMatch.bom_item_id.in_(item_ids))
        )
        await self.session.execute(delete(BOMItem).where(BOMItem.bom_id.in_(bom_ids)))
        await self.session.execute(
            delete(BillOfMaterial).where(BillOfMaterial.project_id == project_id)
        )
        await self.session.execute(
            update(Conversation)
            .where(Conversation.project_id == project_id)
            .values(project_id=None)
        )
        await self.session.execute(delete(Project).where(Project.id == project_id))

        logger.info("[ProjectRepository] Deleted project", project_id=project_id)
        return True

    async def count_by_status(self, user_id: str) -> dict[str, int]:
        """Count a user's projects per status."""
        stmt = (
            select(Project.status, func.count(Project.id))
            .where(Project.user_id == user_id)
            .group_by(Project.status)
        )
        result = await self.session.execute(stmt)
        return {status: count for status, count in result.all()}
