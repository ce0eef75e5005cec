"""
Repository for bills of materials, BOM items and product matches.

Ownership flows through the parent project: a BOM, its items and their matches
are visible to the user who owns the project.
"""

from typing import Any

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from renoplan.db.boms.model import BillOfMaterial, BOMItem, ProductMatch
from renoplan.db.boms.schemas import BOMStatus
from renoplan.db.database import utcnow
from renoplan.db.projects.model import Project
from renoplan.utils.logger import logger


class BOMRepository:
    """Repository for BOMs and everything hanging off them."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ========== BOM Operations ==========

    async def create_bom(
        self,
        project_id: str,
        items: list[dict[str, Any]],
        total_estimated_cost: float,
        conversation_id: str | None = None,
    ) -> BillOfMaterial:
        """
        Insert a draft BOM and all of its items in one flush.

        Args:
            project_id: Owning project UUID
            items: Column values for each BOM item
            total_estimated_cost: Total computed at generation time
            conversation_id: Conversation the BOM was generated from

        Returns:
            BillOfMaterial: Created BOM
        """
        bom = BillOfMaterial(
            project_id=project_id,
            conversation_id=conversation_id,
            total_estimated_cost=total_estimated_cost,
            status=BOMStatus.DRAFT.value,
        )
        self.session.add(bom)
        await self.session.flush()

        self.session.add_all([BOMItem(bom_id=bom.id, **item) for item in items])
        await self.session.flush()
        await self.session.refresh(bom)

        logger.info(
            "[BOMRepository] Created BOM",
            bom_id=bom.id,
            project_id=project_id,
            item_count=len(items),
            total_estimated_cost=total_estimated_cost,
        )
        return bom

    async def get_bom(self, bom_id: str, user_id: str) -> BillOfMaterial | None:
        """Get a BOM whose project is owned by the user."""
        stmt = (
            select(BillOfMaterial)
            .join(Project, Project.id == BillOfMaterial.project_id)
            .where(BillOfMaterial.id == bom_id, Project.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_boms_for_project(self, project_id: str) -> list[BillOfMaterial]:
        """List a project's BOMs, newest first."""
        stmt = (
            select(BillOfMaterial)
            .where(BillOfMaterial.project_id == project_id)
            .order_by(desc(BillOfMaterial.created_at))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_items(self, bom_id: str) -> list[BOMItem]:
        """Items of a BOM ordered by category, then insertion."""
        stmt = (
            select(BOMItem)
            .where(BOMItem.bom_id == bom_id)
            .order_by(BOMItem.category, BOMItem.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_status(
        self, bom_id: str, user_id: str, status: BOMStatus
    ) -> BillOfMaterial | None:
        bom = await self.get_bom(bom_id, user_id)
        if not bom:
            return None

        bom.status = status.value
        bom.updated_at = utcnow()
        await self.session.flush()
        await self.session.refresh(bom)

        logger.info("[BOMRepository] Updated BOM status", bom_id=bom_id, status=status.value)
        return bom

    async def get_project_stats(self, project_id: str) -> dict[str, Any]:
        """
        Aggregate BOM counters for one project.

        Returns:
            dict: bom_count, item_count, shopping_list_count, total_estimated_cost
        """
        bom_ids = select(BillOfMaterial.id).where(BillOfMaterial.project_id == project_id)

        bom_row = (
            await self.session.execute(
                select(
                    func.count(BillOfMaterial.id),
                    func.coalesce(func.sum(BillOfMaterial.total_estimated_cost), 0),
                ).where(BillOfMaterial.project_id == project_id)
            )
        ).one()
        item_count = await self.session.scalar(
            select(func.count(BOMItem.id)).where(BOMItem.bom_id.in_(bom_ids))
        )
        selected_count = await self.session.scalar(
            select(func.count(ProductMatch.id))
            .join(BOMItem, BOMItem.id == ProductMatch.bom_item_id)
            .where(BOMItem.bom_id.in_(bom_ids), ProductMatch.is_selected.is_(True))
        )

        return {
            "bom_count": bom_row[0],
            "item_count": item_count or 0,
            "shopping_list_count": selected_count or 0,
            "total_estimated_cost": float(bom_row[1] or 0),
        }

    # ========== BOM Item Operations ==========

    async def get_item(self, item_id: str, user_id: str) -> BOMItem | None:
        """Get a BOM item whose project is owned by the user."""
        stmt = (
            select(BOMItem)
            .join(BillOfMaterial, BillOfMaterial.id == BOMItem.bom_id)
            .join(Project, Project.id == BillOfMaterial.project_id)
            .where(BOMItem.id == item_id, Project.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    # ========== Product Match Operations ==========

    async def add_matches(
        self, bom_item_id: str, matches: list[dict[str, Any]]
    ) -> list[ProductMatch]:
        """Bulk-insert product matches for an item."""
        rows = [ProductMatch(bom_item_id=bom_item_id, **match) for match in matches]
        self.session.add_all(rows)
        await self.session.flush()
        for row in rows:
            await self.session.refresh(row)

        logger.info(
            "[BOMRepository] Stored product matches",
            bom_item_id=bom_item_id,
            count=len(rows),
        )
        return rows

    async def list_matches(self, bom_item_id: str) -> list[ProductMatch]:
        """Matches for an item, best match first."""
        stmt = (
            select(ProductMatch)
            .where(ProductMatch.bom_item_id == bom_item_id)
            .order_by(desc(ProductMatch.match_score), ProductMatch.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_match(self, match_id: str, user_id: str) -> ProductMatch | None:
        stmt = (
            select(ProductMatch)
            .join(BOMItem, BOMItem.id == ProductMatch.bom_item_id)
            .join(BillOfMaterial, BillOfMaterial.id == BOMItem.bom_id)
            .join(Project, Project.id == BillOfMaterial.project_id)
            .where(ProductMatch.id == match_id, Project.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_selected(
        self, match_id: str, user_id: str, selected: bool
    ) -> ProductMatch | None:
        """
        Put a match on (or take it off) the shopping list.

        Returns:
            ProductMatch | None: Updated match, None if not found or not owned
        """
        match = await self.get_match(match_id, user_id)
        if not match:
            return None

        match.is_selected = selected
        await self.session.flush()
        await self.session.refresh(match)

        logger.info(
            "[BOMRepository] Updated match selection",
            match_id=match_id,
            is_selected=selected,
        )
        return match

    async def get_shopping_list(self, bom_id: str) -> list[tuple[ProductMatch, BOMItem]]:
        """
        Selected matches of a BOM with the item each was chosen for.

        Returns:
            list[tuple[ProductMatch, BOMItem]]: Ordered by item category
        """
        stmt = (
            select(ProductMatch, BOMItem)
            .join(BOMItem, BOMItem.id == ProductMatch.bom_item_id)
            .where(BOMItem.bom_id == bom_id, ProductMatch.is_selected.is_(True))
            .order_by(BOMItem.category, BOMItem.created_at)
        )
        result = await self.session.execute(stmt)
        return [(match, item) for match, item in result.all()]
