"""
Repository for vendor database operations.
"""

from typing import Any

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from renoplan.db.database import utcnow
from renoplan.db.vendors.model import Vendor
from renoplan.utils.logger import logger


class VendorRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_vendors(self) -> list[Vendor]:
        """All vendors, highest priority first."""
        stmt = select(Vendor).order_by(desc(Vendor.priority), Vendor.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active(self, names: list[str] | None = None) -> list[Vendor]:
        """
        Active vendors ordered by priority, highest first.

        Args:
            names: Restrict to these vendor names when given

        Returns:
            list[Vendor]: Vendors to search
        """
        stmt = select(Vendor).where(Vendor.is_active.is_(True))
        if names:
            stmt = stmt.where(Vendor.name.in_(names))
        stmt = stmt.order_by(desc(Vendor.priority), Vendor.name)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_vendor(self, vendor_id: str) -> Vendor | None:
        result = await self.session.execute(select(Vendor).where(Vendor.id == vendor_id))
        return result.scalar_one_or_none()

    async def create_vendor(self, **values: Any) -> Vendor:
        vendor = Vendor(**values)
        self.session.add(vendor)
        await self.session.flush()
        await self.session.refresh(vendor)

        logger.info("[VendorRepository] Created vendor", vendor_id=vendor.id, vendor=vendor.name)
        return vendor

    async def update_vendor(self, vendor_id: str, changes: dict[str, Any]) -> Vendor | None:
        vendor = await self.get_vendor(vendor_id)
        if not vendor:
            return None

        for field, value in changes.items():
            setattr(vendor, field, value)
        vendor.updated_at = utcnow()

        await self.session.flush()
        await self.session.refresh(vendor)

        logger.info(
            "[VendorRepository] Updated vendor", vendor_id=vendor_id, fields=sorted(changes)
        )
        return vendor

    async def toggle_active(self, vendor_id: str) -> Vendor | None:
        """Flip a vendor's is_active flag."""
        vendor = await self.get_vendor(vendor_id)
        if not vendor:
            return None
        return await self.update_vendor(vendor_id, {"is_active": not vendor.is_active})

    async def delete_vendor(self, vendor_id: str) -> bool:
        result = await self.session.execute(delete(Vendor).where(Vendor.id == vendor_id))
        deleted = result.rowcount > 0
        if deleted:
            logger.info("[VendorRepository] Deleted vendor", vendor_id=vendor_id)
        return deleted
