"""
Repository for user role grants.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from renoplan.auth.constants import Role
from renoplan.db.user_roles.model import UserRole
from renoplan.utils.logger import logger


class UserRoleRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def has_role(self, user_id: str, role: Role) -> bool:
        stmt = select(UserRole.id).where(UserRole.user_id == user_id, UserRole.role == role.value)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def list_user_ids_with_role(self, role: Role) -> set[str]:
        result = await self.session.execute(
            select(UserRole.user_id).where(UserRole.role == role.value)
        )
        return set(result.scalars().all())

    async def grant(self, user_id: str, role: Role) -> bool:
        """
        Grant a role. Idempotent.

        Returns:
            bool: True if a new grant was created
        """
        if await self.has_role(user_id, role):
            return False

        self.session.add(UserRole(user_id=user_id, role=role.value))
        await self.session.flush()
        logger.info("[UserRoleRepository] Granted role", user_id=user_id, role=role.value)
        return True

    async def revoke(self, user_id: str, role: Role) -> bool:
        result = await self.session.execute(
            delete(UserRole).where(UserRole.user_id == user_id, UserRole.role == role.value)
        )
        revoked = result.rowcount > 0
        if revoked:
            logger.info("[UserRoleRepository] Revoked role", user_id=user_id, role=role.value)
        return revoked
