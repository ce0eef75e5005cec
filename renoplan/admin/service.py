"""
Admin service.

There is no users table: a user exists once they own a project or a
conversation, so user-level figures are aggregated from those tables.
"""

from datetime import timedelta

from sqlalchemy import func, select, union
from sqlalchemy.ext.asyncio import AsyncSession

from renoplan.admin.schemas import AdminStatsResponse, AdminUserResponse
from renoplan.auth.constants import Role
from renoplan.db.conversations.model import Conversation, Message
from renoplan.db.database import utcnow
from renoplan.db.projects.model import Project
from renoplan.db.user_roles.repository import UserRoleRepository

ACTIVE_WINDOW = timedelta(days=30)


class AdminService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.roles = UserRoleRepository(session)

    async def _count(self, stmt) -> int:
        result = await self.session.execute(stmt)
        return result.scalar_one() or 0

    async def get_stats(self) -> AdminStatsResponse:
        known_users = union(
            select(Project.user_id), select(Conversation.user_id)
        ).subquery()
        active_since = utcnow() - ACTIVE_WINDOW

        return AdminStatsResponse(
            total_users=await self._count(select(func.count()).select_from(known_users)),
            active_users=await self._count(
                select(func.count(func.distinct(Conversation.user_id))).where(
                    Conversation.updated_at >= active_since
                )
            ),
            total_projects=await self._count(select(func.count(Project.id))),
            total_conversations=await self._count(select(func.count(Conversation.id))),
            total_messages=await self._count(select(func.count(Message.id))),
        )

    async def list_users(self) -> list[AdminUserResponse]:
        """
        Every known user with their activity counts, most active first.

        Admins that own nothing yet are included too.
        """
        project_counts = dict(
            (
                await self.session.execute(
                    select(Project.user_id, func.count(Project.id)).group_by(Project.user_id)
                )
            ).all()
        )
        conversation_counts = dict(
            (
                await self.session.execute(
                    select(Conversation.user_id, func.count(Conversation.id)).group_by(
                        Conversation.user_id
                    )
                )
            ).all()
        )
        message_counts = dict(
            (
                await self.session.execute(
                    select(Conversation.user_id, func.count(Message.id))
                    .join(Message, Message.conversation_id == Conversation.id)
                    .group_by(Conversation.user_id)
                )
            ).all()
        )
        admins = await self.roles.list_user_ids_with_role(Role.ADMIN)

        user_ids = set(project_counts) | set(conversation_counts) | admins
        users = [
            AdminUserResponse(
                user_id=user_id,
                is_admin=user_id in admins,
                project_count=project_counts.get(user_id, 0),
                conversation_count=conversation_counts.get(user_id, 0),
                message_count=message_counts.get(user_id, 0),
            )
            for user_id in user_ids
        ]
        users.sort(key=lambda u: (-u.message_count, -u.project_count, u.user_id))
        return users

    async def set_admin(self, user_id: str, is_admin: bool) -> bool:
        """Grant or revoke the admin role. Returns whether anything changed."""
        if is_admin:
            return await self.roles.grant(user_id, Role.ADMIN)
        return await self.roles.revoke(user_id, Role.ADMIN)
