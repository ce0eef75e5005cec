"""
Repository for conversation and message database operations.

Provides CRUD operations for Conversation and Message records using
SQLAlchemy async sessions.
"""

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from renoplan.db.conversations.model import Conversation, Message
from renoplan.db.database import utcnow
from renoplan.utils.logger import logger


class ConversationRepository:
    """Repository for managing chat conversations and their messages."""

    def __init__(self, session: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    # ========== Conversation Operations ==========

    async def create_conversation(
        self,
        user_id: str,
        title: str = "New conversation",
        project_id: str | None = None,
    ) -> Conversation:
        """
        Create a new conversation for a user.

        Args:
            user_id: Owner user ID
            title: Conversation title
            project_id: Optional project the conversation belongs to

        Returns:
            Conversation: Created conversation
        """
        conversation = Conversation(user_id=user_id, title=title, project_id=project_id)

        self.session.add(conversation)
        await self.session.flush()
        await self.session.refresh(conversation)

        logger.info(
            "[ConversationRepository] Created conversation",
            conversation_id=conversation.id,
            user_id=user_id,
            project_id=project_id,
        )
        return conversation

    async def get_conversation(
        self, conversation_id: str, user_id: str
    ) -> Conversation | None:
        """
        Get a conversation by ID, scoped to its owner.

        Args:
            conversation_id: Conversation UUID
            user_id: Owner user ID (authorization check)

        Returns:
            Conversation | None: Conversation if found and owned by user
        """
        stmt = select(Conversation).where(
            Conversation.id == conversation_id,
            Conversation.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_conversations(
        self,
        user_id: str,
        project_id: str | None = None,
    ) -> list[Conversation]:
        """
        List a user's conversations, most recently active first.

        Args:
            user_id: Owner user ID
            project_id: Restrict to one project when given

        Returns:
            list[Conversation]: Conversations ordered by updated_at DESC
        """
        stmt = select(Conversation).where(Conversation.user_id == user_id)
        if project_id:
            stmt = stmt.where(Conversation.project_id == project_id)
        stmt = stmt.order_by(desc(Conversation.updated_at))

        result = await self.session.execute(stmt)
        conversations = list(result.scalars().all())

        logger.debug(
            "[ConversationRepository] Listed conversations",
            user_id=user_id,
            count=len(conversations),
        )
        return conversations

    async def list_recent_for_project(
        self,
        project_id: str,
        exclude_conversation_id: str | None = None,
        limit: int = 3,
    ) -> list[Conversation]:
        """
        Most recently active conversations of a project, for prompt context.

        Args:
            project_id: Project UUID
            exclude_conversation_id: Conversation to leave out (the current one)
            limit: Maximum number of conversations

        Returns:
            list[Conversation]: Conversations ordered by updated_at DESC
        """
        stmt = select(Conversation).where(Conversation.project_id == project_id)
        if exclude_conversation_id:
            stmt = stmt.where(Conversation.id != exclude_conversation_id)
        stmt = stmt.order_by(desc(Conversation.updated_at)).limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_conversation(
        self,
        conversation_id: str,
        user_id: str,
        title: str | None = None,
        summary: str | None = None,
    ) -> Conversation | None:
        """
        Update a conversation's title and/or summary.

        Returns:
            Conversation | None: Updated conversation, None if not found
        """
        conversation = await self.get_conversation(conversation_id, user_id)
        if not conversation:
            return None

        if title is not None:
            conversation.title = title
        if summary is not None:
            conversation.summary = summary
        conversation.updated_at = utcnow()

        await self.session.flush()
        await self.session.refresh(conversation)

        logger.info(
            "[ConversationRepository] Updated conversation",
            conversation_id=conversation_id,
        )
        return conversation

    async def delete_conversation(self, conversation_id: str, user_id: str) -> bool:
        """
        Delete a conversation and all its messages.

        Args:
            conversation_id: Conversation UUID
            user_id: Owner user ID (authorization check)

        Returns:
            bool: True if deleted, False if not found or not owned
        """
        conversation = await self.get_conversation(conversation_id, user_id)
        if not conversation:
            logger.warning(
                "[ConversationRepository] Cannot delete conversation: not found or unauthorized",
                conversation_id=conversation_id,
                user_id=user_id,
            )
            return False

        await self.session.execute(
            delete(Message).where(Message.conversation_id == conversation_id)
        )
        result = await self.session.execute(
            delete(Conversation).where(
                Conversation.id == conversation_id,
                Conversation.user_id == user_id,
            )
        )
        deleted = result.rowcount > 0

        if deleted:
            logger.info(
                "[ConversationRepository] Deleted conversation and messages",
                conversation_id=conversation_id,
            )
        return deleted

    # ========== Message Operations ==========

    async def create_message(
        self,
        conversation_id: str,
        user_id: str,
        role: str,
        content: str,
        image_url: str | None = None,
    ) -> Message | None:
        """
        Append a message to a conversation and bump its updated_at.

        Args:
            conversation_id: Conversation UUID
            user_id: Owner user ID (authorization check)
            role: user or assistant
            content: Message text
            image_url: Optional attached photo URL

        Returns:
            Message | None: Created message, None if the conversation is not found
        """
        conversation = await self.get_conversation(conversation_id, user_id)
        if not conversation:
            logger.warning(
                "[ConversationRepository] Cannot create message: conversation not found or unauthorized",
                conversation_id=conversation_id,
                user_id=user_id,
            )
            return None

        message = Message(
            conversation_id=conversation_id,
            role=role,
            content=content,
            image_url=image_url,
        )
        self.session.add(message)
        await self.session.flush()
        await self.session.refresh(message)

        conversation.updated_at = utcnow()
        await self.session.flush()

        logger.info(
            "[ConversationRepository] Created message",
            message_id=message.id,
            conversation_id=conversation_id,
            role=role,
        )
        return message

    async def get_messages(self, conversation_id: str, user_id: str) -> list[Message]:
        """
        Get all messages of a conversation in creation order.

        Returns:
            list[Message]: Messages ordered by created_at ASC, empty if not found
        """
        conversation = await self.get_conversation(conversation_id, user_id)
        if not conversation:
            logger.warning(
                "[ConversationRepository] Cannot get messages: conversation not found or unauthorized",
                conversation_id=conversation_id,
                user_id=user_id,
            )
            return []

        return await self.get_transcript(conversation_id)

    async def get_transcript(self, conversation_id: str) -> list[Message]:
        """
        Get all messages of a conversation without an ownership check.

        Used by server-side pipelines that already resolved access through the
        owning project.
        """
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
