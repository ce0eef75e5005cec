"""
SQLAlchemy models for chat conversations and messages.

A conversation belongs to one user and optionally to one project; messages are
an append-only sequence ordered by creation time.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from renoplan.db.database import Base, new_uuid, utcnow


class Conversation(Base):
    """
    Chat conversation metadata.

    Created on the first user message. `updated_at` is bumped every time a
    message is appended so the list view can sort by recent activity.
    """

    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_uuid, comment="Conversation UUID"
    )

    user_id: Mapped[str] = mapped_column(
        String(255), nullable=False, index=True, comment="Owner user ID"
    )

    project_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Project the conversation is about",
    )

    title: Mapped[str] = mapped_column(
        Text, nullable=False, default="New conversation", comment="Display title"
    )

    summary: Mapped[str | None] = mapped_column(
        Text, nullable=True, comment="Short summary used as context for later chats"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        Index("idx_conversations_user_updated", "user_id", "updated_at"),
        Index("idx_conversations_project_updated", "project_id", "updated_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Conversation(id={self.id}, user_id={self.user_id}, "
            f"project_id={self.project_id}, title={self.title[:30]})>"
        )


class Message(Base):
    """A single chat message. Immutable once created."""

    __tablename__ = "messages"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_uuid, comment="Message UUID"
    )

    conversation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    role: Mapped[str] = mapped_column(
        String(20), nullable=False, comment="Message role: user or assistant"
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    image_url: Mapped[str | None] = mapped_column(
        Text, nullable=True, comment="Attached photo URL"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        Index("idx_messages_conversation_created", "conversation_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Message(id={self.id}, conversation_id={self.conversation_id}, "
            f"role={self.role}, created_at={self.created_at})>"
        )

