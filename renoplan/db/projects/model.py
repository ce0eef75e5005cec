"""
SQLAlchemy model for renovation projects.

Besides the user-edited fields, a project carries the details the AI extracts
from its conversations (budget and timeline estimates, features, materials,
style preferences).
"""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from renoplan.db.database import Base, JSONType, new_uuid, utcnow


class Project(Base):
    """Renovation project owned by a single user."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    user_id: Mapped[str] = mapped_column(
        String(255), nullable=False, index=True, comment="Owner user ID"
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    budget: Mapped[float | None] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=True
    )
    phase: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="planning", comment="ProjectStatus value"
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # AI-extracted details
    ai_extracted_data: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    budget_estimate: Mapped[float | None] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=True
    )
    timeline_weeks: Mapped[int | None] = mapped_column(Integer, nullable=True)
    key_features: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    materials_mentioned: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    style_preferences: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    last_chat_update: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (Index("idx_projects_user_created", "user_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, user_id={self.user_id}, name={self.name[:30]})>"


