"""
SQLAlchemy model for product vendors searched by the product pipeline.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from renoplan.db.database import Base, new_uuid, utcnow


class Vendor(Base):
    """
    A retailer whose catalog search page can be scraped.

    `search_url_template` contains a `{query}` placeholder that is replaced by
    the URL-encoded search query.
    """

    __tablename__ = "vendors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    website_url: Mapped[str] = mapped_column(Text, nullable=False)
    search_url_template: Mapped[str] = mapped_column(Text, nullable=False)
    logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    priority: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="Higher is searched first"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def build_search_url(self, encoded_query: str) -> str:
        return self.search_url_template.replace("{query}", encoded_query)

    def __repr__(self) -> str:
        return f"<Vendor(id={self.id}, name={self.name}, active={self.is_active})>"
