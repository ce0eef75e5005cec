"""
SQLAlchemy models for bills of materials, their line items and the vendor
product matches found for each item.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from renoplan.db.database import Base, JSONType, new_uuid, utcnow


class BillOfMaterial(Base):
    """
    A generated bill of materials.

    `total_estimated_cost` is computed once at generation time from the item
    totals and is not re-derived when items change.
    """

    __tablename__ = "bills_of_material"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    conversation_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("conversations.id", ondelete="SET NULL"),
        nullable=True,
    )
    total_estimated_cost: Mapped[float] = mapped_column(
        Numeric(14, 2, asdecimal=False), nullable=False, default=0
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="draft", comment="BOMStatus value"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<BillOfMaterial(id={self.id}, project_id={self.project_id}, "
            f"total={self.total_estimated_cost}, status={self.status})>"
        )


class BOMItem(Base):
    """One categorized line of a bill of materials."""

    __tablename__ = "bom_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    bom_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("bills_of_material.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    item_name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    quantity: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)
    estimated_unit_price: Mapped[float | None] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=True
    )
    estimated_total_price: Mapped[float] = mapped_column(
        Numeric(14, 2, asdecimal=False), nullable=False, default=0
    )
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="medium")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (Index("idx_bom_items_bom_category", "bom_id", "category"),)

    def __repr__(self) -> str:
        return (
            f"<BOMItem(id={self.id}, bom_id={self.bom_id}, category={self.category}, "
            f"item_name={self.item_name[:30]})>"
        )


class ProductMatch(Base):
    """
    A vendor product found for a BOM item.

    `is_selected` is the only thing that puts a match on the shopping list.
    """

    __tablename__ = "product_matches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    bom_item_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("bom_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    vendor: Mapped[str] = mapped_column(String(255), nullable=False)
    product_name: Mapped[str] = mapped_column(Text, nullable=False)
    product_url: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    in_stock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    match_score: Mapped[float] = mapped_column(
        Numeric(5, 2, asdecimal=False), nullable=False, default=50
    )
    is_selected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    product_details: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (Index("idx_product_matches_item_selected", "bom_item_id", "is_selected"),)

    def __repr__(self) -> str:
        return (
            f"<ProductMatch(id={self.id}, bom_item_id={self.bom_item_id}, "
            f"vendor={self.vendor}, selected={self.is_selected})>"
        )
