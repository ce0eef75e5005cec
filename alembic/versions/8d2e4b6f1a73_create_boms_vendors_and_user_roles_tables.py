"""create_boms_vendors_and_user_roles_tables

Revision ID: 8d2e4b6f1a73
Revises: 3c1f7a9e2b40
Create Date: 2025-10-09 16:40:05.118930

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '8d2e4b6f1a73'
down_revision: Union[str, Sequence[str], None] = '3c1f7a9e2b40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('bills_of_material',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('project_id', sa.String(length=36), nullable=False),
    sa.Column('conversation_id', sa.String(length=36), nullable=True),
    sa.Column('total_estimated_cost', sa.Numeric(precision=14, scale=2), nullable=False),
    sa.Column('status', sa.String(length=20), nullable=False, comment='BOMStatus value'),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    sa.ForeignKeyConstraint(['conversation_id'], ['conversations.id'], ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bills_of_material_project_id'), 'bills_of_material', ['project_id'], unique=False)

    op.create_table('bom_items',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('bom_id', sa.String(length=36), nullable=False),
    sa.Column('category', sa.String(length=100), nullable=False),
    sa.Column('item_name', sa.Text(), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('quantity', sa.Numeric(precision=12, scale=2), nullable=False),
    sa.Column('unit', sa.String(length=50), nullable=False),
    sa.Column('estimated_unit_price', sa.Numeric(precision=12, scale=2), nullable=True),
    sa.Column('estimated_total_price', sa.Numeric(precision=14, scale=2), nullable=False),
    sa.Column('priority', sa.String(length=10), nullable=False),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.ForeignKeyConstraint(['bom_id'], ['bills_of_material.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_bom_items_bom_category', 'bom_items', ['bom_id', 'category'], unique=False)
    op.create_index(op.f('ix_bom_items_bom_id'), 'bom_items', ['bom_id'], unique=False)

    op.create_table('product_matches',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('bom_item_id', sa.String(length=36), nullable=False),
    sa.Column('vendor', sa.String(length=255), nullable=False),
    sa.Column('product_name', sa.Text(), nullable=False),
    sa.Column('product_url', sa.Text(), nullable=False),
    sa.Column('image_url', sa.Text(), nullable=True),
    sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=True),
    sa.Column('in_stock', sa.Boolean(), nullable=False),
    sa.Column('match_score', sa.Numeric(precision=5, scale=2), nullable=False),
    sa.Column('is_selected', sa.Boolean(), nullable=False),
    sa.Column('product_details', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.ForeignKeyConstraint(['bom_item_id'], ['bom_items.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_product_matches_item_selected', 'product_matches', ['bom_item_id', 'is_selected'], unique=False)
    op.create_index(op.f('ix_product_matches_bom_item_id'), 'product_matches', ['bom_item_id'], unique=False)

    op.create_table('vendors',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('website_url', sa.Text(), nullable=False),
    sa.Column('search_url_template', sa.Text(), nullable=False),
    sa.Column('logo_url', sa.Text(), nullable=True),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    sa.Column('priority', sa.Integer(), nullable=False, comment='Higher is searched first'),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('name')
    )

    op.create_table('user_roles',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('user_id', sa.String(length=255), nullable=False),
    sa.Column('role', sa.String(length=20), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('user_id', 'role', name='uq_user_roles_user_role')
    )
    op.create_index(op.f('ix_user_roles_user_id'), 'user_roles', ['user_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_user_roles_user_id'), table_name='user_roles')
    op.drop_table('user_roles')
    op.drop_table('vendors')

    op.drop_index(op.f('ix_product_matches_bom_item_id'), table_name='product_matches')
    op.drop_index('idx_product_matches_item_selected', table_name='product_matches')
    op.drop_table('product_matches')

    op.drop_index(op.f('ix_bom_items_bom_id'), table_name='bom_items')
    op.drop_index('idx_bom_items_bom_category', table_name='bom_items')
    op.drop_table('bom_items')

    op.drop_index(op.f('ix_bills_of_material_project_id'), table_name='bills_of_material')
    op.drop_table('bills_of_material')
