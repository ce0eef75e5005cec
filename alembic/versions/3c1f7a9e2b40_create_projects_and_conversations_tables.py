"""create_projects_and_conversations_tables

Revision ID: 3c1f7a9e2b40
Revises:
Create Date: 2025-10-02 09:14:21.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3c1f7a9e2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create projects table
    op.create_table('projects',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('user_id', sa.String(length=255), nullable=False, comment='Owner user ID'),
    sa.Column('name', sa.Text(), nullable=False),
    sa.Column('description', sa.Text(), nullable=False),
    sa.Column('budget', sa.Numeric(precision=12, scale=2), nullable=True),
    sa.Column('phase', sa.String(length=50), nullable=True),
    sa.Column('status', sa.String(length=20), nullable=False, comment='ProjectStatus value'),
    sa.Column('start_date', sa.Date(), nullable=True),
    sa.Column('end_date', sa.Date(), nullable=True),
    sa.Column('ai_extracted_data', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('budget_estimate', sa.Numeric(precision=12, scale=2), nullable=True),
    sa.Column('timeline_weeks', sa.Integer(), nullable=True),
    sa.Column('key_features', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('materials_mentioned', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('style_preferences', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('last_chat_update', sa.DateTime(timezone=True), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_projects_user_created', 'projects', ['user_id', 'created_at'], unique=False)
    op.create_index(op.f('ix_projects_user_id'), 'projects', ['user_id'], unique=False)

    # Create conversations table
    op.create_table('conversations',
    sa.Column('id', sa.String(length=36), nullable=False, comment='Conversation UUID'),
    sa.Column('user_id', sa.String(length=255), nullable=False, comment='Owner user ID'),
    sa.Column('project_id', sa.String(length=36), nullable=True, comment='Project the conversation is about'),
    sa.Column('title', sa.Text(), nullable=False, comment='Display title'),
    sa.Column('summary', sa.Text(), nullable=True, comment='Short summary used as context for later chats'),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_conversations_project_updated', 'conversations', ['project_id', 'updated_at'], unique=False)
    op.create_index('idx_conversations_user_updated', 'conversations', ['user_id', 'updated_at'], unique=False)
    op.create_index(op.f('ix_conversations_project_id'), 'conversations', ['project_id'], unique=False)
    op.create_index(op.f('ix_conversations_user_id'), 'conversations', ['user_id'], unique=False)

    # Create messages table
    op.create_table('messages',
    sa.Column('id', sa.String(length=36), nullable=False, comment='Message UUID'),
    sa.Column('conversation_id', sa.String(length=36), nullable=False),
    sa.Column('role', sa.String(length=20), nullable=False, comment='Message role: user or assistant'),
    sa.Column('content', sa.Text(), nullable=False),
    sa.Column('image_url', sa.Text(), nullable=True, comment='Attached photo URL'),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.ForeignKeyConstraint(['conversation_id'], ['conversations.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_messages_conversation_created', 'messages', ['conversation_id', 'created_at'], unique=False)
    op.create_index(op.f('ix_messages_conversation_id'), 'messages', ['conversation_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_messages_conversation_id'), table_name='messages')
    op.drop_index('idx_messages_conversation_created', table_name='messages')
    op.drop_table('messages')

    op.drop_index(op.f('ix_conversations_user_id'), table_name='conversations')
    op.drop_index(op.f('ix_conversations_project_id'), table_name='conversations')
    op.drop_index('idx_conversations_user_updated', table_name='conversations')
    op.drop_index('idx_conversations_project_updated', table_name='conversations')
    op.drop_table('conversations')

    op.drop_index(op.f('ix_projects_user_id'), table_name='projects')
    op.drop_index('idx_projects_user_created', table_name='projects')
    op.drop_table('projects')
