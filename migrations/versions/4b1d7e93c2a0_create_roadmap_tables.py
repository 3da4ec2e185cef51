"""create_roadmap_tables

Revision ID: 4b1d7e93c2a0
Revises:
Create Date: 2026-01-28 10:12:44.318201

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4b1d7e93c2a0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create businesses, impact_sub_areas, todos and task_file_mappings."""
    op.create_table('businesses',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('industry', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_businesses_user_id', 'businesses', ['user_id'], unique=False)

    op.create_table('impact_sub_areas',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('business_id', sa.UUID(), nullable=False),
        sa.Column('impact_area', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon_type', sa.String(length=20), nullable=False, server_default='default'),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_user_created', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("icon_type IN ('default', 'user_added')", name='ck_impact_sub_areas_icon_type'),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_impact_sub_areas_business_id', 'impact_sub_areas', ['business_id'], unique=False)
    op.create_index(
        'uq_impact_sub_areas_default_title',
        'impact_sub_areas',
        ['business_id', 'impact_area', 'title'],
        unique=True,
        postgresql_where=sa.text('NOT is_user_created'),
    )

    op.create_table('todos',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('business_id', sa.UUID(), nullable=False),
        sa.Column('sub_area_id', sa.UUID(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('impact', sa.String(length=20), nullable=False, server_default='Other'),
        sa.Column('requirement_code', sa.String(length=50), nullable=True),
        sa.Column('kb_action_id', sa.String(length=100), nullable=True),
        sa.Column('description_md', sa.Text(), nullable=True),
        sa.Column('priority', sa.String(length=10), nullable=False, server_default='P2'),
        sa.Column('effort', sa.String(length=10), nullable=False, server_default='Medium'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='todo'),
        sa.Column('owner_user_id', sa.UUID(), nullable=True),
        sa.Column('due_date', sa.DateTime(), nullable=True),
        sa.Column('evidence_chunk_ids', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('is_impact_locked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('anchor_quote', sa.Text(), nullable=True),
        sa.Column('kb_refs', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('rationale', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sub_area_id'], ['impact_sub_areas.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_todos_user_id', 'todos', ['user_id'], unique=False)
    op.create_index('ix_todos_business_id', 'todos', ['business_id'], unique=False)
    op.create_index('ix_todos_sub_area_id', 'todos', ['sub_area_id'], unique=False)
    op.create_index('ix_todos_created_at', 'todos', ['created_at'], unique=False)
    op.create_index('ix_todos_deleted_at', 'todos', ['deleted_at'], unique=False)

    op.create_table('task_file_mappings',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('task_id', sa.UUID(), nullable=False),
        sa.Column('file_id', sa.UUID(), nullable=False),
        sa.Column('mapped_by', sa.UUID(), nullable=True),
        sa.Column('mapped_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['task_id'], ['todos.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('file_id', name='uq_task_file_mappings_file'),
    )
    op.create_index('ix_task_file_mappings_task_id', 'task_file_mappings', ['task_id'], unique=False)


def downgrade() -> None:
    """Drop the roadmap tables."""
    op.drop_index('ix_task_file_mappings_task_id', table_name='task_file_mappings')
    op.drop_table('task_file_mappings')
    op.drop_index('ix_todos_deleted_at', table_name='todos')
    op.drop_index('ix_todos_created_at', table_name='todos')
    op.drop_index('ix_todos_sub_area_id', table_name='todos')
    op.drop_index('ix_todos_business_id', table_name='todos')
    op.drop_index('ix_todos_user_id', table_name='todos')
    op.drop_table('todos')
    op.drop_index('uq_impact_sub_areas_default_title', table_name='impact_sub_areas')
    op.drop_index('ix_impact_sub_areas_business_id', table_name='impact_sub_areas')
    op.drop_table('impact_sub_areas')
    op.drop_index('ix_businesses_user_id', table_name='businesses')
    op.drop_table('businesses')
