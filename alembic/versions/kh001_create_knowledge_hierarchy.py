"""create knowledge hierarchy

Revision ID: kh001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'kh001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'knowledge_area',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=40), nullable=False),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['parent_id'], ['knowledge_area.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_knowledge_area_parent_id'), 'knowledge_area', ['parent_id'], unique=False)
    # Top-level areas share the sentinel parent 0 so their names stay unique too
    op.create_index(
        'uq_knowledge_area_parent_name',
        'knowledge_area',
        [sa.text('coalesce(parent_id, 0)'), 'name'],
        unique=True
    )

    op.create_table(
        'topic',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('area_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['area_id'], ['knowledge_area.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('area_id', 'name', name='uq_topic_area_name')
    )
    op.create_index(op.f('ix_topic_area_id'), 'topic', ['area_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_topic_area_id'), table_name='topic')
    op.drop_table('topic')
    op.drop_index('uq_knowledge_area_parent_name', table_name='knowledge_area')
    op.drop_index(op.f('ix_knowledge_area_parent_id'), table_name='knowledge_area')
    op.drop_table('knowledge_area')
