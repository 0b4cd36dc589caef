"""create_users_and_tasks

Revision ID: 4c1d7a9e2b10
Revises:
Create Date: 2026-10-19 09:12:44.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d7a9e2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


task_status = sa.Enum('pending', 'completed', name='task_status')


def upgrade() -> None:
    """Create users and tasks tables with the self-referencing cascade."""
    op.create_table('users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('create_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table('tasks',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', task_status, server_default='pending', nullable=False),
        sa.Column('userId', sa.UUID(), nullable=False),
        sa.Column('parentTaskId', sa.UUID(), nullable=True),
        sa.Column('create_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['userId'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['parentTaskId'], ['tasks.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tasks_userId', 'tasks', ['userId'], unique=False)
    op.create_index('ix_tasks_parentTaskId', 'tasks', ['parentTaskId'], unique=False)
    op.create_index('ix_tasks_status', 'tasks', ['status'], unique=False)


def downgrade() -> None:
    """Drop tasks and users."""
    op.drop_index('ix_tasks_status', table_name='tasks')
    op.drop_index('ix_tasks_parentTaskId', table_name='tasks')
    op.drop_index('ix_tasks_userId', table_name='tasks')
    op.drop_table('tasks')
    task_status.drop(op.get_bind(), checkfirst=True)
    op.drop_table('users')
