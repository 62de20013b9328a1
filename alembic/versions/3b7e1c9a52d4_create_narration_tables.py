"""create narration tables

Revision ID: 3b7e1c9a52d4
Revises:
Create Date: 2026-10-19 10:12:31.204518

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3b7e1c9a52d4'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    connection = op.get_bind()

    # Profiles are written by the identity provider; create only if missing
    if not connection.dialect.has_table(connection, 'profiles'):
        op.create_table(
            'profiles',
            sa.Column('user_id', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
            sa.PrimaryKeyConstraint('user_id')
        )

    op.create_table(
        'stories',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_stories_slug'), 'stories', ['slug'], unique=True)

    op.create_table(
        'story_generations',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('story_id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('status', sa.Enum('pending', 'in_progress', 'completed', 'failed', name='generation_status'), nullable=False),
        sa.Column('progress', sa.Float(), nullable=False),
        sa.Column('result_url', sa.String(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['story_id'], ['stories.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_story_generations_story_id'), 'story_generations', ['story_id'], unique=False)
    op.create_index(op.f('ix_story_generations_user_id'), 'story_generations', ['user_id'], unique=False)
    op.create_index(op.f('ix_story_generations_status'), 'story_generations', ['status'], unique=False)
    op.create_index(op.f('ix_story_generations_created_at'), 'story_generations', ['created_at'], unique=False)
    op.create_index('idx_generations_user_created', 'story_generations', ['user_id', 'created_at'], unique=False)

    op.create_table(
        'generation_logs',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('generation_id', sa.String(), nullable=False),
        sa.Column('event', sa.Text(), nullable=False),
        sa.Column('occurred_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['generation_id'], ['story_generations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_logs_generation_occurred', 'generation_logs', ['generation_id', 'occurred_at'], unique=False)

    op.create_table(
        'voice_samples',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('elevenlabs_voice_id', sa.String(), nullable=False),
        sa.Column('verification_phrase', sa.Text(), nullable=False),
        sa.Column('verified', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', name='unique_voice_sample_user')
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('voice_samples')
    op.drop_index('idx_logs_generation_occurred', table_name='generation_logs')
    op.drop_table('generation_logs')
    op.drop_index('idx_generations_user_created', table_name='story_generations')
    op.drop_index(op.f('ix_story_generations_created_at'), table_name='story_generations')
    op.drop_index(op.f('ix_story_generations_status'), table_name='story_generations')
    op.drop_index(op.f('ix_story_generations_user_id'), table_name='story_generations')
    op.drop_index(op.f('ix_story_generations_story_id'), table_name='story_generations')
    op.drop_table('story_generations')
    op.drop_index(op.f('ix_stories_slug'), table_name='stories')
    op.drop_table('stories')

    # Drop enum type using raw SQL
    connection = op.get_bind()
    if connection.dialect.name == 'postgresql':
        connection.execute(sa.text("DROP TYPE IF EXISTS generation_status"))
