"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Releases table. Checklist, tracks and downloads are JSON documents.
    op.create_table(
        'releases',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('main_artist', sa.JSON(), nullable=False),
        sa.Column('genre', sa.String(100), nullable=False),
        sa.Column('release_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('has_cover', sa.Boolean(), default=False),
        sa.Column('cover_file_name', sa.String(500)),
        sa.Column('cover_url', sa.String(1000), default=''),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('checklist', sa.JSON(), nullable=False),
        sa.Column('tracks', sa.JSON(), nullable=False),
        sa.Column('purged', sa.Boolean(), default=False),
        sa.Column('admin_notes', sa.Text(), default=''),
        sa.Column('downloads', sa.JSON()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_releases_genre', 'releases', ['genre'])
    op.create_index('ix_releases_created_at', 'releases', ['created_at'])
    op.create_index('ix_releases_status', 'releases', ['status'])

    # Artist registry, keyed by normalized name
    op.create_table(
        'artists',
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('name')
    )


def downgrade() -> None:
    op.drop_table('artists')
    op.drop_table('releases')
