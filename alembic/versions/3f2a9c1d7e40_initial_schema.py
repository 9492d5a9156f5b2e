"""Initial schema: users, notes, shares, refresh tokens

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2025-10-02 10:12:31.204117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from notegate.core.models.types import GUID, TagListType


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('length(email) <= 255', name='ck_users_email_len'),
        sa.CheckConstraint('length(name) <= 100', name='ck_users_name_len'),
    )
    op.create_index('idx_users_active', 'users', ['is_active'])

    op.create_table(
        'notes',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('tags', TagListType(), nullable=False),
        sa.Column('visibility', sa.String(length=10), nullable=False),
        sa.Column('public_token', sa.String(length=64), nullable=True, unique=True),
        sa.Column(
            'owner_id', GUID(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "visibility IN ('private', 'shared', 'public')", name='ck_notes_visibility'
        ),
        sa.CheckConstraint(
            "(visibility = 'public' AND public_token IS NOT NULL)"
            " OR (visibility <> 'public' AND public_token IS NULL)",
            name='ck_notes_public_token',
        ),
        sa.CheckConstraint('length(title) <= 200', name='ck_notes_title_len'),
    )
    op.create_index('idx_notes_owner_id', 'notes', ['owner_id'])
    op.create_index('idx_notes_visibility', 'notes', ['visibility'])
    op.create_index('idx_notes_owner_updated', 'notes', ['owner_id', 'updated_at'])

    op.create_table(
        'shares',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('note_id', GUID(), sa.ForeignKey('notes.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'shared_by_user_id', GUID(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column(
            'shared_with_user_id', GUID(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('permission', sa.String(length=10), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('note_id', 'shared_with_user_id', name='uq_shares_note_recipient'),
        sa.CheckConstraint("permission IN ('read', 'write')", name='ck_shares_permission'),
        sa.CheckConstraint('shared_by_user_id <> shared_with_user_id', name='ck_shares_not_self'),
    )
    op.create_index('idx_shares_note_id', 'shares', ['note_id'])
    op.create_index('idx_shares_shared_by', 'shares', ['shared_by_user_id'])
    op.create_index('idx_shares_shared_with', 'shares', ['shared_with_user_id'])

    op.create_table(
        'refresh_tokens',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('token', sa.String(length=255), nullable=False, unique=True),
        sa.Column('user_id', GUID(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_refresh_tokens_user_id', 'refresh_tokens', ['user_id'])
    op.create_index('idx_refresh_tokens_expires_at', 'refresh_tokens', ['expires_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('refresh_tokens')
    op.drop_table('shares')
    op.drop_table('notes')
    op.drop_table('users')
