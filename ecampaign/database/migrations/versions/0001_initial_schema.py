"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=80), nullable=False, unique=True),
        sa.Column('email', sa.String(length=254), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=200), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('email_verified', sa.Boolean(), nullable=False),
        sa.Column('verify_code', sa.String(length=6), nullable=True),
        sa.Column('verify_code_expires', sa.DateTime(), nullable=True),
        sa.Column('reset_code', sa.String(length=6), nullable=True),
        sa.Column('reset_code_expires', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'politician_applications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, unique=True),
        sa.Column('full_name', sa.String(length=120), nullable=False),
        sa.Column('seat', sa.String(length=50), nullable=False),
        sa.Column('county', sa.String(length=80), nullable=True),
        sa.Column('constituency', sa.String(length=80), nullable=True),
        sa.Column('party', sa.String(length=80), nullable=True),
        sa.Column('motivation', sa.Text(), nullable=False),
        sa.Column('fee', sa.String(length=40), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'politician_profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, unique=True),
        sa.Column('full_name', sa.String(length=120), nullable=False),
        sa.Column('seat', sa.String(length=50), nullable=False),
        sa.Column('county', sa.String(length=80), nullable=True),
        sa.Column('constituency', sa.String(length=80), nullable=True),
        sa.Column('party', sa.String(length=80), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('campaign', sa.Text(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    for name in ('manifestos', 'achievements', 'promises'):
        columns = [
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('politician_id', sa.Integer(), sa.ForeignKey('politician_profiles.id'), nullable=False),
        ]
        if name == 'manifestos':
            columns += [sa.Column('category', sa.String(length=40), nullable=False),
                        sa.Column('content', sa.Text(), nullable=False)]
        elif name == 'achievements':
            columns += [sa.Column('title', sa.String(length=200), nullable=False),
                        sa.Column('description', sa.Text(), nullable=True)]
        else:
            columns += [sa.Column('content', sa.Text(), nullable=False)]
        columns.append(sa.Column('created_at', sa.DateTime(), nullable=True))
        op.create_table(name, *columns)

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('target_type', sa.String(length=40), nullable=False),
        sa.Column('target_id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'ratings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('target_type', sa.String(length=40), nullable=False),
        sa.Column('target_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('user_id', 'target_type', 'target_id', name='uq_rating_user_target'),
    )
    op.create_table(
        'ground_updates',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('location', sa.String(length=120), nullable=False),
        sa.Column('category', sa.String(length=60), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('repost_of', sa.Integer(), sa.ForeignKey('ground_updates.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'ground_likes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('ground_id', sa.Integer(), sa.ForeignKey('ground_updates.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('user_id', 'ground_id', name='uq_ground_like_user'),
    )
    op.create_table(
        'ground_comments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('ground_id', sa.Integer(), sa.ForeignKey('ground_updates.id'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'ground_reposts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('ground_id', sa.Integer(), sa.ForeignKey('ground_updates.id'), nullable=False),
        sa.Column('repost_id', sa.Integer(), sa.ForeignKey('ground_updates.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )


def downgrade():
    for name in ('ground_reposts', 'ground_comments', 'ground_likes', 'ground_updates',
                 'ratings', 'comments', 'promises', 'achievements', 'manifestos',
                 'politician_profiles', 'politician_applications', 'users'):
        op.drop_table(name)
