"""Add users and follows tables

Revision ID: 20260301120000
Revises:
Create Date: 2026-03-01 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20260301120000'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('user_nicename', sa.String(), nullable=True),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_user_nicename', 'users', ['user_nicename'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Leaders are not always users (e.g. blogs), so no foreign keys here
    op.create_table(
        'follows',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('leader_id', sa.Integer(), nullable=False),
        sa.Column('follower_id', sa.Integer(), nullable=False),
        sa.Column('follow_type', sa.String(length=75), server_default='', nullable=False),
        sa.Column('date_recorded', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('leader_id', 'follower_id', 'follow_type', name='_leader_follower_type_uc')
    )

    # Create indexes for performance
    op.create_index('ix_follows_id', 'follows', ['id'])
    op.create_index('ix_follows_leader_type', 'follows', ['leader_id', 'follow_type'])
    op.create_index('ix_follows_follower_type', 'follows', ['follower_id', 'follow_type'])


def downgrade() -> None:
    op.drop_index('ix_follows_follower_type', table_name='follows')
    op.drop_index('ix_follows_leader_type', table_name='follows')
    op.drop_index('ix_follows_id', table_name='follows')
    op.drop_table('follows')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_user_nicename', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
