"""Create download_links and audit_log tables

Revision ID: 001_create_download_links
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_create_download_links'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'download_links',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('object_key', sa.String(length=1024), nullable=False),
        sa.Column('bucket', sa.String(length=255), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('max_downloads', sa.Integer(), nullable=True),
        sa.Column('downloads_served', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('download_filename', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('downloads_served >= 0', name='ck_download_links_served_non_negative'),
        sa.CheckConstraint(
            'max_downloads IS NULL OR max_downloads > 0',
            name='ck_download_links_max_downloads_positive',
        ),
    )
    op.create_index('ix_download_links_expires_at', 'download_links', ['expires_at'])
    op.create_index('ix_download_links_created_at', 'download_links', ['created_at'])

    op.create_table(
        'audit_log',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('at_utc', sa.DateTime(timezone=True), nullable=False),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('actor', sa.String(length=255), nullable=True),
        sa.Column('link_id', sa.String(length=64), nullable=True),
        sa.Column('details', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_log_at_utc', 'audit_log', ['at_utc'])
    op.create_index('ix_audit_log_link_id', 'audit_log', ['link_id'])


def downgrade():
    op.drop_index('ix_audit_log_link_id', 'audit_log')
    op.drop_index('ix_audit_log_at_utc', 'audit_log')
    op.drop_table('audit_log')
    op.drop_index('ix_download_links_created_at', 'download_links')
    op.drop_index('ix_download_links_expires_at', 'download_links')
    op.drop_table('download_links')
