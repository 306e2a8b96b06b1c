"""Initial schema - content lifecycle, audit log and site settings

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# Seed rows for site_settings: (key, value, category)
SEED_SETTINGS = [
    ('company_name', 'Acme Corporation', 'general'),
    ('site_title', 'Acme Corporation - Company Profile', 'general'),
    ('site_tagline', 'Innovation for a Better Tomorrow', 'general'),
    ('contact_email', 'contact@acme.com', 'general'),
    ('timezone', 'UTC', 'general'),
    ('date_format', 'MM/dd/yyyy', 'general'),
    ('about_excerpt', 'Acme Corporation is a leading innovator in the industry.', 'company'),
    ('facebook_url', 'https://facebook.com/acme', 'company'),
    ('twitter_url', 'https://twitter.com/acme', 'company'),
    ('linkedin_url', 'https://linkedin.com/company/acme', 'company'),
    ('instagram_url', '', 'company'),
    ('address', '', 'company'),
    ('phone', '', 'company'),
    ('meta_title_template', '%title | Acme Corporation', 'seo'),
    ('meta_description_default', 'Learn more about Acme Corporation.', 'seo'),
    ('og_image_url', '', 'seo'),
    ('robots_default', 'index, follow', 'seo'),
    ('blog_enabled', 'true', 'features'),
    ('careers_enabled', 'true', 'features'),
    ('contact_form_enabled', 'false', 'features'),
]


def _publishable_columns():
    return [
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), unique=True, nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft', index=True),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False, index=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, default='editor', index=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, default=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # Publishable content tables
    op.create_table(
        'blog_posts',
        *_publishable_columns(),
        sa.Column('excerpt', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
    )
    op.create_table(
        'jobs',
        *_publishable_columns(),
        sa.Column('employment_type', sa.String(20), nullable=True),
        sa.Column('apply_url', sa.Text(), nullable=True),
    )
    op.create_table(
        'projects',
        *_publishable_columns(),
        sa.Column('client_name', sa.String(255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
    )

    # Audit log table (append-only)
    op.create_table(
        'audit_log',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('action', sa.String(100), nullable=False, index=True),
        sa.Column('resource_type', sa.String(50), nullable=False),
        sa.Column('resource_id', sa.Uuid(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=True),
    )
    op.create_index('ix_audit_log_resource', 'audit_log', ['resource_type', 'resource_id'])
    op.create_index('ix_audit_log_user_time', 'audit_log', ['user_id', 'created_at'])

    # Site settings table
    settings_table = op.create_table(
        'site_settings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('key', sa.String(100), unique=True, nullable=False),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('category', sa.String(50), nullable=False, index=True),
        sa.Column('updated_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.bulk_insert(
        settings_table,
        [
            {'id': uuid.uuid4(), 'key': key, 'value': value, 'category': category}
            for key, value, category in SEED_SETTINGS
        ],
    )


def downgrade() -> None:
    op.drop_table('site_settings')
    op.drop_index('ix_audit_log_user_time', table_name='audit_log')
    op.drop_index('ix_audit_log_resource', table_name='audit_log')
    op.drop_table('audit_log')
    op.drop_table('projects')
    op.drop_table('jobs')
    op.drop_table('blog_posts')
    op.drop_table('users')
