"""Create CSR platform schema

Revision ID: 0001_create_csr_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_create_csr_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

GOAL_PERCENTAGE_EXPRESSION = (
    "CASE WHEN goal_amount > 0 THEN "
    "CASE WHEN current_amount >= goal_amount THEN 100 "
    "ELSE ROUND(current_amount * 100.0 / goal_amount, 2) END "
    "ELSE 0 END"
)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create every table used by the central and tenant databases"""

    op.create_table('organizations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.JSON(), nullable=False),
        sa.Column('description', sa.JSON(), nullable=False),
        sa.Column('mission', sa.JSON(), nullable=False),
        sa.Column('registration_number', sa.String(100), nullable=True),
        sa.Column('tax_id', sa.String(100), nullable=True),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('website', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('address', sa.String(255), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('postal_code', sa.String(20), nullable=True),
        sa.Column('country', sa.String(2), nullable=True),
        sa.Column('subdomain', sa.String(63), nullable=True),
        sa.Column('logo_url', sa.String(512), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('verification_date', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('registration_number'),
    )
    op.create_index('ix_organizations_subdomain', 'organizations', ['subdomain'], unique=True)
    op.create_index('ix_organizations_is_verified', 'organizations', ['is_verified'])
    op.create_index('ix_organizations_created_at', 'organizations', ['created_at'])
    op.create_index('ix_organizations_deleted_at', 'organizations', ['deleted_at'])

    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(32), server_default='employee', nullable=False),
        sa.Column('status', sa.String(32), server_default='active', nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=True),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('job_title', sa.String(100), nullable=True),
        sa.Column('locale', sa.String(5), server_default='en', nullable=False),
        sa.Column('email_verified_at', sa.DateTime(), nullable=True),
        sa.Column('suspension_reason', sa.String(500), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_organization_id', 'users', ['organization_id'])
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    op.create_table('categories',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.JSON(), nullable=False),
        sa.Column('description', sa.JSON(), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('status', sa.String(16), server_default='active', nullable=False),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
        sa.Column('color', sa.String(32), nullable=True),
        sa.Column('icon', sa.String(64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)
    op.create_index('ix_categories_created_at', 'categories', ['created_at'])

    op.create_table('currencies',
        sa.Column('code', sa.String(3), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('symbol', sa.String(10), nullable=False),
        sa.Column('flag', sa.String(16), nullable=True),
        sa.Column('decimal_places', sa.Integer(), server_default='2', nullable=False),
        sa.Column('decimal_separator', sa.String(1), server_default='.', nullable=False),
        sa.Column('thousands_separator', sa.String(1), server_default=',', nullable=False),
        sa.Column('symbol_position', sa.String(8), server_default='before', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('is_default', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('exchange_rate', sa.Numeric(18, 8), server_default='1', nullable=False),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
        sa.Column('rate_updated_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('code'),
    )
    op.create_index('ix_currencies_created_at', 'currencies', ['created_at'])

    op.create_table('teams',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.String(1000), nullable=True),
        sa.Column('leader_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['leader_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_teams_organization_id', 'teams', ['organization_id'])
    op.create_index('ix_teams_created_at', 'teams', ['created_at'])

    op.create_table('team_members',
        sa.Column('team_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('role', sa.String(16), server_default='member', nullable=False),
        sa.Column('joined_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('team_id', 'user_id'),
    )

    # goal_percentage is stored and kept in sync by the database
    op.create_table('campaigns',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.JSON(), nullable=False),
        sa.Column('description', sa.JSON(), nullable=False),
        sa.Column('goal_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('current_amount', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('currency', sa.String(3), server_default='EUR', nullable=False),
        sa.Column('goal_percentage', sa.Numeric(5, 2), sa.Computed(GOAL_PERCENTAGE_EXPRESSION, persisted=True)),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(32), server_default='draft', nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('category_id', sa.Uuid(), nullable=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('team_id', sa.Uuid(), nullable=True),
        sa.Column('donations_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('featured_image', sa.String(512), nullable=True),
        sa.Column('submitted_for_approval_at', sa.DateTime(), nullable=True),
        sa.Column('approved_by', sa.Uuid(), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('rejected_by', sa.Uuid(), nullable=True),
        sa.Column('rejected_at', sa.DateTime(), nullable=True),
        sa.Column('rejection_reason', sa.String(1000), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id']),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_campaigns_status', 'campaigns', ['status'])
    op.create_index('ix_campaigns_end_date', 'campaigns', ['end_date'])
    op.create_index('ix_campaigns_organization_id', 'campaigns', ['organization_id'])
    op.create_index('ix_campaigns_category_id', 'campaigns', ['category_id'])
    op.create_index('ix_campaigns_user_id', 'campaigns', ['user_id'])
    op.create_index('ix_campaigns_created_at', 'campaigns', ['created_at'])
    op.create_index('ix_campaigns_deleted_at', 'campaigns', ['deleted_at'])

    op.create_table('donations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('campaign_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('currency', sa.String(3), server_default='EUR', nullable=False),
        sa.Column('payment_method', sa.String(32), nullable=False),
        sa.Column('payment_gateway', sa.String(32), nullable=True),
        sa.Column('transaction_id', sa.String(255), nullable=True),
        sa.Column('status', sa.String(32), server_default='pending', nullable=False),
        sa.Column('anonymous', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('recurring', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('recurring_frequency', sa.String(16), nullable=True),
        sa.Column('notes', sa.String(1000), nullable=True),
        sa.Column('failure_reason', sa.String(500), nullable=True),
        sa.Column('refund_reason', sa.String(500), nullable=True),
        sa.Column('donated_at', sa.DateTime(), nullable=False),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('refunded_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['campaign_id'], ['campaigns.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('transaction_id'),
    )
    op.create_index('ix_donations_campaign_id', 'donations', ['campaign_id'])
    op.create_index('ix_donations_user_id', 'donations', ['user_id'])
    op.create_index('ix_donations_status', 'donations', ['status'])
    op.create_index('ix_donations_donated_at', 'donations', ['donated_at'])
    op.create_index('ix_donations_created_at', 'donations', ['created_at'])

    op.create_table('tenants',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('subdomain', sa.String(63), nullable=False),
        sa.Column('database', sa.String(128), nullable=False),
        sa.Column('status', sa.String(16), server_default='pending', nullable=False),
        sa.Column('admin_data', sa.JSON(), nullable=False),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('provisioning_error', sa.String(1000), nullable=True),
        sa.Column('provisioned_at', sa.DateTime(), nullable=True),
        sa.Column('suspended_at', sa.DateTime(), nullable=True),
        sa.Column('suspension_reason', sa.String(500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('organization_id'),
        sa.UniqueConstraint('database'),
    )
    op.create_index('ix_tenants_subdomain', 'tenants', ['subdomain'], unique=True)
    op.create_index('ix_tenants_status', 'tenants', ['status'])
    op.create_index('ix_tenants_created_at', 'tenants', ['created_at'])

    op.create_table('notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('notifiable_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(64), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('channel', sa.String(16), server_default='database', nullable=False),
        sa.Column('priority', sa.String(16), server_default='normal', nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('scheduled_at', sa.DateTime(), nullable=True),
        sa.Column('sent_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['notifiable_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notifications_notifiable_id', 'notifications', ['notifiable_id'])
    op.create_index('ix_notifications_type', 'notifications', ['type'])
    op.create_index('ix_notifications_read_at', 'notifications', ['read_at'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])

    op.create_table('export_jobs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=True),
        sa.Column('resource_type', sa.String(32), nullable=False),
        sa.Column('format', sa.String(16), nullable=False),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('filters', sa.JSON(), nullable=False),
        sa.Column('progress_percentage', sa.Integer(), server_default='0', nullable=False),
        sa.Column('progress_message', sa.String(255), nullable=True),
        sa.Column('processed_records', sa.Integer(), server_default='0', nullable=False),
        sa.Column('total_records', sa.Integer(), server_default='0', nullable=False),
        sa.Column('file_path', sa.String(512), nullable=True),
        sa.Column('file_size', sa.BigInteger(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_export_jobs_user_id', 'export_jobs', ['user_id'])
    op.create_index('ix_export_jobs_status', 'export_jobs', ['status'])
    op.create_index('ix_export_jobs_expires_at', 'export_jobs', ['expires_at'])
    op.create_index('ix_export_jobs_created_at', 'export_jobs', ['created_at'])

    op.create_table('import_jobs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=True),
        sa.Column('import_type', sa.String(32), nullable=False),
        sa.Column('file_path', sa.String(512), nullable=False),
        sa.Column('original_filename', sa.String(255), nullable=False),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('options', sa.JSON(), nullable=False),
        sa.Column('total_records', sa.Integer(), server_default='0', nullable=False),
        sa.Column('processed_records', sa.Integer(), server_default='0', nullable=False),
        sa.Column('successful_records', sa.Integer(), server_default='0', nullable=False),
        sa.Column('failed_records', sa.Integer(), server_default='0', nullable=False),
        sa.Column('skipped_records', sa.Integer(), server_default='0', nullable=False),
        sa.Column('errors', sa.JSON(), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_import_jobs_user_id', 'import_jobs', ['user_id'])
    op.create_index('ix_import_jobs_status', 'import_jobs', ['status'])
    op.create_index('ix_import_jobs_created_at', 'import_jobs', ['created_at'])

    op.create_table('audit_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('user_name', sa.String(255), nullable=False),
        sa.Column('user_email', sa.String(255), nullable=False),
        sa.Column('user_role', sa.String(32), nullable=False),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('entity_type', sa.String(64), nullable=False),
        sa.Column('entity_id', sa.String(64), nullable=True),
        sa.Column('old_values', sa.JSON(), nullable=False),
        sa.Column('new_values', sa.JSON(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=False),
        sa.Column('performed_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_logs_user_id', 'audit_logs', ['user_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_entity_type', 'audit_logs', ['entity_type'])
    op.create_index('ix_audit_logs_entity_id', 'audit_logs', ['entity_id'])
    op.create_index('ix_audit_logs_performed_at', 'audit_logs', ['performed_at'])


def downgrade() -> None:
    """Drop all tables"""
    op.drop_table('audit_logs')
    op.drop_table('import_jobs')
    op.drop_table('export_jobs')
    op.drop_table('notifications')
    op.drop_table('tenants')
    op.drop_table('donations')
    op.drop_table('campaigns')
    op.drop_table('team_members')
    op.drop_table('teams')
    op.drop_table('currencies')
    op.drop_table('categories')
    op.drop_table('users')
    op.drop_table('organizations')
