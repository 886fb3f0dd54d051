"""initial_ledger_schema

Creates the budget ledger tables together with the user, project, expense,
notification and audit tables they reference.

Revision ID: 3c7d2a91e4f0
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c7d2a91e4f0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_MONEY = sa.Numeric(15, 2)


def upgrade() -> None:
    op.create_table(
        'app_user',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(200), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(200), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('role', sa.String(30), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'project',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('code', sa.String(30), nullable=False, unique=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('project_head_id', sa.String(36), sa.ForeignKey('app_user.id'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'project_staff',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('project_id', sa.String(36), sa.ForeignKey('project.id'), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('app_user.id'), nullable=False),
        sa.Column('designation', sa.String(100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint('project_id', 'user_id', name='uq_project_staff_member'),
    )

    op.create_table(
        'budget_entry',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('project_id', sa.String(36), sa.ForeignKey('project.id'), nullable=False),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('fiscal_year', sa.String(7), nullable=False),
        sa.Column('allocated_amount', _MONEY, nullable=False, server_default='0'),
        sa.Column('utilized_amount', _MONEY, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('project_id', 'category', 'fiscal_year', name='uq_budget_entry_slot'),
    )
    op.create_index('ix_budget_entry_project_id', 'budget_entry', ['project_id'])
    op.create_index('ix_budget_entry_fiscal_year', 'budget_entry', ['fiscal_year'])

    op.create_table(
        'budget_request',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('project_id', sa.String(36), sa.ForeignKey('project.id'), nullable=False),
        sa.Column('requested_by_id', sa.String(36), sa.ForeignKey('app_user.id'), nullable=False),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('amount', _MONEY, nullable=False),
        sa.Column('justification', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('approved_by_id', sa.String(36), sa.ForeignKey('app_user.id'), nullable=True),
        sa.Column('approved_amount', _MONEY, nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('fiscal_year', sa.String(7), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_budget_request_project_id', 'budget_request', ['project_id'])
    op.create_index('ix_budget_request_status', 'budget_request', ['status'])

    op.create_table(
        'budget_transfer',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('fiscal_year', sa.String(7), nullable=False),
        sa.Column('from_project_id', sa.String(36), sa.ForeignKey('project.id'), nullable=True),
        sa.Column('to_project_id', sa.String(36), sa.ForeignKey('project.id'), nullable=True),
        sa.Column('from_category', sa.String(20), nullable=True),
        sa.Column('to_category', sa.String(20), nullable=True),
        sa.Column('amount', _MONEY, nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('transferred_by_id', sa.String(36), sa.ForeignKey('app_user.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_budget_transfer_fiscal_year', 'budget_transfer', ['fiscal_year'])

    op.create_table(
        'budget_archive',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('project_id', sa.String(36), sa.ForeignKey('project.id'), nullable=False),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('fiscal_year', sa.String(7), nullable=False),
        sa.Column('allocated_amount', _MONEY, nullable=False),
        sa.Column('utilized_amount', _MONEY, nullable=False),
        sa.Column('carried_forward', _MONEY, nullable=False),
        sa.Column('returned_amount', _MONEY, nullable=False),
        sa.Column('carry_forward_percent', sa.Numeric(5, 2), nullable=False),
        sa.Column('archived_by_id', sa.String(36), sa.ForeignKey('app_user.id'), nullable=True),
        sa.Column('archived_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('project_id', 'category', 'fiscal_year', name='uq_budget_archive_slot'),
    )
    op.create_index('ix_budget_archive_fiscal_year', 'budget_archive', ['fiscal_year'])

    op.create_table(
        'expense',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('project_id', sa.String(36), sa.ForeignKey('project.id'), nullable=False),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('fiscal_year', sa.String(7), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('amount', _MONEY, nullable=False),
        sa.Column('vendor', sa.String(200), nullable=True),
        sa.Column('invoice_number', sa.String(100), nullable=True),
        sa.Column('invoice_date', sa.Date(), nullable=True),
        sa.Column('recorded_by_id', sa.String(36), sa.ForeignKey('app_user.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_expense_project_id', 'expense', ['project_id'])

    op.create_table(
        'notification',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('app_user.id'), nullable=False),
        sa.Column('type', sa.String(30), nullable=False),
        sa.Column('title', sa.String(300), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('link', sa.String(300), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('email_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_notification_user_id', 'notification', ['user_id'])

    op.create_table(
        'audit_log',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=True),
        sa.Column('action', sa.String(30), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.String(50), nullable=True),
        sa.Column('old_value', sa.JSON(), nullable=True),
        sa.Column('new_value', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('user_agent', sa.String(300), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_audit_log_user_id', 'audit_log', ['user_id'])


def downgrade() -> None:
    for table in (
        'audit_log',
        'notification',
        'expense',
        'budget_archive',
        'budget_transfer',
        'budget_request',
        'budget_entry',
        'project_staff',
        'project',
        'app_user',
    ):
        op.drop_table(table)
