"""Create clients, invoices and invoice_sequences

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa


revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'clients',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('owner_id', sa.String(255), nullable=False),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('client_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('designation', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('messages', sa.JSON(), nullable=False),
        sa.Column('quote', sa.JSON()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
    )
    op.create_index('idx_clients_owner_created', 'clients', ['owner_id', 'created_at'])

    op.create_table(
        'invoices',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('owner_id', sa.String(255), nullable=False),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id', ondelete='SET NULL')),
        sa.Column('invoice_number', sa.String(50), nullable=False, unique=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('client_name', sa.String(255), nullable=False),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('tax_rate', sa.Numeric(5, 4), nullable=False),
        sa.Column('subtotal', sa.Integer(), nullable=False),
        sa.Column('tax', sa.Integer(), nullable=False),
        sa.Column('total', sa.Integer(), nullable=False),
        sa.Column('due_date', sa.DateTime(), nullable=False),
        sa.Column('paid_at', sa.DateTime()),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.CheckConstraint('tax_rate >= 0 AND tax_rate <= 1', name='ck_invoices_tax_rate'),
        sa.CheckConstraint('total = subtotal + tax', name='ck_invoices_total'),
    )
    op.create_index('idx_invoices_owner_created', 'invoices', ['owner_id', 'created_at'])
    op.create_index('idx_invoices_status_due', 'invoices', ['status', 'due_date'])

    op.create_table(
        'invoice_sequences',
        sa.Column('year', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('last_value', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('invoice_sequences')
    op.drop_index('idx_invoices_status_due', table_name='invoices')
    op.drop_index('idx_invoices_owner_created', table_name='invoices')
    op.drop_table('invoices')
    op.drop_index('idx_clients_owner_created', table_name='clients')
    op.drop_table('clients')
