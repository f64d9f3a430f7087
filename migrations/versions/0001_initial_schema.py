"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

Creates the two tables of the garment pool:
- items: one row per garment, keyed by the 4-digit system id
- audit_log: append-only event log, lookup reference to items
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

CATEGORIES = ('HOSE', 'POLO', 'SWEATJACKE', 'SOFTSHELLJACKE', 'HARDSHELLJACKE')
STATUSES = ('STORED', 'CIRCULATING', 'DEFECTIVE_REPAIR', 'DEFECTIVE_DISPOSED')
SEVERITIES = ('INFO', 'GREEN', 'YELLOW', 'RED')


def upgrade():
    op.create_table(
        'items',
        sa.Column('system_id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('barcode', sa.String(length=100), nullable=False),
        sa.Column(
            'category',
            sa.Enum(*CATEGORIES, name='category_enum', create_constraint=True),
            nullable=False,
        ),
        sa.Column('size', sa.String(length=50), nullable=False),
        sa.Column('known_to_partner', sa.Boolean(), nullable=False),
        sa.Column(
            'status',
            sa.Enum(*STATUSES, name='item_status_enum', create_constraint=True),
            nullable=False,
        ),
        sa.Column('remark', sa.Text(), nullable=True),
        sa.Column('stored_at', sa.DateTime(), nullable=True),
        sa.Column('issued_by', sa.String(length=100), nullable=True),
        sa.Column('issued_to', sa.String(length=100), nullable=True),
        sa.Column('issued_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            'system_id BETWEEN 1000 AND 9999', name='ck_items_system_id_range'
        ),
        sa.PrimaryKeyConstraint('system_id'),
    )
    op.create_index('ix_items_barcode', 'items', ['barcode'], unique=True)
    op.create_index('ix_items_status', 'items', ['status'])

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column(
            'severity',
            sa.Enum(*SEVERITIES, name='severity_enum', create_constraint=True),
            nullable=False,
        ),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('related_item_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_log_type', 'audit_log', ['type'])
    op.create_index('ix_audit_log_related_item_id', 'audit_log', ['related_item_id'])
    op.create_index('ix_audit_log_created_at', 'audit_log', ['created_at'])


def downgrade():
    op.drop_table('audit_log')
    op.drop_table('items')
    sa.Enum(name='severity_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='item_status_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='category_enum').drop(op.get_bind(), checkfirst=True)
