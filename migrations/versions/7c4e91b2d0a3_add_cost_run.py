"""add cost_run

Revision ID: 7c4e91b2d0a3
Revises: 1a2f0c9d4e57
Create Date: 2025-10-02 14:30:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '7c4e91b2d0a3'
down_revision = '1a2f0c9d4e57'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'cost_run',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('total_cents', sa.Integer(), nullable=False),
        sa.Column('items_updated', sa.Integer(), nullable=False),
        sa.Column('average_cents', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.CheckConstraint('total_cents > 0', name='ck_cost_run_total_positive'),
        sa.CheckConstraint('start_date <= end_date', name='ck_cost_run_range'),
    )
    op.create_index('ix_item_intake_date', 'item', ['intake_date'])


def downgrade():
    op.drop_index('ix_item_intake_date', table_name='item')
    op.drop_table('cost_run')
