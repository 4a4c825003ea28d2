"""initial lifecycle schema

Revision ID: 1a2f0c9d4e57
Revises:
Create Date: 2025-09-01 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '1a2f0c9d4e57'
down_revision = None
branch_labels = None
depends_on = None

ITEM_STATUSES = ('INTAKE', 'STORED', 'LISTED', 'RESERVED', 'SOLD', 'RETURNED', 'DISCARDED')
LISTING_STATUSES = ('ACTIVE', 'SOLD', 'EXPIRED', 'REMOVED')


def _status(name, values):
    return sa.Enum(*values, name=name, native_enum=False, length=20)


def upgrade():
    op.create_table(
        'catalog_record',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('barcode', sa.String(32), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('author', sa.Text()),
        sa.Column('publisher', sa.Text()),
        sa.Column('pub_year', sa.Integer()),
        sa.Column('binding', sa.String(50)),
        sa.Column('image_url', sa.Text()),
        sa.Column('categories', sa.JSON()),
        sa.Column('product_type', sa.String(10), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_catalog_record_barcode', 'catalog_record', ['barcode'], unique=True)

    op.create_table(
        'item',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('barcode', sa.String(32), sa.ForeignKey('catalog_record.barcode')),
        sa.Column('condition_grade', sa.String(20)),
        sa.Column('condition_notes', sa.Text()),
        sa.Column('cost_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('intake_date', sa.DateTime()),
        sa.Column('listed_date', sa.DateTime()),
        sa.Column('sold_date', sa.DateTime()),
        sa.Column('sold_year', sa.Integer()),
        sa.Column('sold_month', sa.Integer()),
        sa.Column('status', _status('item_status', ITEM_STATUSES), nullable=False),
        sa.Column('location', sa.String(20)),
        sa.Column('lot_number', sa.Integer()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.CheckConstraint('cost_cents >= 0', name='ck_item_cost_non_negative'),
    )
    op.create_index('ix_item_barcode', 'item', ['barcode'])
    op.create_index('ix_item_lot_number', 'item', ['lot_number'])
    op.create_index('ix_item_status_location', 'item', ['status', 'location'])

    op.create_table(
        'item_status_history',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('item_id', sa.BigInteger(), sa.ForeignKey('item.id'), nullable=False),
        sa.Column('from_status', _status('item_status', ITEM_STATUSES)),
        sa.Column('to_status', _status('item_status', ITEM_STATUSES), nullable=False),
        sa.Column('channel', sa.String(50)),
        sa.Column('note', sa.Text()),
        sa.Column('changed_at', sa.DateTime()),
    )
    op.create_index('ix_item_status_history_item_id', 'item_status_history', ['item_id'])

    op.create_table(
        'listing',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('item_id', sa.BigInteger(), sa.ForeignKey('item.id'), nullable=False),
        sa.Column('channel', sa.String(50), nullable=False),
        sa.Column('external_id', sa.String(100)),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('status', _status('listing_status', LISTING_STATUSES), nullable=False),
        sa.Column('listed_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.CheckConstraint('price_cents >= 1', name='ck_listing_price_positive'),
    )
    op.create_index('ix_listing_item_status', 'listing', ['item_id', 'status'])

    op.create_table(
        'sales_order',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('channel', sa.String(50), nullable=False),
        sa.Column('external_ref', sa.String(100)),
        sa.Column('ordered_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_table(
        'order_line',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('order_id', sa.BigInteger(), sa.ForeignKey('sales_order.id'), nullable=False),
        sa.Column('item_id', sa.BigInteger(), nullable=False),
        sa.Column('sale_cents', sa.Integer(), nullable=False),
        sa.Column('qty', sa.Integer(), nullable=False, server_default='1'),
    )
    op.create_index('ix_order_line_item_id', 'order_line', ['item_id'])

    op.create_table(
        'cogs_record',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('item_id', sa.BigInteger(), sa.ForeignKey('item.id'), nullable=False, unique=True),
        sa.Column('cost_cents', sa.Integer(), nullable=False),
        sa.Column('sold_date', sa.DateTime(), nullable=False),
        sa.Column('sold_month', sa.Integer(), nullable=False),
        sa.Column('sold_year', sa.Integer(), nullable=False),
        sa.Column('financial_year', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_index('ix_cogs_financial_year_month', 'cogs_record', ['financial_year', 'sold_month'])


def downgrade():
    op.drop_index('ix_cogs_financial_year_month', table_name='cogs_record')
    op.drop_table('cogs_record')
    op.drop_index('ix_order_line_item_id', table_name='order_line')
    op.drop_table('order_line')
    op.drop_table('sales_order')
    op.drop_index('ix_listing_item_status', table_name='listing')
    op.drop_table('listing')
    op.drop_index('ix_item_status_history_item_id', table_name='item_status_history')
    op.drop_table('item_status_history')
    op.drop_index('ix_item_status_location', table_name='item')
    op.drop_index('ix_item_lot_number', table_name='item')
    op.drop_index('ix_item_barcode', table_name='item')
    op.drop_table('item')
    op.drop_index('ix_catalog_record_barcode', table_name='catalog_record')
    op.drop_table('catalog_record')
