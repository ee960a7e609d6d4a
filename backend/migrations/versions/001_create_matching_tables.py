"""Create inventory_item, item_barcode and item_alias tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Catalog items (owned by catalog management, read by matching)
    op.create_table(
        'inventory_item',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('org_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_inventory_item')
    )
    op.create_index('ix_inventory_item_org_id', 'inventory_item', ['org_id'])

    # Barcodes / supplier codes
    op.create_table(
        'item_barcode',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('org_id', sa.Uuid(), nullable=False),
        sa.Column('item_id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.Text(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_item_barcode'),
        sa.ForeignKeyConstraint(['item_id'], ['inventory_item.id'], ondelete='CASCADE', name='fk_item_barcode_item_id_inventory_item'),
        sa.UniqueConstraint('org_id', 'code', name='uq_item_barcode_org_code')
    )

    # Learned aliases (one item per normalized text per org)
    op.create_table(
        'item_alias',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('org_id', sa.Uuid(), nullable=False),
        sa.Column('alias_text', sa.Text(), nullable=False),
        sa.Column('raw_text_sample', sa.Text(), nullable=True),
        sa.Column('catalog_item_id', sa.Uuid(), nullable=False),
        sa.Column('source', sa.Text(), nullable=False),
        sa.Column('support_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('last_used_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_item_alias'),
        sa.ForeignKeyConstraint(['catalog_item_id'], ['inventory_item.id'], ondelete='CASCADE', name='fk_item_alias_catalog_item_id_inventory_item'),
        sa.UniqueConstraint('org_id', 'alias_text', name='uq_item_alias_org_text')
    )
    op.create_index('ix_item_alias_org_id_catalog_item_id', 'item_alias', ['org_id', 'catalog_item_id'])

    op.create_check_constraint(
        'ck_item_alias_source',
        'item_alias',
        "source IN ('barcode', 'photo', 'manual', 'receipt')"
    )


def downgrade():
    op.drop_table('item_alias')
    op.drop_table('item_barcode')
    op.drop_index('ix_inventory_item_org_id', table_name='inventory_item')
    op.drop_table('inventory_item')
