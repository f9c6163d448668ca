"""create catalog job / catalog / catalog product tables

Revision ID: 3b7e1f0c9a21
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '3b7e1f0c9a21'
down_revision = None
branch_labels = None
depends_on = None


JSON_DOC = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade() -> None:
    op.create_table(
        'catalog_jobs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=64), nullable=False),
        sa.Column('platform', sa.String(length=16), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='queued'),
        sa.Column('progress', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('total_products', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('processed_products', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('catalog_name', sa.String(length=255), nullable=True),
        sa.Column('catalog_id', sa.String(length=36), nullable=True),
        sa.Column('result', JSON_DOC, nullable=True),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_catalog_jobs')),
    )
    op.create_index(op.f('ix_catalog_jobs_owner_id'), 'catalog_jobs', ['owner_id'], unique=False)
    op.create_index('idx_catalog_job_status', 'catalog_jobs', ['status', 'created_at'], unique=False)

    op.create_table(
        'catalogs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('platform', sa.String(length=16), nullable=False),
        sa.Column('product_model', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='draft'),
        sa.Column('product_refs', JSON_DOC, nullable=False),
        sa.Column('total_products', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_catalogs')),
    )
    op.create_index(op.f('ix_catalogs_owner_id'), 'catalogs', ['owner_id'], unique=False)

    op.create_table(
        'catalog_products',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('catalog_id', sa.String(length=36), nullable=False),
        sa.Column('platform', sa.String(length=16), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('identity_key', sa.String(length=255), nullable=True),
        sa.Column('data', JSON_DOC, nullable=False),
        sa.Column('ai_generated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('generated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['catalog_id'], ['catalogs.id'],
            name=op.f('fk_catalog_products_catalog_id_catalogs'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_catalog_products')),
    )
    op.create_index(op.f('ix_catalog_products_catalog_id'), 'catalog_products', ['catalog_id'], unique=False)
    op.create_index('idx_catalog_products_catalog_position', 'catalog_products', ['catalog_id', 'position'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_catalog_products_catalog_position', table_name='catalog_products')
    op.drop_index(op.f('ix_catalog_products_catalog_id'), table_name='catalog_products')
    op.drop_table('catalog_products')
    op.drop_index(op.f('ix_catalogs_owner_id'), table_name='catalogs')
    op.drop_table('catalogs')
    op.drop_index('idx_catalog_job_status', table_name='catalog_jobs')
    op.drop_index(op.f('ix_catalog_jobs_owner_id'), table_name='catalog_jobs')
    op.drop_table('catalog_jobs')
