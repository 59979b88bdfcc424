"""create companies and income records tables

Revision ID: 5f1c2a9d7b30
Revises:
Create Date: 2025-02-11 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5f1c2a9d7b30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'companies',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('cik', sa.Integer(), nullable=False),
        sa.Column('entity_name', sa.String(length=500), nullable=False),
        sa.Column('standard_fundable_amount', sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column('special_fundable_amount', sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_companies_cik'), 'companies', ['cik'], unique=True)

    op.create_table(
        'income_records',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('company_id', sa.Uuid(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('form', sa.String(length=10), nullable=False),
        sa.Column('frame', sa.String(length=20), nullable=True),
        sa.Column('filed_date', sa.Date(), nullable=False),
        sa.Column('accession_number', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )

    # Create indexes
    op.create_index(op.f('ix_income_records_company_id'), 'income_records', ['company_id'], unique=False)
    op.create_index(op.f('ix_income_records_year'), 'income_records', ['year'], unique=False)
    op.create_index('ix_income_records_company_id_year', 'income_records', ['company_id', 'year'], unique=False)


def downgrade() -> None:
    # Drop indexes first
    op.drop_index('ix_income_records_company_id_year', table_name='income_records')
    op.drop_index(op.f('ix_income_records_year'), table_name='income_records')
    op.drop_index(op.f('ix_income_records_company_id'), table_name='income_records')
    op.drop_table('income_records')

    op.drop_index(op.f('ix_companies_cik'), table_name='companies')
    op.drop_table('companies')
