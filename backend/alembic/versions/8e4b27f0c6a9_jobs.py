"""jobs

Revision ID: 8e4b27f0c6a9
Revises: 3c1d9a7e5b20
Create Date: 2026-10-05 09:30:07.552981

Equity is NUMERIC(4,3) so "has equity" compares exact decimals, never floats.
Search on title uses ILIKE; the lower(title) index serves exact-title lookups.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8e4b27f0c6a9'
down_revision: Union[str, Sequence[str], None] = '3c1d9a7e5b20'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create jobs table."""
    op.create_table(
        'jobs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('salary', sa.Integer(), nullable=True),
        sa.Column('equity', sa.Numeric(precision=4, scale=3), nullable=True),
        sa.Column('company_handle', sa.String(length=25), nullable=False),
        sa.CheckConstraint('salary >= 0', name='ck_jobs_salary'),
        sa.CheckConstraint('equity >= 0 AND equity <= 1.0', name='ck_jobs_equity'),
        sa.ForeignKeyConstraint(['company_handle'], ['companies.handle'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('title', 'company_handle', name='uq_job_title_company'),
    )
    op.create_index('ix_jobs_company_handle', 'jobs', ['company_handle'])
    op.execute("CREATE INDEX ix_jobs_lower_title ON jobs (lower(title))")


def downgrade() -> None:
    """Drop jobs table."""
    op.execute("DROP INDEX IF EXISTS ix_jobs_lower_title")
    op.drop_index('ix_jobs_company_handle', table_name='jobs')
    op.drop_table('jobs')
