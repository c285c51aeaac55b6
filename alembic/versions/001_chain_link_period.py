"""Initial schema — chain, pseudonym_link, period.

Revision ID: 001_chain_link_period
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_chain_link_period"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "chain",
        sa.Column("chain_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "pseudonym_link",
        sa.Column("token_hash", sa.LargeBinary(32), nullable=False),
        sa.Column("chain_id", UUID(as_uuid=True), sa.ForeignKey("chain.chain_id"), nullable=False),
        sa.PrimaryKeyConstraint("token_hash", name="pk_pseudonym_link"),
    )
    op.create_index("ix_pseudonym_link_chain_id", "pseudonym_link", ["chain_id"])

    op.create_table(
        "period",
        sa.Column("period_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("chain_id", UUID(as_uuid=True), sa.ForeignKey("chain.chain_id"), nullable=False),
        sa.Column("min_year", sa.SmallInteger, nullable=False),
        sa.Column("max_year", sa.SmallInteger, nullable=False),
        sa.CheckConstraint("min_year <= max_year", name="ck_period_year_order"),
    )
    op.create_index("idx_period_chain_id", "period", ["chain_id"])
    # purger scans by max_year
    op.create_index("idx_period_max_year", "period", ["max_year"])


def downgrade() -> None:
    op.drop_index("idx_period_max_year", table_name="period")
    op.drop_index("idx_period_chain_id", table_name="period")
    op.drop_table("period")
    op.drop_index("ix_pseudonym_link_chain_id", table_name="pseudonym_link")
    op.drop_table("pseudonym_link")
    op.drop_table("chain")
