"""Period ORM — a closed surveillance-year interval of one chain.

Invariants:
    - period_id is the stable pseudonym handed out for every date inside the interval
    - chain_id is immutable; min_year <= max_year
    - Periods of one chain never overlap (guaranteed by the resolver under the chain lock)

Design Decisions:
    - SMALLINT years: four-digit years, compact index
    - No relationship() to Chain: the resolver loads periods explicitly, ordered by max_year
"""

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Index, SmallInteger
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from surveillance_pseudonym.db.base import Base


class Period(Base):
    """Year interval whose id is the caller-visible pseudonym."""
    __tablename__ = "period"
    __table_args__ = (
        Index("idx_period_chain_id", "chain_id"),
        Index("idx_period_max_year", "max_year"),
        CheckConstraint("min_year <= max_year", name="ck_period_year_order"),
    )

    period_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    chain_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("chain.chain_id"), nullable=False,
    )
    min_year: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    max_year: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    def __repr__(self) -> str:
        return (
            f"Period(period_id={self.period_id}, "
            f"years={self.min_year}-{self.max_year})"
        )
