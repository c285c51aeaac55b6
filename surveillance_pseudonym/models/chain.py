"""Chain ORM — aggregate root for one subject's pseudonym lineage.

Invariants:
    - chain_id is UUID primary key, generated by the chain resolver
    - created_at is set by the database on insert and never updated
    - The chain row is the lock target that serializes all period reads/writes of the chain

Design Decisions:
    - Identity-only table: links and periods reference chain_id without ORM relationships,
      so loading a chain for locking never pulls its children
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from surveillance_pseudonym.db.base import Base


class Chain(Base):
    """Chain aggregate root — owns links and periods."""
    __tablename__ = "chain"

    chain_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"Chain(chain_id={self.chain_id})"
