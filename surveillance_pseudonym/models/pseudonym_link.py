"""PseudonymLink ORM — maps one hashed pseudonym token to its chain.

Invariants:
    - token_hash is the primary key (constraint pk_pseudonym_link): a token belongs to at
      most one chain, ever. Concurrent link races are detected through this constraint.
    - chain_id is immutable after insert
    - Never stores the raw pseudonym

Design Decisions:
    - Named primary key constraint: the chain resolver recognizes the uniqueness race by
      the constraint name in the driver error
"""

import uuid

from sqlalchemy import ForeignKey, LargeBinary, PrimaryKeyConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from surveillance_pseudonym.db.base import Base

PK_CONSTRAINT_NAME = "pk_pseudonym_link"


class PseudonymLink(Base):
    """Token -> chain link."""
    __tablename__ = "pseudonym_link"
    __table_args__ = (
        PrimaryKeyConstraint("token_hash", name=PK_CONSTRAINT_NAME),
    )

    token_hash: Mapped[bytes] = mapped_column(LargeBinary(32))
    chain_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("chain.chain_id"),
        nullable=False, index=True,
    )

    def __repr__(self) -> str:
        # token deliberately omitted
        return f"PseudonymLink(chain_id={self.chain_id})"
