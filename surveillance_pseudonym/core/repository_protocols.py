"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Core rules read periods and links through these structural types, never the ORM
    - Implementations provided by shell (SQLAlchemy models satisfy them as-is)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
"""

from typing import Protocol
from uuid import UUID


class PeriodLike(Protocol):
    """Structural contract for a period passed to the interval rules."""
    period_id: UUID
    min_year: int
    max_year: int


class LinkLike(Protocol):
    """Structural contract for a token -> chain link passed to the chain rules."""
    token_hash: bytes
    chain_id: UUID
