"""ORM Models — SQLAlchemy declarative models for chains, links and periods.

Invariants:
    - All models inherit from Base (db/base.py)
    - Chain is the aggregate root; links and periods are scoped by chain_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from surveillance_pseudonym.models.chain import Chain  # noqa: F401
from surveillance_pseudonym.models.pseudonym_link import PseudonymLink  # noqa: F401
from surveillance_pseudonym.models.period import Period  # noqa: F401
