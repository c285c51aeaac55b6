"""Pseudonym Processor — turns a pseudonym pair + date into the stable period pseudonym.

Invariants:
    - Raw pseudonyms are hashed first and never leave this function
    - Chain resolution runs before period resolution, each in its own transaction
    - Semantic errors from the resolvers propagate unchanged
    - Feature flag off -> fixed placeholder pseudonym, store untouched

Design Decisions:
    - Plain class wired per request: holds the request's session, no shared mutable state
"""

import uuid
from datetime import date
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from surveillance_pseudonym.config import Settings
from surveillance_pseudonym.core.hash_tokens import TokenHasher
from surveillance_pseudonym.schemas.pseudonym import PseudonymInput, PseudonymOutput
from surveillance_pseudonym.services.resolve_chain import ChainResolver
from surveillance_pseudonym.services.resolve_period import PeriodResolver

CODE_SYSTEM = "https://demis.rki.de/fhir/sid/SurveillancePatientPseudonym"
UUID_PREFIX = "urn:uuid:"
PLACEHOLDER_PSEUDONYM = uuid.UUID("10101010-1010-1010-1010-101010101010")


def to_output(pseudonym: uuid.UUID) -> PseudonymOutput:
    return PseudonymOutput(system=CODE_SYSTEM, value=f"{UUID_PREFIX}{pseudonym}")


class PseudonymProcessor:
    """Hash -> chain -> period orchestration for one request."""

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        hasher: TokenHasher,
        today: Callable[[], date] = date.today,
    ):
        self.individual_pseudonym = settings.individual_pseudonym
        self.hasher = hasher
        self.chain_resolver = ChainResolver(db)
        self.period_resolver = PeriodResolver.from_settings(db, settings, today)

    async def create_pseudonym(self, data: PseudonymInput) -> PseudonymOutput:
        if not self.individual_pseudonym:
            return to_output(PLACEHOLDER_PSEUDONYM)

        chain = await self.chain_resolver.resolve(
            self.hasher.hash(data.pseudonym1),
            self.hasher.hash(data.pseudonym2),
        )
        period_id = await self.period_resolver.resolve(chain.chain_id, data.date)
        return to_output(period_id)
