"""Chain Resolver — links a pair of pseudonym tokens to the chain of their subject.

Invariants:
    - A token is linked to at most one chain, enforced by the pk_pseudonym_link constraint
    - Neither token known -> one atomic insert of chain + two links
    - One token known -> one single-row link insert under the known chain
    - Both known, same chain -> no writes; different chains -> ChainInconsistentError
    - A uniqueness conflict is reconciled by rereading the links, never by retrying the write
    - Raw pseudonyms never reach this module, tokens are never logged

Design Decisions:
    - Optimistic insert + reread instead of locking: the common "new subject" path stays
      parallel, the constraint decides who won (ADR: race-tolerant uniqueness)
    - Every path ends its transaction before returning, so the period resolver starts
      its locked transaction fresh
"""

import logging
import uuid
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from surveillance_pseudonym.core.chain_rules import chain_id_of, missing_tokens
from surveillance_pseudonym.core.domain_types import ChainId, ChainResult
from surveillance_pseudonym.core.errors import (
    ChainInconsistentError, ChainInsertFailedError, ErrorContext,
)
from surveillance_pseudonym.models.chain import Chain
from surveillance_pseudonym.models.pseudonym_link import (
    PseudonymLink, PK_CONSTRAINT_NAME,
)

logger = logging.getLogger(__name__)

# SQLite reports the column instead of the constraint name
_SQLITE_DUPLICATE_MARKER = "pseudonym_link.token_hash"


def is_duplicate_token(error: IntegrityError) -> bool:
    """True when the integrity error is the link primary key (the concurrent-link race)."""
    message = str(error.orig) if error.orig is not None else str(error)
    return PK_CONSTRAINT_NAME in message or _SQLITE_DUPLICATE_MARKER in message


class ChainResolver:
    """Resolves token pairs to chain ids, creating or completing chains as needed."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve(self, token_a: bytes, token_b: bytes) -> ChainResult:
        """Return the chain of the token pair. Order of the tokens is not significant."""
        tokens = [token_a, token_b]
        links = await self._find_links(tokens)

        if not links:
            result = await self._create_chain(tokens)
        else:
            chain_id = chain_id_of(links)
            missing = missing_tokens(tokens, links)
            if missing:
                await self._add_missing_link(missing[0], chain_id)
            result = ChainResult(chain_id, is_new_chain=False)

        await self.db.commit()
        return result

    async def _find_links(self, tokens: Sequence[bytes]) -> list[PseudonymLink]:
        result = await self.db.execute(
            select(PseudonymLink).where(PseudonymLink.token_hash.in_(tokens)),
        )
        return list(result.scalars().all())

    async def _create_chain(self, tokens: Sequence[bytes]) -> ChainResult:
        chain_id = ChainId(uuid.uuid4())
        try:
            self.db.add(Chain(chain_id=chain_id))
            await self.db.flush()
            self.db.add_all([
                PseudonymLink(token_hash=token, chain_id=chain_id)
                for token in tokens
            ])
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            stored_chain_id = await self._reread_after_conflict(e, tokens)
            return ChainResult(stored_chain_id, is_new_chain=False)

        logger.info("New chain created", extra={"chain_id": chain_id})
        return ChainResult(chain_id, is_new_chain=True)

    async def _add_missing_link(self, token: bytes, chain_id: ChainId) -> None:
        self.db.add(PseudonymLink(token_hash=token, chain_id=chain_id))
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            stored_chain_id = await self._reread_after_conflict(e, [token])
            if stored_chain_id != chain_id:
                logger.error(
                    "Missing link was created in parallel under another chain",
                    extra={"chain_id": chain_id, "error_code": "CHAIN_INCONSISTENT"},
                )
                raise ChainInconsistentError(
                    "Missing pseudonym link was created in parallel with another chain id",
                    ErrorContext(chain_id=str(chain_id)),
                ) from e
            return

        logger.debug("Link added to existing chain", extra={"chain_id": chain_id})

    async def _reread_after_conflict(
        self, error: IntegrityError, tokens: Sequence[bytes],
    ) -> ChainId:
        """Reconcile a failed insert with what the database holds now."""
        if not is_duplicate_token(error):
            logger.error(
                "Link insert failed for a reason other than a duplicate token",
                extra={"error_code": "CHAIN_INSERT_FAILED"},
            )
            raise ChainInsertFailedError(
                "Error adding pseudonyms to chain",
            ) from error

        logger.info("Link insert lost a race, rereading links from database")
        reread = await self._find_links(tokens)
        if len(reread) != len(tokens):
            raise ChainInsertFailedError(
                "After failed insert and reread: missing "
                f"{len(tokens) - len(reread)} pseudonym link(s)",
            ) from error
        return chain_id_of(reread)
