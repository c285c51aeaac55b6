"""Purge Processor — batched retention cleanup of expired periods, links and chains.

Invariants:
    - Order is periods -> links -> chains (foreign keys point from periods/links to chains)
    - Each batch runs in its own transaction and deletes at most batch_size rows
    - A table is done when a batch deletes fewer than batch_size rows
    - Links and chains are only deleted when their chain has no periods left AND was
      created before now - grace (a chain being created right now has no period yet)

Design Decisions:
    - Subquery with LIMIT instead of DELETE ... LIMIT: portable to PostgreSQL and SQLite
    - Aliased subquery tables: keeps the subquery from correlating to the DELETE target
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Awaitable, Callable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import aliased

from surveillance_pseudonym.config import Settings
from surveillance_pseudonym.models.chain import Chain
from surveillance_pseudonym.models.period import Period
from surveillance_pseudonym.models.pseudonym_link import PseudonymLink

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PurgeProcessor:
    """Deletes data beyond the retention window in fixed-size batches."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        batch_size: int,
        retention_years: int,
        grace: timedelta = timedelta(hours=1),
        today: Callable[[], date] = date.today,
        now: Callable[[], datetime] = _utcnow,
    ):
        self._session_factory = session_factory
        self.batch_size = batch_size
        self.retention_years = retention_years
        self.grace = grace
        self._today = today
        self._now = now

    @classmethod
    def from_settings(
        cls, session_factory: async_sessionmaker[AsyncSession], settings: Settings,
    ) -> "PurgeProcessor":
        return cls(
            session_factory,
            batch_size=settings.purger_batch_size,
            retention_years=settings.purger_retention_years,
            grace=timedelta(minutes=settings.purger_grace_minutes),
        )

    def retention_cutoff_year(self) -> int:
        """Periods with max_year below this year are expired."""
        return self._today().year - self.retention_years

    async def purge_database(self) -> dict[str, int]:
        """Run one purge. Returns deleted row totals per table."""
        cutoff = self.retention_cutoff_year()
        created_before = self._now() - self.grace
        logger.info(f"Purging periods with max_year < {cutoff} from database")

        return {
            "period": await self._delete_in_batches(
                "period",
                lambda limit: self.delete_periods_older_than(cutoff, limit),
            ),
            "pseudonym_link": await self._delete_in_batches(
                "pseudonym_link",
                lambda limit: self.delete_links_without_periods(created_before, limit),
            ),
            "chain": await self._delete_in_batches(
                "chain",
                lambda limit: self.delete_orphan_chains(created_before, limit),
            ),
        }

    async def _delete_in_batches(
        self, table: str, delete_batch: Callable[[int], Awaitable[int]],
    ) -> int:
        logger.debug(f"Executing delete in batches for {table}")
        total = 0
        batch_count = 0
        while True:
            rows_deleted = await delete_batch(self.batch_size)
            batch_count += 1
            total += rows_deleted
            logger.debug(f"{rows_deleted} {table} rows deleted")
            if rows_deleted < self.batch_size:
                break
        logger.info(
            f"Total {total} rows deleted from {table} in {batch_count} batches",
            extra={"table": table, "rows_deleted": total, "batch_count": batch_count},
        )
        return total

    async def _execute_delete(self, stmt) -> int:
        async with self._session_factory() as db:
            result = await db.execute(
                stmt.execution_options(synchronize_session=False),
            )
            await db.commit()
            return result.rowcount

    async def delete_periods_older_than(self, year: int, limit: int) -> int:
        expired = aliased(Period)
        batch = (
            select(expired.period_id)
            .where(expired.max_year < year)
            .order_by(expired.period_id)
            .limit(limit)
        )
        return await self._execute_delete(
            delete(Period).where(Period.period_id.in_(batch)),
        )

    async def delete_links_without_periods(
        self, created_before: datetime, limit: int,
    ) -> int:
        link = aliased(PseudonymLink)
        has_period = (
            select(Period.period_id)
            .where(Period.chain_id == link.chain_id)
            .exists()
        )
        batch = (
            select(link.token_hash)
            .join(Chain, Chain.chain_id == link.chain_id)
            .where(~has_period)
            .where(Chain.created_at < created_before)
            .order_by(Chain.created_at)
            .limit(limit)
        )
        return await self._execute_delete(
            delete(PseudonymLink).where(PseudonymLink.token_hash.in_(batch)),
        )

    async def delete_orphan_chains(self, created_before: datetime, limit: int) -> int:
        chain = aliased(Chain)
        has_period = (
            select(Period.period_id)
            .where(Period.chain_id == chain.chain_id)
            .exists()
        )
        batch = (
            select(chain.chain_id)
            .where(~has_period)
            .where(chain.created_at < created_before)
            .order_by(chain.created_at)
            .limit(limit)
        )
        return await self._execute_delete(
            delete(Chain).where(Chain.chain_id.in_(batch)),
        )
