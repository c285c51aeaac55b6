"""Period Resolver — returns the period id covering a reference date for one chain.

Invariants:
    - The chain row is locked (SELECT ... FOR UPDATE) before periods are read and stays
      locked until commit: concurrent calls for one chain run strictly one after another,
      calls for different chains never block each other
    - Periods are loaded ordered by max_year descending (precondition of decide_period)
    - At most one period row is inserted or updated per call; containment writes nothing
    - A missing chain raises ChainMissingError (fatal, never retried)

Design Decisions:
    - Pessimistic lock on the aggregate root instead of optimistic versioning: two callers
      must never both see "no containing period" and insert overlapping periods
    - populate_existing on the period query: state is always read fresh inside the lock,
      even when the session already holds period objects
    - today injected as a callable: tests pin the clock that decides which period is current
"""

import logging
from datetime import date
from typing import Callable

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from surveillance_pseudonym.config import Settings
from surveillance_pseudonym.core.domain_types import (
    ChainId, MonthDay, PeriodAction, PeriodId,
)
from surveillance_pseudonym.core.errors import ChainMissingError
from surveillance_pseudonym.core.period_rules import (
    PeriodDecision, adjust_year, decide_period,
)
from surveillance_pseudonym.models.chain import Chain
from surveillance_pseudonym.models.period import Period

logger = logging.getLogger(__name__)


def lock_chain_statement(chain_id: ChainId) -> Select:
    """Row lock on the chain: serializes every period read/write of that chain."""
    return (
        select(Chain.chain_id)
        .where(Chain.chain_id == chain_id)
        .with_for_update()
    )


class PeriodResolver:
    """Breaks a chain's timeline into lifetime-bounded periods."""

    def __init__(
        self,
        db: AsyncSession,
        max_lifetime_in_years: int,
        adjust_reference_day: MonthDay,
        today: Callable[[], date] = date.today,
    ):
        self.db = db
        self.max_lifetime_in_years = max_lifetime_in_years
        self.adjust_reference_day = adjust_reference_day
        self._today = today

    @classmethod
    def from_settings(
        cls,
        db: AsyncSession,
        settings: Settings,
        today: Callable[[], date] = date.today,
    ) -> "PeriodResolver":
        return cls(
            db,
            max_lifetime_in_years=settings.period_max_lifetime_in_years,
            adjust_reference_day=settings.adjust_reference_day,
            today=today,
        )

    def current_year(self) -> int:
        return adjust_year(self._today(), self.adjust_reference_day)

    async def resolve(self, chain_id: ChainId, reference_date: date) -> PeriodId:
        """Return the id of the period that covers reference_date, creating or extending one."""
        year = adjust_year(reference_date, self.adjust_reference_day)

        await self._lock_chain(chain_id)
        periods = await self._load_periods_descending(chain_id)
        logger.debug(f"Periods loaded: {periods}", extra={"chain_id": chain_id})

        decision = decide_period(
            periods, year, self.current_year(), self.max_lifetime_in_years,
        )
        period = await self._apply(chain_id, decision)
        await self.db.commit()
        return PeriodId(period.period_id)

    async def _lock_chain(self, chain_id: ChainId) -> None:
        result = await self.db.execute(lock_chain_statement(chain_id))
        if result.scalar_one_or_none() is None:
            logger.error(
                "Chain not found, could not lock",
                extra={"chain_id": chain_id, "error_code": "CHAIN_MISSING"},
            )
            raise ChainMissingError(str(chain_id))

    async def _load_periods_descending(self, chain_id: ChainId) -> list[Period]:
        """All periods of the chain. The order (max_year descending) is load-bearing."""
        result = await self.db.execute(
            select(Period)
            .where(Period.chain_id == chain_id)
            .order_by(Period.max_year.desc())
            .execution_options(populate_existing=True),
        )
        return list(result.scalars().all())

    async def _apply(self, chain_id: ChainId, decision: PeriodDecision) -> Period:
        if decision.action == PeriodAction.CONTAINED:
            return decision.period

        if decision.action == PeriodAction.CREATE:
            period = Period(
                chain_id=chain_id,
                min_year=decision.min_year,
                max_year=decision.max_year,
            )
            self.db.add(period)
            await self.db.flush()
            logger.info(
                "New period created",
                extra={"chain_id": chain_id, "period_id": period.period_id},
            )
            return period

        period = decision.period
        period.min_year = decision.min_year
        period.max_year = decision.max_year
        await self.db.flush()
        logger.info(
            f"Period extended ({decision.action.value}) to "
            f"{period.min_year}-{period.max_year}",
            extra={"chain_id": chain_id, "period_id": period.period_id},
        )
        return period
