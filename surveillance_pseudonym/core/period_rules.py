"""Period Interval Rules — decides which period covers an adjusted reference year.

Invariants:
    - decide_period is PURE: returns a PeriodDecision, does NOT mutate any period
    - Shell applies the decision (update min/max year or insert) under the chain lock
    - periods MUST be ordered by max_year descending; the early exits in the
      extension scan depend on that order for correctness
    - A period's span (max_year - min_year) never exceeds max_lifetime_in_years - 1

Design Decisions:
    - Linear scan over the chain's periods: a chain holds few periods, no interval index needed
    - current_year passed in rather than read from a clock: keeps rules deterministic in tests
    - "Current" leniency uses today's adjusted year, independent of the reference date.
      Backfilled historical dates may therefore see a different period treated as current.
"""

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from surveillance_pseudonym.core.domain_types import MonthDay, PeriodAction
from surveillance_pseudonym.core.repository_protocols import PeriodLike


@dataclass(frozen=True)
class PeriodDecision:
    """Action descriptor. period is None only for CREATE."""
    action: PeriodAction
    period: PeriodLike | None
    min_year: int
    max_year: int


def adjust_year(reference_date: date, adjust_reference_day: MonthDay) -> int:
    """Surveillance year of a date: dates before the cutoff day belong to the previous year.

    With cutoff --07-01: 2023-06-30 -> 2022, 2023-07-01 -> 2023.
    With cutoff --01-01 the surveillance year equals the calendar year.
    """
    year = reference_date.year
    if reference_date < adjust_reference_day.at_year(year):
        return year - 1
    return year


def year_diff(year1: int, year2: int) -> int:
    return abs(year1 - year2)


def is_within(period: PeriodLike, year: int) -> bool:
    return period.min_year <= year <= period.max_year


def is_after(period: PeriodLike, year: int) -> bool:
    return year > period.max_year


def is_current(period: PeriodLike, current_year: int) -> bool:
    """A period is current when its max_year covers or directly precedes current_year."""
    return year_diff(period.max_year, current_year) <= 1


def is_extendable_forward(
    period: PeriodLike, year: int, max_lifetime_in_years: int,
) -> bool:
    return year_diff(period.min_year, year) < max_lifetime_in_years


def is_extendable_backward(
    period: PeriodLike, year: int, current_year: int, max_lifetime_in_years: int,
) -> bool:
    """Backward extension check.

    The current period keeps one year of headroom for the upcoming year, so its
    effective lifetime is reduced by one.
    """
    headroom = 1 if is_current(period, current_year) else 0
    return year_diff(period.max_year, year) < max_lifetime_in_years - headroom


def find_containing(
    periods_desc: Sequence[PeriodLike], year: int,
) -> PeriodLike | None:
    for period in periods_desc:
        if is_within(period, year):
            return period
    return None


def find_extension(
    periods_desc: Sequence[PeriodLike],
    year: int,
    current_year: int,
    max_lifetime_in_years: int,
) -> PeriodDecision | None:
    """Scan for the first period that may grow to cover year. Assumes no period contains it."""
    for period in periods_desc:
        if is_after(period, year):
            if is_extendable_forward(period, year, max_lifetime_in_years):
                return PeriodDecision(
                    PeriodAction.EXTEND_FORWARD, period, period.min_year, year,
                )
            # remaining periods end even earlier
            return None
        if is_extendable_backward(period, year, current_year, max_lifetime_in_years):
            return PeriodDecision(
                PeriodAction.EXTEND_BACKWARD, period, year, period.max_year,
            )
    return None


def decide_period(
    periods_desc: Sequence[PeriodLike],
    year: int,
    current_year: int,
    max_lifetime_in_years: int,
) -> PeriodDecision:
    """Containment first, then extension, otherwise a new single-year period."""
    containing = find_containing(periods_desc, year)
    if containing is not None:
        return PeriodDecision(
            PeriodAction.CONTAINED, containing,
            containing.min_year, containing.max_year,
        )

    extension = find_extension(
        periods_desc, year, current_year, max_lifetime_in_years,
    )
    if extension is not None:
        return extension

    return PeriodDecision(PeriodAction.CREATE, None, year, year)
