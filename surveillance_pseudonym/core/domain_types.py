"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ChainId, PeriodId wrap UUIDs — never use bare UUID in domain logic
    - TokenHash is the 32-byte keyed digest of a raw pseudonym; raw pseudonyms never
      travel past the processor
    - MonthDay is a valid day of a leap year; --02-29 falls back to 28 February in
      other years

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - MonthDay as frozen dataclass: hashable, usable as pydantic field type via parse()
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

ChainId = NewType("ChainId", UUID)
PeriodId = NewType("PeriodId", UUID)
TokenHash = NewType("TokenHash", bytes)


# ─── Value Types ─────────────────────────────────────────────────

_MONTH_DAY_PATTERN = re.compile(r"^--(\d{2})-(\d{2})$")


@dataclass(frozen=True)
class MonthDay:
    """Month/day pair without a year, written as ``--MM-DD``."""
    month: int
    day: int

    def __post_init__(self):
        # 2000 is a leap year, so every month/day that exists in some year passes
        date(2000, self.month, self.day)

    @classmethod
    def parse(cls, text: str) -> "MonthDay":
        match = _MONTH_DAY_PATTERN.match(text.strip())
        if not match:
            raise ValueError(f"month/day must look like --MM-DD, got {text!r}")
        return cls(int(match.group(1)), int(match.group(2)))

    def at_year(self, year: int) -> date:
        if (self.month, self.day) == (2, 29) and not calendar.isleap(year):
            return date(year, 2, 28)
        return date(year, self.month, self.day)

    def __str__(self) -> str:
        return f"--{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True)
class ChainResult:
    """Outcome of chain resolution."""
    chain_id: ChainId
    is_new_chain: bool


# ─── Enums ───────────────────────────────────────────────────────

class PeriodAction(str, Enum):
    """What the period resolver does with the adjusted reference year."""
    CONTAINED = "contained"
    EXTEND_FORWARD = "extend_forward"
    EXTEND_BACKWARD = "extend_backward"
    CREATE = "create"
