"""Pseudonym Schemas — Pydantic models with field-level validation for the API boundary.

Invariants:
    - PseudonymInput: both pseudonyms non-empty, date is an ISO calendar date,
      pseudonyms must differ
    - PseudonymOutput carries the period id as urn:uuid value

Design Decisions:
    - model_validator for the cross-field check: one error on the model, not on either field
"""

import datetime

from pydantic import BaseModel, Field, model_validator


class PseudonymInput(BaseModel):
    """Previous and current rotation-scoped pseudonym plus the reference date."""
    pseudonym1: str = Field(min_length=1)
    pseudonym2: str = Field(min_length=1)
    date: datetime.date

    @model_validator(mode="after")
    def check_pseudonyms_differ(self) -> "PseudonymInput":
        if self.pseudonym1 == self.pseudonym2:
            raise ValueError("the pseudonyms must not be equal")
        return self


class PseudonymOutput(BaseModel):
    """Stable pseudonym as code system + value."""
    system: str
    value: str
