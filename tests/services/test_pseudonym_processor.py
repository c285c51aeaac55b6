"""Pseudonym Processor — tests for hash -> chain -> period orchestration.

Tests cover:
    - output format (code system + urn:uuid: period id)
    - same input -> same pseudonym; pair order is not significant
    - dates of different periods -> different pseudonyms, same chain
    - feature flag off -> placeholder, nothing stored
"""

import os
import uuid
from datetime import date

import pytest

from surveillance_pseudonym.config import Settings
from surveillance_pseudonym.core.hash_tokens import TokenHasher
from surveillance_pseudonym.schemas.pseudonym import PseudonymInput
from surveillance_pseudonym.services.pseudonym_processor import (
    CODE_SYSTEM, PLACEHOLDER_PSEUDONYM, PseudonymProcessor,
)

TODAY = date(2025, 8, 5)


@pytest.fixture
def make_processor(test_db):
    def _make(**overrides) -> PseudonymProcessor:
        settings = Settings(
            period_max_lifetime_in_years=3,
            period_adjust_reference_day="--07-01",
            **overrides,
        )
        hasher = TokenHasher(os.environ["SPS_HASH_PEPPER"])
        return PseudonymProcessor(test_db, settings, hasher, today=lambda: TODAY)
    return _make


def request(p1: str, p2: str, day: str) -> PseudonymInput:
    return PseudonymInput(pseudonym1=p1, pseudonym2=p2, date=day)


async def test_output_is_period_urn(make_processor, read_all):
    output = await make_processor().create_pseudonym(request("1-a", "1-b", "2025-07-28"))

    assert output.system == CODE_SYSTEM
    assert output.value.startswith("urn:uuid:")
    [period] = await read_all.periods()
    assert output.value == f"urn:uuid:{period.period_id}"


async def test_same_input_gives_same_pseudonym(make_processor):
    processor = make_processor()
    first = await processor.create_pseudonym(request("1-a", "1-b", "2025-07-28"))
    again = await processor.create_pseudonym(request("1-a", "1-b", "2025-07-28"))
    swapped = await processor.create_pseudonym(request("1-b", "1-a", "2025-07-28"))
    assert first == again == swapped


async def test_distant_dates_give_different_pseudonyms(make_processor, read_all):
    processor = make_processor()
    recent = await processor.create_pseudonym(request("1-a", "1-b", "2025-07-28"))
    old = await processor.create_pseudonym(request("1-b", "1-c", "2019-09-01"))

    assert recent != old
    assert len(await read_all.chains()) == 1
    assert len(await read_all.periods()) == 2


async def test_feature_flag_off_returns_placeholder(make_processor, read_all):
    processor = make_processor(individual_pseudonym=False)

    output = await processor.create_pseudonym(request("1-a", "1-b", "2025-07-28"))

    assert output.value == f"urn:uuid:{PLACEHOLDER_PSEUDONYM}"
    assert PLACEHOLDER_PSEUDONYM == uuid.UUID("10101010-1010-1010-1010-101010101010")
    assert await read_all.chains() == []
