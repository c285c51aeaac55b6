"""Domain Types — tests for MonthDay parsing and validation."""

from datetime import date

import pytest

from surveillance_pseudonym.core.domain_types import MonthDay


def test_parse_month_day():
    assert MonthDay.parse("--07-01") == MonthDay(7, 1)


def test_month_day_round_trips_to_text():
    assert str(MonthDay(7, 1)) == "--07-01"


def test_at_year():
    assert MonthDay(12, 31).at_year(2024) == date(2024, 12, 31)


@pytest.mark.parametrize("text", ["07-01", "--7-1", "2024-07-01", ""])
def test_parse_rejects_malformed_text(text):
    with pytest.raises(ValueError):
        MonthDay.parse(text)


@pytest.mark.parametrize("month, day", [(13, 1), (4, 31), (2, 30), (0, 10)])
def test_rejects_days_missing_in_every_year(month, day):
    with pytest.raises(ValueError):
        MonthDay(month, day)


def test_leap_day_falls_back_to_february_28th_in_common_years():
    leap_day = MonthDay.parse("--02-29")
    assert leap_day.at_year(2024) == date(2024, 2, 29)
    assert leap_day.at_year(2025) == date(2025, 2, 28)
