from __future__ import annotations

from datetime import date, datetime

import pytest

from src.kintai_system.kintai_system.common.datetime_utils import (
    break_minutes_between,
    elapsed_minutes,
    parse_time_of_day,
    to_instant,
    working_date,
)
from src.kintai_system.kintai_system.core.exceptions import TimeFormatError, ValidationError


def test_elapsed_minutes_same_day():
    start = to_instant("08:00:00", "2024-01-08")
    end = to_instant("17:30:00", "2024-01-08")

    assert elapsed_minutes(start, end) == 570


def test_elapsed_minutes_overnight_adds_a_day():
    start = to_instant("23:00:00", "2024-01-08")
    end = to_instant("06:00:00", "2024-01-08")

    assert elapsed_minutes(start, end) == 420


def test_to_instant_combines_date_and_time():
    assert to_instant("09:15:30", "2025-02-03") == datetime(2025, 2, 3, 9, 15, 30)


def test_parse_time_accepts_hour_without_leading_zero():
    assert parse_time_of_day("8:05:00").hour == 8


@pytest.mark.parametrize("bad", ["", "25:00:00", "08:00", "abc", None])
def test_malformed_time_raises(bad):
    with pytest.raises(TimeFormatError):
        to_instant(bad, "2024-01-08")


def test_malformed_date_raises_validation_error():
    with pytest.raises(ValidationError):
        to_instant("08:00:00", "2024/01/08")


def test_working_date_before_four_am_is_previous_day():
    assert working_date(datetime(2025, 3, 1, 3, 59)) == date(2025, 2, 28)
    assert working_date(datetime(2025, 3, 1, 4, 0)) == date(2025, 3, 1)


def test_break_minutes_equal_times_is_zero():
    at = to_instant("12:00:00", "2024-01-08")

    assert break_minutes_between(at, at) == 0
    assert elapsed_minutes(at, at) == 1440


def test_break_minutes_across_midnight():
    start = to_instant("23:50:00", "2024-01-08")
    end = to_instant("00:20:00", "2024-01-08")

    assert break_minutes_between(start, end) == 30
