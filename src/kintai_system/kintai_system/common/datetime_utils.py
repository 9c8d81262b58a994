from __future__ import annotations

from datetime import date, datetime, time, timedelta

from ..core.constants import WORKING_DATE_ROLLOVER_HOUR
from ..core.exceptions import TimeFormatError

TIME_FORMAT = "%H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise TimeFormatError(f"日付の形式が不正です (YYYY-MM-DD): {value!r}")


def parse_time_of_day(value: str) -> time:
    """Parse HH:MM:SS string into time.

    Clock strings written by the browser may drop the leading zero of the hour
    ("8:05:00"), which strptime accepts.
    """
    try:
        return datetime.strptime(value, TIME_FORMAT).time()
    except (TypeError, ValueError):
        raise TimeFormatError(f"時刻の形式が不正です (HH:MM:SS): {value!r}")


def format_time(value: datetime | time) -> str:
    return value.strftime(TIME_FORMAT)


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def to_instant(time_of_day: str, reference_date: str) -> datetime:
    """Combine a work date and a wall-clock time into a comparable instant."""
    return datetime.combine(parse_iso_date(reference_date), parse_time_of_day(time_of_day))


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end.

    An end at or before the start is an overnight shift: the end is moved to
    the following day, so the result is never negative.
    """
    if end <= start:
        end = end + timedelta(days=1)
    return int((end - start).total_seconds() // 60)


def break_minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes of a break; only an end strictly before the start wraps past midnight."""
    if end < start:
        end = end + timedelta(days=1)
    return int((end - start).total_seconds() // 60)


def working_date(now: datetime) -> date:
    """Working date under the 4-hour rule (before 04:00 counts as the previous day)."""
    if now.hour < WORKING_DATE_ROLLOVER_HOUR:
        return (now - timedelta(days=1)).date()
    return now.date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
