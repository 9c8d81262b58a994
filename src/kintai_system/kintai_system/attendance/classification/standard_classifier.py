from __future__ import annotations

from ...common.datetime_utils import elapsed_minutes, parse_iso_date, parse_time_of_day, to_instant
from ...core.constants import NIGHT_END_FROM_HOUR, NIGHT_START_FROM_HOUR, NIGHT_UNTIL_HOUR, STANDARD_WORK_MINUTES
from ...core.enums import NightWorkType, SpecialWorkType
from ..model import WorkClassification
from .base import WorkTimeClassifier

SATURDAY = 5
SUNDAY = 6


def starts_at_night(hour: int) -> bool:
    return hour >= NIGHT_START_FROM_HOUR or hour < NIGHT_UNTIL_HOUR


def ends_at_night(hour: int) -> bool:
    return hour >= NIGHT_END_FROM_HOUR or hour < NIGHT_UNTIL_HOUR


def detect_night_work(start_hour: int, end_hour: int) -> NightWorkType:
    """Night category from the clock hours alone.

    A shift that starts at night is night_only whether or not it ends at night;
    through_night is only a daytime start that runs into the night.
    """
    start_night = starts_at_night(start_hour)
    end_night = ends_at_night(end_hour)

    if start_night:
        return NightWorkType.NIGHT_ONLY
    if end_night:
        return NightWorkType.THROUGH_NIGHT
    return NightWorkType.NONE


def is_holiday(work_date: str) -> bool:
    """Saturday and Sunday only; public holidays are not consulted."""
    return parse_iso_date(work_date).weekday() in (SATURDAY, SUNDAY)


class StandardWorkTimeClassifier(WorkTimeClassifier):
    """Standard rule: (end - start) - break, overtime beyond an 8-hour day."""

    def __init__(self, *, standard_minutes: int = STANDARD_WORK_MINUTES):
        self._standard_minutes = int(standard_minutes)

    def classify(self, *, start_time: str, end_time: str, break_minutes: int, work_date: str) -> WorkClassification:
        start = to_instant(start_time, work_date)
        end = to_instant(end_time, work_date)

        total = elapsed_minutes(start, end)
        working = max(0, total - int(break_minutes or 0))
        overtime = max(0, working - self._standard_minutes)

        night_type = detect_night_work(parse_time_of_day(start_time).hour, parse_time_of_day(end_time).hour)
        holiday = is_holiday(work_date)

        if holiday:
            special = SpecialWorkType.HOLIDAY_WORK
        elif night_type == NightWorkType.THROUGH_NIGHT:
            special = SpecialWorkType.THROUGH_NIGHT
        elif night_type == NightWorkType.NIGHT_ONLY:
            special = SpecialWorkType.NIGHT_ONLY
        elif overtime > 0:
            special = SpecialWorkType.OVERTIME
        else:
            special = SpecialWorkType.NORMAL

        return WorkClassification(
            working_minutes=working,
            overtime_minutes=overtime,
            is_night_work=night_type != NightWorkType.NONE,
            night_work_type=night_type,
            is_holiday_work=holiday,
            special_work_type=special,
        )
