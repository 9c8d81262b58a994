from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import break_minutes_between, format_time, to_instant
from ...core.enums import AttendanceStatus
from ..model import AttendanceRecord
from .base import ClockDecision, EntryStrategy


class LiveClockStrategy(EntryStrategy):
    """Clock events happen at "now"; a running break is closed at clock-out."""

    def decide_clock_in(self, *, now: datetime, requested_start: Optional[str]) -> ClockDecision:
        return ClockDecision(start_time=format_time(now))

    def decide_clock_out(
        self,
        *,
        now: datetime,
        record: AttendanceRecord,
        requested_end: Optional[str],
        requested_break: Optional[int],
    ) -> ClockDecision:
        end_time = format_time(now)
        break_minutes = record.break_minutes
        if record.status == AttendanceStatus.BREAK and record.break_start_time:
            break_minutes += break_minutes_between(
                to_instant(record.break_start_time, record.date),
                to_instant(end_time, record.date),
            )
        return ClockDecision(end_time=end_time, break_minutes=break_minutes)
