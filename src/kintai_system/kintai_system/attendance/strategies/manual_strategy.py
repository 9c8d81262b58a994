from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import parse_time_of_day
from ...common.validators import require_non_negative
from ...core.exceptions import ValidationError
from ..model import AttendanceRecord
from .base import ClockDecision, EntryStrategy


class ManualEntryStrategy(EntryStrategy):
    """Times are typed in by the user; nothing is taken from the clock."""

    def decide_clock_in(self, *, now: datetime, requested_start: Optional[str]) -> ClockDecision:
        if not requested_start:
            raise ValidationError("出勤時刻を入力してください")
        parse_time_of_day(requested_start)
        return ClockDecision(start_time=requested_start)

    def decide_clock_out(
        self,
        *,
        now: datetime,
        record: AttendanceRecord,
        requested_end: Optional[str],
        requested_break: Optional[int],
    ) -> ClockDecision:
        if not requested_end:
            raise ValidationError("退勤時刻を入力してください")
        parse_time_of_day(requested_end)
        if requested_break is None:
            break_minutes = record.break_minutes
        else:
            break_minutes = require_non_negative(requested_break, "休憩時間")
        return ClockDecision(end_time=requested_end, break_minutes=break_minutes)
