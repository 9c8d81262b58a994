from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.constants import FIXED_BREAK_MINUTES, FIXED_END_TIME, FIXED_START_TIME
from ..model import AttendanceRecord
from .base import ClockDecision, EntryStrategy


class FixedTimeStrategy(EntryStrategy):
    """Default working day (08:00-17:00, 60 min break) regardless of when the button is pressed."""

    def __init__(
        self,
        *,
        start_time: str = FIXED_START_TIME,
        end_time: str = FIXED_END_TIME,
        break_minutes: int = FIXED_BREAK_MINUTES,
    ):
        self._start_time = start_time
        self._end_time = end_time
        self._break_minutes = int(break_minutes)

    def decide_clock_in(self, *, now: datetime, requested_start: Optional[str]) -> ClockDecision:
        return ClockDecision(start_time=self._start_time)

    def decide_clock_out(
        self,
        *,
        now: datetime,
        record: AttendanceRecord,
        requested_end: Optional[str],
        requested_break: Optional[int],
    ) -> ClockDecision:
        return ClockDecision(end_time=self._end_time, break_minutes=self._break_minutes)
