from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..model import AttendanceRecord


@dataclass(frozen=True)
class ClockDecision:
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    break_minutes: Optional[int] = None


class EntryStrategy(ABC):
    """Strategy Pattern: encapsulate where clock times come from.

    Every mode only decides the raw times; minutes and categories are always
    computed by the classifier afterwards.
    """

    @abstractmethod
    def decide_clock_in(self, *, now: datetime, requested_start: Optional[str]) -> ClockDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_clock_out(
        self,
        *,
        now: datetime,
        record: AttendanceRecord,
        requested_end: Optional[str],
        requested_break: Optional[int],
    ) -> ClockDecision:
        raise NotImplementedError
