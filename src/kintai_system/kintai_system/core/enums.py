from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """勤怠レコードの状態 (出勤 -> 休憩 -> 退勤)."""

    WAITING = "waiting"
    WORKING = "working"
    BREAK = "break"
    COMPLETED = "completed"


class NightWorkType(str, Enum):
    NONE = "none"
    NIGHT_ONLY = "night_only"
    THROUGH_NIGHT = "through_night"


class SpecialWorkType(str, Enum):
    """Exclusive label attached to a record after classification."""

    NORMAL = "normal"
    OVERTIME = "overtime"
    NIGHT_ONLY = "night_only"
    THROUGH_NIGHT = "through_night"
    HOLIDAY_WORK = "holiday_work"
    PAID_LEAVE = "paid_leave"
    COMPENSATORY_LEAVE = "compensatory_leave"
    ABSENCE = "absence"

    @property
    def is_leave(self) -> bool:
        return self in LEAVE_TYPES


LEAVE_TYPES = frozenset(
    {
        SpecialWorkType.PAID_LEAVE,
        SpecialWorkType.COMPENSATORY_LEAVE,
        SpecialWorkType.ABSENCE,
    }
)


class EntryMode(str, Enum):
    """How clock times are supplied for a record."""

    LIVE = "live"
    FIXED = "fixed"
    MANUAL = "manual"
