from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import AttendanceStatus, NightWorkType, SpecialWorkType


@dataclass(frozen=True)
class EditHistoryEntry:
    edited_at: datetime
    edited_by: str
    reason: str
    changes: dict[str, dict[str, Any]]


@dataclass(frozen=True)
class WorkClassification:
    """Derived fields written back to a record at clock-out or edit time."""

    working_minutes: int = 0
    overtime_minutes: int = 0
    is_night_work: bool = False
    night_work_type: NightWorkType = NightWorkType.NONE
    is_holiday_work: bool = False
    special_work_type: SpecialWorkType = SpecialWorkType.NORMAL

    def as_patch(self) -> dict[str, Any]:
        return {
            "working_minutes": self.working_minutes,
            "overtime_minutes": self.overtime_minutes,
            "is_night_work": self.is_night_work,
            "night_work_type": self.night_work_type,
            "is_holiday_work": self.is_holiday_work,
            "special_work_type": self.special_work_type,
        }


@dataclass(frozen=True)
class AttendanceRecord:
    """ドメインエンティティ: 勤怠レコード (1回の出勤とその退勤)."""

    record_id: int
    tenant_id: str
    user_id: Optional[str]
    site_name: str
    date: str
    start_time: Optional[str]
    end_time: Optional[str] = None
    break_minutes: int = 0
    status: AttendanceStatus = AttendanceStatus.WORKING
    working_minutes: int = 0
    overtime_minutes: int = 0
    is_night_work: bool = False
    night_work_type: NightWorkType = NightWorkType.NONE
    is_holiday_work: bool = False
    special_work_type: SpecialWorkType = SpecialWorkType.NORMAL
    notes: str = ""
    break_start_time: Optional[str] = None
    edit_history: tuple[EditHistoryEntry, ...] = field(default_factory=tuple)
    updated_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    @property
    def is_leave(self) -> bool:
        return self.special_work_type.is_leave
