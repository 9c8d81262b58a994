from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import UNKNOWN_EMPLOYEE_NAME
from ..core.enums import NightWorkType, SpecialWorkType
from ..users.model import Employee
from .model import AggregationResult, EmployeeMonthlySummary

_KATAKANA_TO_HIRAGANA = {code: code - 0x60 for code in range(ord("ァ"), ord("ヶ") + 1)}


def minutes_to_hours(minutes: int) -> float:
    """Hours to one decimal, halves rounded up (0.75h -> 0.8h)."""
    hours = Decimal(int(minutes)) / Decimal(60)
    return float(hours.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def name_sort_key(name: str) -> str:
    """Japanese-friendly ordering: width-normalized, kana folded to hiragana."""
    normalized = unicodedata.normalize("NFKC", name or "").casefold()
    return normalized.translate(_KATAKANA_TO_HIRAGANA)


@dataclass
class _Totals:
    normal: int = 0
    night_only: int = 0
    through_night: int = 0
    holiday: int = 0
    overtime: int = 0
    breaks: int = 0

    work_days: int = 0
    holiday_work_days: int = 0
    night_work_days: int = 0
    through_night_days: int = 0
    absence_days: int = 0
    paid_leave_days: int = 0
    compensatory_days: int = 0

    def add(self, r: AttendanceRecord) -> None:
        if r.special_work_type == SpecialWorkType.PAID_LEAVE:
            self.paid_leave_days += 1
            return
        if r.special_work_type == SpecialWorkType.COMPENSATORY_LEAVE:
            self.compensatory_days += 1
            return
        if r.special_work_type == SpecialWorkType.ABSENCE:
            self.absence_days += 1
            return

        working = int(r.working_minutes or 0)
        if working == 0:
            return

        self.work_days += 1
        self.breaks += int(r.break_minutes or 0)
        overtime = int(r.overtime_minutes or 0)
        self.overtime += overtime

        base = working - overtime
        if r.is_holiday_work:
            self.holiday += base
            self.holiday_work_days += 1
        elif r.night_work_type == NightWorkType.THROUGH_NIGHT:
            self.through_night += base
            self.through_night_days += 1
        elif r.night_work_type == NightWorkType.NIGHT_ONLY or r.is_night_work:
            self.night_only += base
            self.night_work_days += 1
        else:
            self.normal += base


class MonthlyAggregator:
    """Rolls one period's attendance records up into one row per employee."""

    def aggregate(
        self,
        records: Iterable[AttendanceRecord],
        user_directory: Mapping[str, Employee],
    ) -> AggregationResult:
        grouped, skipped = self.group_by_user(records)

        rows = [self._summarize(user_id, items, user_directory.get(user_id)) for user_id, items in grouped.items()]
        rows.sort(key=lambda s: name_sort_key(s.employee_name))
        return AggregationResult(rows=rows, skipped_records=skipped)

    @staticmethod
    def group_by_user(records: Iterable[AttendanceRecord]) -> tuple[dict[str, list[AttendanceRecord]], int]:
        grouped: dict[str, list[AttendanceRecord]] = {}
        skipped = 0
        for r in records:
            if not r.user_id:
                skipped += 1
                continue
            grouped.setdefault(r.user_id, []).append(r)
        return grouped, skipped

    @staticmethod
    def _summarize(
        user_id: str,
        records: Sequence[AttendanceRecord],
        employee: Employee | None,
    ) -> EmployeeMonthlySummary:
        t = _Totals()
        for r in records:
            t.add(r)

        hours = [minutes_to_hours(m) for m in (t.normal, t.night_only, t.through_night, t.holiday, t.overtime)]
        # Breaks are not part of the total.
        total = sum((Decimal(str(h)) for h in hours), Decimal(0))
        return EmployeeMonthlySummary(
            user_id=user_id,
            employee_name=(employee.display_name if employee else "") or UNKNOWN_EMPLOYEE_NAME,
            email=(employee.email if employee else "") or "",
            normal_hours=hours[0],
            night_only_hours=hours[1],
            through_night_hours=hours[2],
            holiday_hours=hours[3],
            overtime_hours=hours[4],
            break_hours=minutes_to_hours(t.breaks),
            total_hours=float(total),
            work_days=t.work_days,
            holiday_work_days=t.holiday_work_days,
            night_work_days=t.night_work_days,
            through_night_days=t.through_night_days,
            absence_days=t.absence_days,
            paid_leave_days=t.paid_leave_days,
            compensatory_days=t.compensatory_days,
        )


def aggregate(records: Iterable[AttendanceRecord], user_directory: Mapping[str, Employee]) -> AggregationResult:
    return MonthlyAggregator().aggregate(records, user_directory)
