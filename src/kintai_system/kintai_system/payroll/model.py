from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class EmployeeMonthlySummary:
    """Read-model: 1従業員・1締め期間の集計行 (常に勤怠レコードから再計算する)."""

    user_id: str
    employee_name: str
    email: str

    normal_hours: float = 0.0
    night_only_hours: float = 0.0
    through_night_hours: float = 0.0
    holiday_hours: float = 0.0
    overtime_hours: float = 0.0
    break_hours: float = 0.0
    total_hours: float = 0.0

    work_days: int = 0
    holiday_work_days: int = 0
    night_work_days: int = 0
    through_night_days: int = 0
    absence_days: int = 0
    paid_leave_days: int = 0
    compensatory_days: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AggregationResult:
    rows: list[EmployeeMonthlySummary] = field(default_factory=list)
    # records that could not be attributed to an employee (no user id)
    skipped_records: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.rows
