"""CSV layouts for the monthly summary.

Both layouts quote every field and are delivered as UTF-8 with a BOM so that
Excel opens the Japanese headers correctly.
"""

from __future__ import annotations

import csv
import io
from typing import Any, Iterable, Mapping, Sequence

from .model import EmployeeMonthlySummary

GENERAL_HEADERS = [
    "従業員名",
    "メールアドレス",
    "通常勤務(h)",
    "夜間勤務(h)",
    "通し夜間(h)",
    "休日出勤(h)",
    "残業(h)",
    "休憩(h)",
    "合計(h)",
    "出勤日数",
    "休日出勤日数",
    "夜間勤務日数",
    "通し夜間日数",
    "欠勤日数",
    "有給日数",
    "代休日数",
]

PAYROLL_HEADERS = [
    "従業員コード",
    "出勤日数",
    "休日出勤日数",
    "欠勤日数",
    "残業時間",
    "代休",
    "有給休暇",
    "夜間勤務日数",
    "通し夜間勤務",
]


def _cell(value: Any) -> str:
    # 8.0 -> "8", 7.5 -> "7.5"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _write(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_cell(v) for v in row])
    return out.getvalue()


def encode_csv(text: str) -> bytes:
    return text.encode("utf-8-sig")


def resolve_employee_code(summary: EmployeeMonthlySummary, codes: Mapping[str, str]) -> str:
    """Code table by e-mail, then by name; else the e-mail local part; else the name."""
    if summary.email and codes.get(summary.email):
        return codes[summary.email]
    if summary.employee_name and codes.get(summary.employee_name):
        return codes[summary.employee_name]
    if summary.email:
        return summary.email.split("@")[0]
    return summary.employee_name


def to_general_csv(rows: Iterable[EmployeeMonthlySummary]) -> str:
    return _write(
        GENERAL_HEADERS,
        (
            [
                s.employee_name,
                s.email,
                s.normal_hours,
                s.night_only_hours,
                s.through_night_hours,
                s.holiday_hours,
                s.overtime_hours,
                s.break_hours,
                s.total_hours,
                s.work_days,
                s.holiday_work_days,
                s.night_work_days,
                s.through_night_days,
                s.absence_days,
                s.paid_leave_days,
                s.compensatory_days,
            ]
            for s in rows
        ),
    )


def to_payroll_csv(rows: Iterable[EmployeeMonthlySummary], codes: Mapping[str, str] | None = None) -> str:
    codes = codes or {}
    return _write(
        PAYROLL_HEADERS,
        (
            [
                resolve_employee_code(s, codes),
                s.work_days,
                s.holiday_work_days,
                s.absence_days,
                s.overtime_hours,
                s.compensatory_days,
                s.paid_leave_days,
                s.night_work_days,
                s.through_night_days,
            ]
            for s in rows
        ),
    )
