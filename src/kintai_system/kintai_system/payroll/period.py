"""Payroll periods under the 20th-of-month cutoff.

Period ``YYYY-MM`` runs from the 21st of the previous month through the 20th
of ``MM`` (period 2025-01 is 2024-12-21 .. 2025-01-20). The same rule bounds
the record-store query and labels the period pickers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from ..common.datetime_utils import format_date, parse_iso_date
from ..core.constants import DEFAULT_PERIOD_OPTIONS, PAYROLL_CUTOFF_DAY
from ..core.exceptions import ValidationError

_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{2})$")


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


@dataclass(frozen=True)
class PayrollPeriod:
    year: int
    month: int

    @property
    def year_month(self) -> str:
        return f"{self.year}-{self.month:02d}"

    @property
    def start_date(self) -> date:
        y, m = _shift_month(self.year, self.month, -1)
        return date(y, m, PAYROLL_CUTOFF_DAY + 1)

    @property
    def end_date(self) -> date:
        return date(self.year, self.month, PAYROLL_CUTOFF_DAY)

    @property
    def label(self) -> str:
        """Picker label, e.g. ``2025年1月度 (12/21-1/20)``."""
        prev_month = self.start_date.month
        return f"{self.year}年{self.month}月度 ({prev_month}/21-{self.month}/20)"

    @property
    def long_label(self) -> str:
        s = self.start_date
        return f"{self.year}年{self.month}月度 ({s.year}/{s.month}/21〜{self.year}/{self.month}/20)"

    def date_range(self) -> tuple[str, str]:
        return format_date(self.start_date), format_date(self.end_date)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def shifted(self, months: int) -> "PayrollPeriod":
        y, m = _shift_month(self.year, self.month, months)
        return PayrollPeriod(y, m)


def period_bounds(year_month: str) -> PayrollPeriod:
    """Period for a ``YYYY-MM`` label."""
    match = _YEAR_MONTH.match((year_month or "").strip())
    if not match:
        raise ValidationError(f"対象年月の形式が不正です (YYYY-MM): {year_month!r}")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"対象年月の形式が不正です (YYYY-MM): {year_month!r}")
    return PayrollPeriod(year, month)


def period_for(calendar_date: date | str) -> PayrollPeriod:
    """Enclosing period of a day: after the cutoff, the day belongs to next month's period."""
    if isinstance(calendar_date, str):
        calendar_date = parse_iso_date(calendar_date)
    period = PayrollPeriod(calendar_date.year, calendar_date.month)
    if calendar_date.day > PAYROLL_CUTOFF_DAY:
        return period.shifted(1)
    return period


def current_period(today: date) -> str:
    return period_for(today).year_month


def recent_periods(today: date, n: int = DEFAULT_PERIOD_OPTIONS) -> list[PayrollPeriod]:
    """The ``n`` most recent periods, current one first."""
    current = period_for(today)
    return [current.shifted(-i) for i in range(max(0, int(n)))]
