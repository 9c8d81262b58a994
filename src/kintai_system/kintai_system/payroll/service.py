from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..core.exceptions import NoDataToExportError
from ..users.repository import UserRepository
from .aggregator import MonthlyAggregator
from .csv_export import encode_csv, to_general_csv, to_payroll_csv
from .model import EmployeeMonthlySummary
from .period import PayrollPeriod, period_bounds, recent_periods

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlySummaryReport:
    period: PayrollPeriod
    rows: list[EmployeeMonthlySummary]
    fetched_records: int
    skipped_records: int

    def to_dict(self) -> dict:
        start, end = self.period.date_range()
        return {
            "period": self.period.year_month,
            "label": self.period.long_label,
            "start_date": start,
            "end_date": end,
            "fetched_records": self.fetched_records,
            "skipped_records": self.skipped_records,
            "rows": [r.to_dict() for r in self.rows],
        }


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: bytes


class MonthlySummaryService:
    """Period query -> aggregation -> export, for one tenant at a time."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        aggregator: Optional[MonthlyAggregator] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._aggregator = aggregator or MonthlyAggregator()

    def build_monthly_summary(
        self,
        tenant_id: str,
        year_month: str,
        *,
        employee_id: Optional[str] = None,
        site_name: Optional[str] = None,
    ) -> MonthlySummaryReport:
        period = period_bounds(year_month)
        start, end = period.date_range()
        logger.info("[monthly-summary] tenant=%s period=%s (%s..%s)", tenant_id, period.year_month, start, end)

        records = list(self._attendance.query_attendance(tenant_id, start, end))
        fetched = len(records)
        if site_name:
            records = [r for r in records if r.site_name == site_name]
        if employee_id:
            records = [r for r in records if r.user_id == employee_id]
        logger.debug(
            "[monthly-summary] fetched=%s after filters=%s (site=%s employee=%s)",
            fetched, len(records), site_name, employee_id,
        )

        if not records:
            return MonthlySummaryReport(period=period, rows=[], fetched_records=fetched, skipped_records=0)

        result = self._aggregator.aggregate(records, self._users.list_users(tenant_id))
        if result.skipped_records:
            logger.warning(
                "[monthly-summary] tenant=%s period=%s: %s record(s) without user id excluded",
                tenant_id, period.year_month, result.skipped_records,
            )
        logger.info("[monthly-summary] done: %s employee(s)", len(result.rows))
        return MonthlySummaryReport(
            period=period,
            rows=result.rows,
            fetched_records=fetched,
            skipped_records=result.skipped_records,
        )

    def export_general_csv(self, tenant_id: str, year_month: str, **filters) -> ExportFile:
        report = self._require_rows(tenant_id, year_month, **filters)
        return ExportFile(
            filename=f"monthly_summary_{report.period.year_month}.csv",
            content=encode_csv(to_general_csv(report.rows)),
        )

    def export_payroll_csv(self, tenant_id: str, year_month: str, **filters) -> ExportFile:
        report = self._require_rows(tenant_id, year_month, **filters)
        codes = self._users.list_employee_codes(tenant_id)
        return ExportFile(
            filename=f"payroll_import_{report.period.year_month}.csv",
            content=encode_csv(to_payroll_csv(report.rows, codes)),
        )

    def _require_rows(self, tenant_id: str, year_month: str, **filters) -> MonthlySummaryReport:
        report = self.build_monthly_summary(tenant_id, year_month, **filters)
        if not report.rows:
            raise NoDataToExportError("エクスポートするデータがありません")
        return report

    @staticmethod
    def period_options(today: date, n: int = 12) -> list[dict]:
        return [{"value": p.year_month, "label": p.label} for p in recent_periods(today, n)]
