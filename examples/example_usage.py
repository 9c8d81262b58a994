"""例: Flask を通さずにサービス層を使う.

締め期間の集計を計算し、給与ソフト取込用 CSV をファイルに書き出す。
"""

import importlib
import sys
from datetime import date
from pathlib import Path

from config import get_settings_module

from src.kintai_system.kintai_system.container import build_container
from src.kintai_system.kintai_system.core.exceptions import NoDataToExportError
from src.kintai_system.kintai_system.payroll.period import current_period


def main():
    tenant_id = sys.argv[1] if len(sys.argv) > 1 else "default"
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    period = current_period(date.today())
    report = container.monthly_summary_service.build_monthly_summary(tenant_id, period)
    for row in report.rows:
        print(row.employee_name, row.work_days, row.total_hours)

    try:
        export = container.monthly_summary_service.export_payroll_csv(tenant_id, period)
    except NoDataToExportError as e:
        print(e)
        return
    Path(export.filename).write_bytes(export.content)
    print(f"wrote {export.filename}")


if __name__ == "__main__":
    main()
