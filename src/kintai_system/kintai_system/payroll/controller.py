from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.responses import error_response, ok
from ..container import Container
from .period import current_period


def register(app: Flask, container: Container) -> None:
    service = container.monthly_summary_service

    def _filters() -> dict:
        return {
            "employee_id": request.args.get("user_id") or None,
            "site_name": request.args.get("site") or None,
        }

    def _period() -> str:
        return request.args.get("period") or current_period(date.today())

    def _csv_response(export):
        return app.response_class(
            export.content,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={export.filename}"},
        )

    @app.route("/api/tenants/<tenant_id>/payroll/periods", methods=["GET"], endpoint="payroll_periods")
    def payroll_periods(tenant_id: str):
        today = date.today()
        return ok({"current": current_period(today), "options": service.period_options(today)})

    @app.route("/api/tenants/<tenant_id>/payroll/summary", methods=["GET"], endpoint="payroll_summary")
    def payroll_summary(tenant_id: str):
        try:
            report = service.build_monthly_summary(tenant_id, _period(), **_filters())
            return ok(report.to_dict())
        except Exception as e:
            return error_response(e)

    @app.route("/api/tenants/<tenant_id>/payroll/summary.csv", methods=["GET"], endpoint="payroll_summary_csv")
    def payroll_summary_csv(tenant_id: str):
        try:
            return _csv_response(service.export_general_csv(tenant_id, _period(), **_filters()))
        except Exception as e:
            return error_response(e)

    @app.route(
        "/api/tenants/<tenant_id>/payroll/summary-payroll.csv", methods=["GET"], endpoint="payroll_system_csv"
    )
    def payroll_system_csv(tenant_id: str):
        try:
            return _csv_response(service.export_payroll_csv(tenant_id, _period(), **_filters()))
        except Exception as e:
            return error_response(e)
