from __future__ import annotations

from flask import Flask, request

from ..common.responses import error_response, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _body() -> dict:
        return request.get_json(silent=True) or {}

    @app.route("/api/tenants/<tenant_id>/attendance/clock-in", methods=["POST"], endpoint="clock_in")
    def clock_in(tenant_id: str):
        data = _body()
        try:
            record_id = service.clock_in(
                tenant_id,
                str(data.get("user_id") or ""),
                str(data.get("site_name") or ""),
                mode=data.get("mode") or "live",
                start_time=data.get("start_time"),
                notes=data.get("notes") or "",
                confirm_recent=bool(data.get("confirm_recent", False)),
            )
            return ok({"id": record_id, "message": "出勤しました"}, 201)
        except Exception as e:
            return error_response(e)

    @app.route(
        "/api/tenants/<tenant_id>/attendance/<int:record_id>/break-start", methods=["POST"], endpoint="break_start"
    )
    def break_start(tenant_id: str, record_id: int):
        try:
            service.start_break(tenant_id, record_id)
            return ok({"message": "休憩を開始しました"})
        except Exception as e:
            return error_response(e)

    @app.route("/api/tenants/<tenant_id>/attendance/<int:record_id>/break-end", methods=["POST"], endpoint="break_end")
    def break_end(tenant_id: str, record_id: int):
        try:
            total = service.end_break(tenant_id, record_id)
            return ok({"break_minutes": total, "message": "休憩を終了しました"})
        except Exception as e:
            return error_response(e)

    @app.route("/api/tenants/<tenant_id>/attendance/<int:record_id>/clock-out", methods=["POST"], endpoint="clock_out")
    def clock_out(tenant_id: str, record_id: int):
        data = _body()
        try:
            result = service.clock_out(
                tenant_id,
                record_id,
                mode=data.get("mode") or "live",
                end_time=data.get("end_time"),
                break_minutes=data.get("break_minutes"),
            )
            return ok(
                {
                    "message": "お疲れさまでした",
                    "working_minutes": result.working_minutes,
                    "overtime_minutes": result.overtime_minutes,
                    "special_work_type": result.special_work_type.value,
                }
            )
        except Exception as e:
            return error_response(e)

    @app.route("/api/tenants/<tenant_id>/attendance/<int:record_id>", methods=["GET"], endpoint="attendance_detail")
    def attendance_detail(tenant_id: str, record_id: int):
        try:
            return ok({"record": service.to_dict(service.get_record(tenant_id, record_id))})
        except Exception as e:
            return error_response(e)

    @app.route("/api/tenants/<tenant_id>/attendance/<int:record_id>", methods=["PUT"], endpoint="attendance_edit")
    def attendance_edit(tenant_id: str, record_id: int):
        data = _body()
        try:
            record = service.edit_record(
                tenant_id,
                record_id,
                edited_by=str(data.get("edited_by") or ""),
                reason=str(data.get("reason") or ""),
                changes=dict(data.get("changes") or {}),
            )
            return ok({"record": service.to_dict(record)})
        except Exception as e:
            return error_response(e)

    @app.route(
        "/api/tenants/<tenant_id>/attendance/<int:record_id>/special-type",
        methods=["PUT"],
        endpoint="attendance_special_type",
    )
    def attendance_special_type(tenant_id: str, record_id: int):
        data = _body()
        try:
            result = service.set_special_work_type(
                tenant_id,
                record_id,
                str(data.get("special_work_type") or ""),
                edited_by=str(data.get("edited_by") or ""),
                reason=str(data.get("reason") or ""),
            )
            return ok({"special_work_type": result.special_work_type.value})
        except Exception as e:
            return error_response(e)

    @app.route("/api/tenants/<tenant_id>/attendance/leave", methods=["POST"], endpoint="attendance_leave")
    def attendance_leave(tenant_id: str):
        data = _body()
        try:
            record_id = service.register_leave(
                tenant_id,
                str(data.get("user_id") or ""),
                str(data.get("date") or ""),
                str(data.get("special_work_type") or ""),
                notes=data.get("notes") or "",
            )
            return ok({"id": record_id}, 201)
        except Exception as e:
            return error_response(e)
