from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Sequence

from ..core.enums import AttendanceStatus, NightWorkType, SpecialWorkType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import date_to_str, db_cursor, fetchall, fetchone, load_json, time_to_str
from .model import AttendanceRecord, EditHistoryEntry, WorkClassification
from .repository import AttendanceRepository

_SELECT_COLUMNS = """
    attendance_id, tenant_id, user_id, uid, site_name, work_date, start_time, end_time,
    break_minutes, status, working_minutes, overtime_minutes, is_night_work, night_work_type,
    is_holiday_work, special_work_type, notes, break_start_time, edit_history, updated_at
"""

# record field -> column
_PATCHABLE = {
    "site_name": "site_name",
    "date": "work_date",
    "start_time": "start_time",
    "end_time": "end_time",
    "break_minutes": "break_minutes",
    "status": "status",
    "working_minutes": "working_minutes",
    "overtime_minutes": "overtime_minutes",
    "is_night_work": "is_night_work",
    "night_work_type": "night_work_type",
    "is_holiday_work": "is_holiday_work",
    "special_work_type": "special_work_type",
    "notes": "notes",
    "break_start_time": "break_start_time",
    "edit_history": "edit_history",
}


def _history_from_json(value: Any) -> tuple[EditHistoryEntry, ...]:
    items = load_json(value, [])
    return tuple(
        EditHistoryEntry(
            edited_at=datetime.fromisoformat(item["edited_at"]),
            edited_by=str(item.get("edited_by") or ""),
            reason=str(item.get("reason") or ""),
            changes=dict(item.get("changes") or {}),
        )
        for item in items
    )


def _history_to_json(entries: Sequence[EditHistoryEntry]) -> str:
    return json.dumps(
        [
            {
                "edited_at": e.edited_at.isoformat(),
                "edited_by": e.edited_by,
                "reason": e.reason,
                "changes": e.changes,
            }
            for e in entries
        ],
        ensure_ascii=False,
        default=str,
    )


def _to_db_value(key: str, value: Any) -> Any:
    if key == "edit_history":
        return _history_to_json(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return int(value)
    return value


def _row_to_record(r: dict) -> AttendanceRecord:
    # Rows imported from the old document store kept the owner under "uid".
    user_id = r.get("user_id") or r.get("uid")
    return AttendanceRecord(
        record_id=int(r["attendance_id"]),
        tenant_id=str(r["tenant_id"]),
        user_id=str(user_id) if user_id else None,
        site_name=r.get("site_name") or "",
        date=date_to_str(r["work_date"]),
        start_time=time_to_str(r.get("start_time")),
        end_time=time_to_str(r.get("end_time")),
        break_minutes=int(r.get("break_minutes") or 0),
        status=AttendanceStatus(r["status"]),
        working_minutes=int(r.get("working_minutes") or 0),
        overtime_minutes=int(r.get("overtime_minutes") or 0),
        is_night_work=bool(r.get("is_night_work")),
        night_work_type=NightWorkType(r.get("night_work_type") or NightWorkType.NONE.value),
        is_holiday_work=bool(r.get("is_holiday_work")),
        special_work_type=SpecialWorkType(r.get("special_work_type") or SpecialWorkType.NORMAL.value),
        notes=r.get("notes") or "",
        break_start_time=time_to_str(r.get("break_start_time")),
        edit_history=_history_from_json(r.get("edit_history")),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, tenant_id: str, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SELECT_COLUMNS}
                FROM attendance_records
                WHERE tenant_id=%s AND attendance_id=%s
                """,
                (tenant_id, int(record_id)),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def query_attendance(self, tenant_id: str, start_date: str, end_date: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SELECT_COLUMNS}
                FROM attendance_records
                WHERE tenant_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC, attendance_id ASC
                """,
                (tenant_id, start_date, end_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def find_unfinished_for_site(self, tenant_id: str, user_id: str, site_name: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SELECT_COLUMNS}
                FROM attendance_records
                WHERE tenant_id=%s AND user_id=%s AND site_name=%s AND status IN (%s, %s)
                ORDER BY attendance_id DESC
                LIMIT 1
                """,
                (tenant_id, user_id, site_name, AttendanceStatus.WORKING.value, AttendanceStatus.BREAK.value),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def find_last_completed_for_site(
        self, tenant_id: str, user_id: str, site_name: str
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SELECT_COLUMNS}
                FROM attendance_records
                WHERE tenant_id=%s AND user_id=%s AND site_name=%s AND status=%s
                ORDER BY updated_at DESC
                LIMIT 1
                """,
                (tenant_id, user_id, site_name, AttendanceStatus.COMPLETED.value),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create_record(
        self,
        *,
        tenant_id: str,
        user_id: str,
        site_name: str,
        work_date: str,
        start_time: Optional[str],
        status: AttendanceStatus,
        notes: str = "",
        classification: Optional[WorkClassification] = None,
    ) -> int:
        values = {
            "tenant_id": tenant_id,
            "user_id": user_id,
            "site_name": site_name,
            "work_date": work_date,
            "start_time": start_time,
            "status": status.value,
            "notes": notes,
        }
        if classification is not None:
            values.update({_PATCHABLE[k]: _to_db_value(k, v) for k, v in classification.as_patch().items()})

        columns = ", ".join(values)
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO attendance_records({columns}) VALUES({placeholders})",
                tuple(values.values()),
            )
            return int(cur.lastrowid)

    def update_attendance(self, tenant_id: str, record_id: int, patch: dict[str, Any]) -> bool:
        unknown = set(patch) - set(_PATCHABLE)
        if unknown:
            raise ValueError(f"Unsupported attendance fields: {sorted(unknown)}")
        if not patch:
            return False

        assignments = ", ".join(f"{_PATCHABLE[k]}=%s" for k in patch)
        params = [_to_db_value(k, v) for k, v in patch.items()]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance_records
                SET {assignments}, updated_at=CURRENT_TIMESTAMP
                WHERE tenant_id=%s AND attendance_id=%s
                """,
                (*params, tenant_id, int(record_id)),
            )
            return cur.rowcount > 0
