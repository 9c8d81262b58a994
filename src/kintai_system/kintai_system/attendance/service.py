from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from ..common.datetime_utils import (
    break_minutes_between,
    format_date,
    format_time,
    now_local,
    parse_iso_date,
    parse_time_of_day,
    to_instant,
    working_date,
)
from ..common.validators import require_non_empty, require_non_negative
from ..core.constants import RECLOCKIN_THRESHOLD_MINUTES
from ..core.enums import AttendanceStatus, EntryMode, SpecialWorkType
from ..core.exceptions import ClockInRejected, NotFoundError, ValidationError
from .classification.base import WorkTimeClassifier, leave_classification
from .classification.standard_classifier import StandardWorkTimeClassifier
from .factory import EntryStrategyFactory
from .model import AttendanceRecord, EditHistoryEntry, WorkClassification
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("site_name", "date", "start_time", "end_time", "break_minutes", "notes")


class AttendanceService:
    """Clock-in/out, breaks and edits for one tenant's attendance records.

    Every path that ends with both clock times set goes through the same
    classifier, whatever entry mode produced the times.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        classifier: WorkTimeClassifier | None = None,
        strategy_factory: EntryStrategyFactory | None = None,
        reclockin_threshold_minutes: int = RECLOCKIN_THRESHOLD_MINUTES,
    ):
        self._attendance = attendance
        self._classifier = classifier or StandardWorkTimeClassifier()
        self._factory = strategy_factory or EntryStrategyFactory()
        self._reclockin_threshold = int(reclockin_threshold_minutes)

    def _get(self, tenant_id: str, record_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(tenant_id, record_id)
        if not record:
            raise NotFoundError("勤怠記録が見つかりません")
        return record

    def _update(self, tenant_id: str, record_id: int, patch: dict[str, Any]) -> None:
        if not self._attendance.update_attendance(tenant_id, record_id, patch):
            raise NotFoundError("勤怠記録の更新に失敗しました")

    def classify(self, record: AttendanceRecord) -> WorkClassification:
        """Classification for a record; open shifts are refused."""
        if record.is_leave:
            return leave_classification(record.special_work_type)
        if not record.start_time or not record.end_time:
            raise ValidationError("退勤していない勤務は集計区分を判定できません")
        return self._classifier.classify(
            start_time=record.start_time,
            end_time=record.end_time,
            break_minutes=record.break_minutes,
            work_date=record.date,
        )

    def get_record(self, tenant_id: str, record_id: int) -> AttendanceRecord:
        return self._get(tenant_id, record_id)

    def check_site_limit(self, tenant_id: str, user_id: str, site_name: str, *, now: datetime) -> None:
        """Refuse a second open shift on one site, and an unconfirmed quick re-clock-in."""
        active = self._attendance.find_unfinished_for_site(tenant_id, user_id, site_name)
        if active:
            raise ClockInRejected(
                f"{site_name}では既に勤務中です。退勤してから新しい勤務を開始してください。",
                reason="active_work",
            )

        last = self._attendance.find_last_completed_for_site(tenant_id, user_id, site_name)
        if last and last.updated_at and not last.is_leave:
            gap = now - last.updated_at
            if timedelta(0) <= gap <= timedelta(minutes=self._reclockin_threshold):
                minutes_since = int(gap.total_seconds() // 60)
                raise ClockInRejected(
                    f"{site_name}で{minutes_since}分前に退勤しています。再度出勤しますか？",
                    reason="recent_clock_out",
                    minutes_since=minutes_since,
                )

    def clock_in(
        self,
        tenant_id: str,
        user_id: str,
        site_name: str,
        *,
        now: datetime | None = None,
        mode: EntryMode | str = EntryMode.LIVE,
        start_time: Optional[str] = None,
        notes: str = "",
        confirm_recent: bool = False,
    ) -> int:
        now = now or now_local()
        user_id = require_non_empty(user_id, "ユーザーID")
        site_name = require_non_empty(site_name, "現場名")

        try:
            self.check_site_limit(tenant_id, user_id, site_name, now=now)
        except ClockInRejected as e:
            if not (confirm_recent and e.reason == "recent_clock_out"):
                raise
            logger.info("[attendance] re-clock-in confirmed user=%s site=%s (%s min)", user_id, site_name, e.minutes_since)

        decision = self._factory.for_mode(mode).decide_clock_in(now=now, requested_start=start_time)
        work_date = format_date(working_date(now))

        record_id = self._attendance.create_record(
            tenant_id=tenant_id,
            user_id=user_id,
            site_name=site_name,
            work_date=work_date,
            start_time=decision.start_time,
            status=AttendanceStatus.WORKING,
            notes=(notes or "").strip(),
        )
        logger.info(
            "[attendance] clock-in tenant=%s user=%s site=%s date=%s start=%s id=%s",
            tenant_id, user_id, site_name, work_date, decision.start_time, record_id,
        )
        return record_id

    def start_break(self, tenant_id: str, record_id: int, *, now: datetime | None = None) -> None:
        now = now or now_local()
        record = self._get(tenant_id, record_id)
        if record.status == AttendanceStatus.BREAK:
            raise ValidationError("既に休憩中です")
        if record.status != AttendanceStatus.WORKING:
            raise ValidationError("勤務中ではないため休憩を開始できません")

        self._update(
            tenant_id,
            record_id,
            {"status": AttendanceStatus.BREAK, "break_start_time": format_time(now)},
        )

    def end_break(self, tenant_id: str, record_id: int, *, now: datetime | None = None) -> int:
        """Close the running break; returns the record's new break total in minutes."""
        now = now or now_local()
        record = self._get(tenant_id, record_id)
        if record.status != AttendanceStatus.BREAK or not record.break_start_time:
            raise ValidationError("休憩記録が見つかりませんでした")

        taken = break_minutes_between(
            to_instant(record.break_start_time, record.date),
            to_instant(format_time(now), record.date),
        )
        total = record.break_minutes + taken
        self._update(
            tenant_id,
            record_id,
            {"status": AttendanceStatus.WORKING, "break_minutes": total, "break_start_time": None},
        )
        return total

    def clock_out(
        self,
        tenant_id: str,
        record_id: int,
        *,
        now: datetime | None = None,
        mode: EntryMode | str = EntryMode.LIVE,
        end_time: Optional[str] = None,
        break_minutes: Optional[int] = None,
    ) -> WorkClassification:
        now = now or now_local()
        record = self._get(tenant_id, record_id)
        if record.status == AttendanceStatus.COMPLETED or not record.is_open:
            raise ValidationError("既に退勤済みです")
        if record.is_leave:
            raise ValidationError("休暇・欠勤として登録済みの記録は退勤できません")
        if record.status not in (AttendanceStatus.WORKING, AttendanceStatus.BREAK):
            raise ValidationError("出勤記録が見つかりません")

        decision = self._factory.for_mode(mode).decide_clock_out(
            now=now, record=record, requested_end=end_time, requested_break=break_minutes
        )
        closing = AttendanceRecord(
            record_id=record.record_id,
            tenant_id=record.tenant_id,
            user_id=record.user_id,
            site_name=record.site_name,
            date=record.date,
            start_time=record.start_time,
            end_time=decision.end_time,
            break_minutes=record.break_minutes if decision.break_minutes is None else decision.break_minutes,
        )
        classification = self.classify(closing)

        patch = {
            "end_time": closing.end_time,
            "break_minutes": closing.break_minutes,
            "status": AttendanceStatus.COMPLETED,
            "break_start_time": None,
            **classification.as_patch(),
        }
        self._update(tenant_id, record_id, patch)
        logger.info(
            "[attendance] clock-out tenant=%s id=%s worked=%s overtime=%s type=%s",
            tenant_id, record_id, classification.working_minutes, classification.overtime_minutes,
            classification.special_work_type.value,
        )
        return classification

    def register_leave(
        self,
        tenant_id: str,
        user_id: str,
        work_date: str,
        special_work_type: SpecialWorkType | str,
        *,
        notes: str = "",
    ) -> int:
        """Create a day record for paid leave, compensatory leave or absence."""
        user_id = require_non_empty(user_id, "ユーザーID")
        parse_iso_date(work_date)
        try:
            special_work_type = SpecialWorkType(special_work_type)
        except ValueError:
            raise ValidationError(f"勤務区分が不正です: {special_work_type}")
        classification = leave_classification(special_work_type)

        record_id = self._attendance.create_record(
            tenant_id=tenant_id,
            user_id=user_id,
            site_name="",
            work_date=work_date,
            start_time=None,
            status=AttendanceStatus.COMPLETED,
            notes=(notes or "").strip(),
            classification=classification,
        )
        logger.info("[attendance] leave tenant=%s user=%s date=%s type=%s", tenant_id, user_id, work_date,
                    classification.special_work_type.value)
        return record_id

    def edit_record(
        self,
        tenant_id: str,
        record_id: int,
        *,
        edited_by: str,
        reason: str,
        changes: dict[str, Any],
        now: datetime | None = None,
    ) -> AttendanceRecord:
        """Apply an administrator edit, re-classify and append to the edit history."""
        now = now or now_local()
        reason = require_non_empty(reason, "修正理由")
        record = self._get(tenant_id, record_id)

        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"編集できない項目です: {', '.join(sorted(unknown))}")

        values = {f: getattr(record, f) for f in EDITABLE_FIELDS}
        diff: dict[str, dict[str, Any]] = {}
        for key, new_value in changes.items():
            new_value = self._clean_edit_value(key, new_value)
            if new_value != values[key]:
                diff[key] = {"before": values[key], "after": new_value}
                values[key] = new_value

        if not diff:
            raise ValidationError("変更された項目がありません")

        edited = AttendanceRecord(
            record_id=record.record_id,
            tenant_id=record.tenant_id,
            user_id=record.user_id,
            site_name=values["site_name"],
            date=values["date"],
            start_time=values["start_time"],
            end_time=values["end_time"],
            break_minutes=values["break_minutes"],
            status=record.status,
            special_work_type=record.special_work_type,
            notes=values["notes"],
        )

        patch: dict[str, Any] = {key: change["after"] for key, change in diff.items()}
        if edited.is_leave or edited.end_time:
            patch["status"] = AttendanceStatus.COMPLETED
            patch["break_start_time"] = None
            patch.update(self.classify(edited).as_patch())
        elif "end_time" in diff:
            # Clock-out removed: the shift is open again and carries no time.
            patch["status"] = AttendanceStatus.WORKING
            patch.update(WorkClassification().as_patch())

        entry = EditHistoryEntry(edited_at=now, edited_by=edited_by, reason=reason, changes=diff)
        patch["edit_history"] = (*record.edit_history, entry)

        self._update(tenant_id, record_id, patch)
        logger.info("[attendance] edit tenant=%s id=%s by=%s fields=%s", tenant_id, record_id, edited_by,
                    ",".join(sorted(diff)))
        return self._get(tenant_id, record_id)

    def set_special_work_type(
        self,
        tenant_id: str,
        record_id: int,
        special_work_type: SpecialWorkType | str,
        *,
        edited_by: str,
        reason: str,
        now: datetime | None = None,
    ) -> WorkClassification:
        """Mark a record as leave/absence, or return it to time-based classification."""
        now = now or now_local()
        reason = require_non_empty(reason, "修正理由")
        try:
            special_work_type = SpecialWorkType(special_work_type)
        except ValueError:
            raise ValidationError(f"勤務区分が不正です: {special_work_type}")
        record = self._get(tenant_id, record_id)

        if special_work_type.is_leave:
            classification = leave_classification(special_work_type)
        elif special_work_type == SpecialWorkType.NORMAL:
            time_based = AttendanceRecord(
                record_id=record.record_id,
                tenant_id=record.tenant_id,
                user_id=record.user_id,
                site_name=record.site_name,
                date=record.date,
                start_time=record.start_time,
                end_time=record.end_time,
                break_minutes=record.break_minutes,
            )
            classification = self.classify(time_based)
        else:
            raise ValidationError("時間帯による勤務区分は打刻時刻から自動判定されます")

        before = record.special_work_type.value
        entry = EditHistoryEntry(
            edited_at=now,
            edited_by=edited_by,
            reason=reason,
            changes={"special_work_type": {"before": before, "after": classification.special_work_type.value}},
        )
        patch = {**classification.as_patch(), "edit_history": (*record.edit_history, entry)}
        if classification.special_work_type.is_leave:
            # A leave day is never an open shift.
            patch["status"] = AttendanceStatus.COMPLETED
            patch["break_start_time"] = None
        self._update(tenant_id, record_id, patch)
        return classification

    @staticmethod
    def _clean_edit_value(key: str, value: Any) -> Any:
        if key in ("start_time", "end_time"):
            if value in (None, ""):
                return None
            parse_time_of_day(value)
            return value
        if key == "date":
            return format_date(parse_iso_date(value))
        if key == "break_minutes":
            return require_non_negative(value, "休憩時間")
        if key == "site_name":
            return require_non_empty(value, "現場名")
        return (value or "").strip()

    @staticmethod
    def to_dict(record: AttendanceRecord) -> dict:
        return {
            "id": record.record_id,
            "user_id": record.user_id,
            "site_name": record.site_name,
            "date": record.date,
            "start_time": record.start_time,
            "end_time": record.end_time,
            "break_minutes": record.break_minutes,
            "status": record.status.value,
            "working_minutes": record.working_minutes,
            "overtime_minutes": record.overtime_minutes,
            "is_night_work": record.is_night_work,
            "night_work_type": record.night_work_type.value,
            "is_holiday_work": record.is_holiday_work,
            "special_work_type": record.special_work_type.value,
            "notes": record.notes,
            "edit_history": [
                {
                    "edited_at": e.edited_at.isoformat(),
                    "edited_by": e.edited_by,
                    "reason": e.reason,
                    "changes": e.changes,
                }
                for e in record.edit_history
            ],
        }
