from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from src.kintai_system.kintai_system.attendance.classification.base import leave_classification
from src.kintai_system.kintai_system.attendance.model import AttendanceRecord
from src.kintai_system.kintai_system.attendance.service import AttendanceService
from src.kintai_system.kintai_system.core.enums import AttendanceStatus, NightWorkType, SpecialWorkType
from src.kintai_system.kintai_system.core.exceptions import ClockInRejected, NotFoundError, ValidationError


class FakeAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self.records: dict[int, AttendanceRecord] = {}
        # value written to updated_at on every write
        self.now = datetime(2025, 1, 8, 0, 0)
        self.update_calls = 0

    def get_by_id(self, tenant_id, record_id):
        r = self.records.get(int(record_id))
        return r if r and r.tenant_id == tenant_id else None

    def query_attendance(self, tenant_id, start_date, end_date):
        return [
            r
            for r in sorted(self.records.values(), key=lambda r: (r.date, r.record_id))
            if r.tenant_id == tenant_id and start_date <= r.date <= end_date
        ]

    def find_unfinished_for_site(self, tenant_id, user_id, site_name):
        matches = [
            r
            for r in self.records.values()
            if (r.tenant_id, r.user_id, r.site_name) == (tenant_id, user_id, site_name)
            and r.status in (AttendanceStatus.WORKING, AttendanceStatus.BREAK)
        ]
        return max(matches, key=lambda r: r.record_id) if matches else None

    def find_last_completed_for_site(self, tenant_id, user_id, site_name):
        matches = [
            r
            for r in self.records.values()
            if (r.tenant_id, r.user_id, r.site_name) == (tenant_id, user_id, site_name)
            and r.status == AttendanceStatus.COMPLETED
        ]
        return max(matches, key=lambda r: r.updated_at) if matches else None

    def create_record(
        self, *, tenant_id, user_id, site_name, work_date, start_time, status, notes="", classification=None
    ):
        rid = self._next_id
        self._next_id += 1
        self.records[rid] = AttendanceRecord(
            record_id=rid,
            tenant_id=tenant_id,
            user_id=user_id,
            site_name=site_name,
            date=work_date,
            start_time=start_time,
            status=status,
            notes=notes,
            updated_at=self.now,
            **(classification.as_patch() if classification else {}),
        )
        return rid

    def update_attendance(self, tenant_id, record_id, patch):
        self.update_calls += 1
        r = self.get_by_id(tenant_id, record_id)
        if not r:
            return False
        self.records[int(record_id)] = replace(r, **patch, updated_at=self.now)
        return True


T = "tenant-1"


@pytest.fixture
def repo():
    return FakeAttendanceRepo()


@pytest.fixture
def svc(repo):
    return AttendanceService(repo)


def _at(hour, minute=0, day=8):
    return datetime(2025, 1, day, hour, minute)


def test_clock_in_creates_working_record(svc, repo):
    rid = svc.clock_in(T, "u1", " 現場A ", now=_at(8, 1))

    r = repo.records[rid]
    assert r.status == AttendanceStatus.WORKING
    assert r.start_time == "08:01:00"
    assert r.date == "2025-01-08"
    assert r.site_name == "現場A"


def test_clock_in_before_four_am_belongs_to_previous_day(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(2, 30))

    assert repo.records[rid].date == "2025-01-07"


def test_clock_in_requires_site(svc):
    with pytest.raises(ValidationError):
        svc.clock_in(T, "u1", "  ", now=_at(8))


def test_second_clock_in_on_same_site_is_rejected(svc):
    svc.clock_in(T, "u1", "現場A", now=_at(8))

    with pytest.raises(ClockInRejected) as exc:
        svc.clock_in(T, "u1", "現場A", now=_at(9))
    assert exc.value.reason == "active_work"

    # another site the same day is fine
    assert svc.clock_in(T, "u1", "現場B", now=_at(9)) == 2


def test_recent_clock_out_needs_confirmation(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(8))
    repo.now = _at(12)
    svc.clock_out(T, rid, now=_at(12))

    with pytest.raises(ClockInRejected) as exc:
        svc.clock_in(T, "u1", "現場A", now=_at(12, 30))
    assert exc.value.reason == "recent_clock_out"
    assert exc.value.minutes_since == 30

    with pytest.raises(ClockInRejected):
        svc.clock_in(T, "u1", "現場A", now=_at(13, 0))

    new_id = svc.clock_in(T, "u1", "現場A", now=_at(12, 30), confirm_recent=True)
    assert repo.records[new_id].status == AttendanceStatus.WORKING


def test_clock_in_after_threshold_is_allowed(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(8))
    repo.now = _at(12)
    svc.clock_out(T, rid, now=_at(12))

    assert svc.clock_in(T, "u1", "現場A", now=_at(13, 1)) == 2


def test_break_then_clock_out_classifies(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(8))

    svc.start_break(T, rid, now=_at(12))
    assert repo.records[rid].status == AttendanceStatus.BREAK
    with pytest.raises(ValidationError):
        svc.start_break(T, rid, now=_at(12, 5))

    assert svc.end_break(T, rid, now=_at(12, 45)) == 45
    assert repo.records[rid].status == AttendanceStatus.WORKING
    with pytest.raises(ValidationError):
        svc.end_break(T, rid, now=_at(12, 50))

    result = svc.clock_out(T, rid, now=_at(17))

    assert result.working_minutes == 495
    assert result.overtime_minutes == 15
    assert result.special_work_type == SpecialWorkType.OVERTIME

    r = repo.records[rid]
    assert r.status == AttendanceStatus.COMPLETED
    assert r.end_time == "17:00:00"
    assert r.break_minutes == 45
    assert r.working_minutes == 495
    assert r.overtime_minutes == 15
    assert r.break_start_time is None


def test_clock_out_during_break_closes_it(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(8))
    svc.start_break(T, rid, now=_at(12))

    result = svc.clock_out(T, rid, now=_at(13))

    assert repo.records[rid].break_minutes == 60
    assert result.working_minutes == 240


def test_clock_out_twice_is_rejected(svc):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(8))
    svc.clock_out(T, rid, now=_at(17))

    with pytest.raises(ValidationError):
        svc.clock_out(T, rid, now=_at(18))


def test_fixed_mode_records_default_day(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(9, 12), mode="fixed")
    result = svc.clock_out(T, rid, now=_at(19, 40), mode="fixed")

    r = repo.records[rid]
    assert (r.start_time, r.end_time, r.break_minutes) == ("08:00:00", "17:00:00", 60)
    assert result.working_minutes == 480
    assert result.special_work_type == SpecialWorkType.NORMAL


def test_manual_overnight_entry(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(22, 5), mode="manual", start_time="22:00:00")
    result = svc.clock_out(T, rid, now=_at(6, 10, day=9), mode="manual", end_time="06:00:00", break_minutes=60)

    assert repo.records[rid].date == "2025-01-08"
    assert result.working_minutes == 420
    assert result.night_work_type == NightWorkType.NIGHT_ONLY
    assert result.special_work_type == SpecialWorkType.NIGHT_ONLY


def test_open_shift_is_never_classified(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(8))

    with pytest.raises(ValidationError):
        svc.classify(repo.records[rid])


def test_unknown_record_is_not_found(svc):
    with pytest.raises(NotFoundError):
        svc.start_break(T, 99, now=_at(12))


def test_other_tenant_cannot_see_record(svc):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(8))

    with pytest.raises(NotFoundError):
        svc.get_record("tenant-2", rid)


def _completed(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(8), mode="fixed")
    svc.clock_out(T, rid, now=_at(17), mode="fixed")
    return rid


def test_edit_reclassifies_and_records_history(svc, repo):
    rid = _completed(svc, repo)

    record = svc.edit_record(
        T, rid, edited_by="admin", reason="打刻忘れ", changes={"end_time": "18:00:00"}, now=_at(20)
    )

    assert record.working_minutes == 540
    assert record.overtime_minutes == 60
    assert record.special_work_type == SpecialWorkType.OVERTIME
    assert len(record.edit_history) == 1
    entry = record.edit_history[0]
    assert entry.edited_by == "admin"
    assert entry.reason == "打刻忘れ"
    assert entry.changes == {"end_time": {"before": "17:00:00", "after": "18:00:00"}}


def test_edit_history_is_appended(svc, repo):
    rid = _completed(svc, repo)

    svc.edit_record(T, rid, edited_by="admin", reason="r1", changes={"notes": "a"}, now=_at(20))
    record = svc.edit_record(T, rid, edited_by="admin", reason="r2", changes={"notes": "b"}, now=_at(21))

    assert [e.reason for e in record.edit_history] == ["r1", "r2"]


def test_edit_date_to_saturday_becomes_holiday_work(svc, repo):
    rid = _completed(svc, repo)

    record = svc.edit_record(T, rid, edited_by="admin", reason="日付誤り", changes={"date": "2025-01-11"})

    assert record.date == "2025-01-11"
    assert record.is_holiday_work is True
    assert record.special_work_type == SpecialWorkType.HOLIDAY_WORK


def test_edit_removing_end_time_reopens_shift(svc, repo):
    rid = _completed(svc, repo)

    record = svc.edit_record(T, rid, edited_by="admin", reason="誤退勤", changes={"end_time": ""})

    assert record.end_time is None
    assert record.status == AttendanceStatus.WORKING
    assert record.working_minutes == 0


@pytest.mark.parametrize(
    "reason,changes",
    [
        ("", {"notes": "x"}),
        ("理由", {"end_time": "17:00:00"}),
        ("理由", {"user_id": "someone-else"}),
        ("理由", {"break_minutes": -5}),
        ("理由", {"start_time": "8:00"}),
    ],
)
def test_edit_rejects_invalid_requests(svc, repo, reason, changes):
    rid = _completed(svc, repo)

    with pytest.raises(ValidationError):
        svc.edit_record(T, rid, edited_by="admin", reason=reason, changes=changes)


def test_special_type_override_to_leave_and_back(svc, repo):
    rid = _completed(svc, repo)

    leave = svc.set_special_work_type(T, rid, "paid_leave", edited_by="admin", reason="有給申請")
    r = repo.records[rid]
    assert leave.working_minutes == 0
    assert r.special_work_type == SpecialWorkType.PAID_LEAVE
    assert r.working_minutes == 0
    assert r.is_night_work is False
    assert r.is_holiday_work is False
    assert r.edit_history[-1].changes == {"special_work_type": {"before": "normal", "after": "paid_leave"}}

    back = svc.set_special_work_type(T, rid, SpecialWorkType.NORMAL, edited_by="admin", reason="取消")
    assert back.working_minutes == 480
    assert repo.records[rid].special_work_type == SpecialWorkType.NORMAL
    assert len(repo.records[rid].edit_history) == 2


@pytest.mark.parametrize("value", ["overtime", "holiday_work", "vacation"])
def test_special_type_override_rejects_time_based_or_unknown(svc, repo, value):
    rid = _completed(svc, repo)

    with pytest.raises(ValidationError):
        svc.set_special_work_type(T, rid, value, edited_by="admin", reason="x")


def test_register_leave_creates_zero_time_record(svc, repo):
    rid = svc.register_leave(T, "u1", "2025-01-10", "absence", notes="体調不良")

    r = repo.records[rid]
    assert r.status == AttendanceStatus.COMPLETED
    assert r.special_work_type == SpecialWorkType.ABSENCE
    assert r.start_time is None
    assert r.working_minutes == 0
    assert r.notes == "体調不良"


@pytest.mark.parametrize("value", ["normal", "sick"])
def test_register_leave_rejects_non_leave_types(svc, value):
    with pytest.raises(ValidationError):
        svc.register_leave(T, "u1", "2025-01-10", value)


def test_to_dict_serializes_enums_and_history(svc, repo):
    rid = _completed(svc, repo)
    svc.edit_record(T, rid, edited_by="admin", reason="r", changes={"notes": "memo"}, now=_at(20))

    data = svc.to_dict(svc.get_record(T, rid))

    assert data["status"] == "completed"
    assert data["special_work_type"] == "normal"
    assert data["edit_history"][0]["edited_at"] == "2025-01-08T20:00:00"


def test_leave_override_closes_an_open_shift(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(8))

    svc.set_special_work_type(T, rid, "absence", edited_by="admin", reason="欠勤扱い")

    r = repo.records[rid]
    assert r.status == AttendanceStatus.COMPLETED
    assert r.special_work_type == SpecialWorkType.ABSENCE
    with pytest.raises(ValidationError):
        svc.clock_out(T, rid, now=_at(17))
    assert repo.records[rid].special_work_type == SpecialWorkType.ABSENCE
    assert repo.records[rid].working_minutes == 0

    # the site is free again and a leave day does not count as a recent clock-out
    assert svc.clock_in(T, "u1", "現場A", now=_at(8, 30)) == 2


def test_clock_out_refuses_leave_record_left_open(svc, repo):
    rid = repo.create_record(
        tenant_id=T, user_id="u1", site_name="現場A", work_date="2025-01-08", start_time="08:00:00",
        status=AttendanceStatus.WORKING, classification=leave_classification(SpecialWorkType.PAID_LEAVE),
    )

    with pytest.raises(ValidationError):
        svc.clock_out(T, rid, now=_at(17))
    assert repo.records[rid].special_work_type == SpecialWorkType.PAID_LEAVE


def test_zero_length_break_adds_no_minutes(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(8))
    svc.start_break(T, rid, now=_at(12))

    assert svc.end_break(T, rid, now=_at(12)) == 0

    result = svc.clock_out(T, rid, now=_at(17))
    assert result.working_minutes == 540


def test_clock_out_right_after_break_start_adds_no_minutes(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(8))
    svc.start_break(T, rid, now=_at(17))

    result = svc.clock_out(T, rid, now=_at(17))

    assert repo.records[rid].break_minutes == 0
    assert result.working_minutes == 540


def test_reclockin_threshold_uses_exact_gap(svc, repo):
    rid = svc.clock_in(T, "u1", "現場A", now=_at(8))
    repo.now = _at(12)
    svc.clock_out(T, rid, now=_at(12))

    # 60 minutes 54 seconds after the clock-out
    assert svc.clock_in(T, "u1", "現場A", now=datetime(2025, 1, 8, 13, 0, 54)) == 2


def test_register_leave_is_a_single_write(svc, repo):
    rid = svc.register_leave(T, "u1", "2025-01-10", "paid_leave")

    assert repo.update_calls == 0
    assert repo.records[rid].special_work_type == SpecialWorkType.PAID_LEAVE
