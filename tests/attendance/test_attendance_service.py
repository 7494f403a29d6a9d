from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

import pytest

from college_erp.attendance.model import AttendanceRecord
from college_erp.attendance.service import AttendanceService
from college_erp.core.enums import AttendanceStatus, ComplianceStatus
from college_erp.core.exceptions import NotFoundError, ValidationError


class InMemoryAttendance:
    def __init__(self):
        self._by_user_date: dict[tuple[str, date], AttendanceRecord] = {}

    def get_for_user_and_date(self, user_id: str, day: date) -> Optional[AttendanceRecord]:
        return self._by_user_date.get((user_id, day))

    def upsert(self, record: AttendanceRecord) -> None:
        self._by_user_date[(record.user_id, record.date)] = record

    def list_for_user(self, user_id: str, *, start_date=None, end_date=None, limit=None):
        items = [
            r
            for r in self._by_user_date.values()
            if r.user_id == user_id
            and (start_date is None or r.date >= start_date)
            and (end_date is None or r.date <= end_date)
        ]
        items.sort(key=lambda r: r.date, reverse=True)
        return items[:limit] if limit else items

    def delete(self, user_id: str, day: date) -> bool:
        return self._by_user_date.pop((user_id, day), None) is not None


def _fill_week(svc: AttendanceService, today: date) -> None:
    statuses = ["present", "present", "late", "absent", "holiday"]
    for offset, status in enumerate(statuses, start=1):
        svc.mark(user_id="stu001", day=today - timedelta(days=offset), status=status, today=today)


def test_marking_same_day_replaces_record(today):
    repo = InMemoryAttendance()
    svc = AttendanceService(repo)

    svc.mark(user_id="stu001", day=today, status="absent", today=today)
    svc.mark(user_id="stu001", day=today, status=AttendanceStatus.LATE, subject="Computer Networks", hours=7.5, today=today)

    history = svc.history("stu001")
    assert len(history) == 1
    assert history[0].status == AttendanceStatus.LATE
    assert history[0].hours == 7.5


def test_history_is_newest_first_and_filtered(today):
    svc = AttendanceService(InMemoryAttendance())
    _fill_week(svc, today)

    history = svc.history("stu001", start=today - timedelta(days=3))
    assert [r.date for r in history] == [today - timedelta(days=d) for d in (1, 2, 3)]


def test_history_rejects_inverted_range(today):
    svc = AttendanceService(InMemoryAttendance())
    with pytest.raises(ValidationError):
        svc.history("stu001", start=today, end=today - timedelta(days=1))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"day_offset": -1, "status": "present"},
        {"day_offset": 400, "status": "present"},
        {"day_offset": 0, "status": "excused"},
        {"day_offset": 0, "status": "present", "notes": "x" * 201},
        {"day_offset": 0, "status": "present", "hours": -1},
    ],
)
def test_mark_validation(today, kwargs):
    svc = AttendanceService(InMemoryAttendance())
    offset = kwargs.pop("day_offset")
    with pytest.raises(ValidationError):
        svc.mark(user_id="stu001", day=today - timedelta(days=offset), today=today, **kwargs)


def test_stats_count_late_as_attended(today):
    svc = AttendanceService(InMemoryAttendance())
    _fill_week(svc, today)

    stats = svc.stats("stu001")
    assert stats.total_days == 5
    assert stats.present_days == 2
    assert stats.late_days == 1
    assert stats.absent_days == 1
    assert stats.holiday_days == 1
    assert stats.percentage == 60.0


def test_summary_excludes_holidays(today):
    svc = AttendanceService(InMemoryAttendance(), required_percentage=75)
    _fill_week(svc, today)

    summary = svc.summary("stu001")
    # 3 attended out of 4 working days
    assert summary.percentage == 75.0
    assert summary.status == ComplianceStatus.GOOD

    assert svc.summary("stu001", required_percentage=80).status == ComplianceStatus.CRITICAL


def test_stats_for_unknown_user_are_empty():
    stats = AttendanceService(InMemoryAttendance()).stats("nobody")
    assert stats.total_days == 0
    assert stats.percentage == 0.0


def test_remove_missing_record_raises(today):
    svc = AttendanceService(InMemoryAttendance())
    with pytest.raises(NotFoundError):
        svc.remove(user_id="stu001", day=today)
