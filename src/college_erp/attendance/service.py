from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from ..common.datetime_utils import today_local
from ..common.validators import require_choice, require_max_length, require_non_empty, require_non_negative
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_REQUIRED_PERCENTAGE, MAX_NOTES_LENGTH
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from .calculator import AttendanceSummary, compute_attendance
from .model import AttendanceRecord, AttendanceStats
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases around the attendance calendar of a single user."""

    def __init__(self, attendance: AttendanceRepository, *, required_percentage=DEFAULT_REQUIRED_PERCENTAGE):
        self._attendance = attendance
        self._required = required_percentage

    def mark(
        self,
        *,
        user_id: str,
        day: date,
        status,
        subject: Optional[str] = None,
        hours: Optional[float] = None,
        notes: Optional[str] = None,
        today: Optional[date] = None,
    ) -> AttendanceRecord:
        today = today or today_local()
        user_id = require_non_empty(user_id, "User")
        status = require_choice(status, AttendanceStatus, "Attendance status")

        # Same window the attendance form enforces: within the last year, not in the future.
        if day > today:
            raise ValidationError("Attendance date cannot be in the future")
        if day < today - timedelta(days=365):
            raise ValidationError("Attendance date must be within the last year")

        require_max_length(notes, "Notes", MAX_NOTES_LENGTH)
        if hours is not None:
            require_non_negative(hours, "Hours")

        record = AttendanceRecord(
            user_id=user_id,
            date=day,
            status=status,
            subject=subject or None,
            hours=float(hours) if hours is not None else None,
            notes=notes or None,
        )
        replaced = self._attendance.get_for_user_and_date(user_id, day) is not None
        self._attendance.upsert(record)
        logger.info("Attendance %s for %s on %s: %s", "updated" if replaced else "marked", user_id, day, status.value)
        return record

    def remove(self, *, user_id: str, day: date) -> None:
        if not self._attendance.delete(user_id, day):
            raise NotFoundError(f"No attendance record for {user_id} on {day}")

    def history(
        self,
        user_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        if start and end and start > end:
            raise ValidationError("Start date must not be after end date")
        return self._attendance.list_for_user(user_id, start_date=start, end_date=end, limit=limit)

    def stats(self, user_id: str, *, start: Optional[date] = None, end: Optional[date] = None) -> AttendanceStats:
        records = self._attendance.list_for_user(user_id, start_date=start, end_date=end)
        return build_stats(records)

    def summary(self, user_id: str, *, required_percentage=None) -> AttendanceSummary:
        """Calculator view of a user's calendar; holidays are not counted as classes."""
        stats = self.stats(user_id)
        required = self._required if required_percentage is None else required_percentage
        return compute_attendance(stats.working_days, stats.attended_days, required)


def build_stats(records) -> AttendanceStats:
    counts = {status: 0 for status in AttendanceStatus}
    for r in records:
        counts[r.status] += 1

    total = len(records)
    attended = counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.LATE]
    percentage = attended / total * 100 if total > 0 else 0.0

    return AttendanceStats(
        total_days=total,
        present_days=counts[AttendanceStatus.PRESENT],
        absent_days=counts[AttendanceStatus.ABSENT],
        late_days=counts[AttendanceStatus.LATE],
        leave_days=counts[AttendanceStatus.LEAVE],
        holiday_days=counts[AttendanceStatus.HOLIDAY],
        percentage=percentage,
    )
