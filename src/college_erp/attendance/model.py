from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one calendar day of attendance for a student or employee."""

    user_id: str
    date: date
    status: AttendanceStatus
    subject: Optional[str] = None
    hours: Optional[float] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceStats:
    """Read-model for the attendance calendar header."""

    total_days: int
    present_days: int
    absent_days: int
    late_days: int
    leave_days: int
    holiday_days: int
    percentage: float

    @property
    def attended_days(self) -> int:
        return self.present_days + self.late_days

    @property
    def working_days(self) -> int:
        return self.total_days - self.holiday_days
