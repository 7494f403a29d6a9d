from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Storage contract for attendance calendar records.

    One record per (user_id, date): ``upsert`` replaces an existing day.
    """

    def get_for_user_and_date(self, user_id: str, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> None:
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest first."""
        raise NotImplementedError

    def delete(self, user_id: str, day: date) -> bool:
        raise NotImplementedError
