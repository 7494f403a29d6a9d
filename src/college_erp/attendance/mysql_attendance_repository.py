from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "user_id, record_date, status, subject, hours, notes"


def _to_record(r: dict) -> AttendanceRecord:
    hours = r.get("hours")
    return AttendanceRecord(
        user_id=str(r["user_id"]),
        date=r["record_date"],
        status=AttendanceStatus(r["status"]),
        subject=r.get("subject"),
        hours=float(hours) if hours is not None else None,
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: str, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND record_date=%s",
                (user_id, day),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def upsert(self, record: AttendanceRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, record_date, status, subject, hours, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    subject=VALUES(subject),
                    hours=VALUES(hours),
                    notes=VALUES(notes)
                """,
                (
                    record.user_id,
                    record.date,
                    record.status.value,
                    record.subject,
                    record.hours,
                    record.notes,
                ),
            )

    def list_for_user(
        self,
        user_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        sql = f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s"
        params: list = [user_id]
        if start_date:
            sql += " AND record_date >= %s"
            params.append(start_date)
        if end_date:
            sql += " AND record_date <= %s"
            params.append(end_date)
        sql += " ORDER BY record_date DESC"
        if limit:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def delete(self, user_id: str, day: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE user_id=%s AND record_date=%s", (user_id, day))
            return cur.rowcount > 0
