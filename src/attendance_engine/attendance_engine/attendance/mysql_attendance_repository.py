from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _from_row(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        clock_in=as_utc(r.get("clock_in")),
        clock_out=as_utc(r.get("clock_out")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, work_date, clock_in, clock_out
                FROM attendance
                WHERE user_id=%s AND work_date=%s
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _from_row(r) if r else None

    def list_for_user_range(self, *, user_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, work_date, clock_in, clock_out
                FROM attendance
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(user_id), start_date, end_date),
            )
            return [_from_row(r) for r in fetchall(cur)]
