from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

import mysql.connector

from ..common.time_codec import CivilTime
from ..core.enums import AssignmentPriority
from ..core.exceptions import ResolutionError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, fetchone, normalize_mysql_time, to_utc_naive
from .model import ScheduleAssignment, WorkSchedule
from .repository import ScheduleRepository

_SCHEDULE_COLUMNS = """
    ws.schedule_id, ws.schedule_name, ws.start_time, ws.end_time, ws.break_minutes,
    ws.standard_hours, ws.overtime_threshold_hours, ws.week_start_day,
    ws.project_id, p.project_name
"""

_ASSIGNMENT_SELECT = f"""
    SELECT sa.assignment_id, sa.user_id, sa.priority, sa.start_date, sa.end_date,
           sa.is_active, sa.created_at, {_SCHEDULE_COLUMNS}
    FROM schedule_assignments sa
    JOIN work_schedules ws ON ws.schedule_id = sa.schedule_id
    LEFT JOIN projects p ON p.project_id = ws.project_id
"""


def _civil(value) -> CivilTime:
    return CivilTime.from_time(normalize_mysql_time(value))


def _schedule_from_row(r: dict) -> WorkSchedule:
    return WorkSchedule(
        schedule_id=int(r["schedule_id"]),
        name=r["schedule_name"],
        start_time=_civil(r["start_time"]),
        end_time=_civil(r["end_time"]),
        break_minutes=int(r.get("break_minutes") or 0),
        standard_hours=float(r["standard_hours"]),
        overtime_threshold_hours=float(r["overtime_threshold_hours"]),
        week_start_day=int(r["week_start_day"]),
        project_id=int(r["project_id"]) if r.get("project_id") is not None else None,
        project_name=r.get("project_name"),
    )


def _assignment_from_row(r: dict) -> ScheduleAssignment:
    return ScheduleAssignment(
        assignment_id=int(r["assignment_id"]),
        user_id=int(r["user_id"]),
        schedule=_schedule_from_row(r),
        priority=AssignmentPriority(r["priority"]),
        start_date=r["start_date"],
        end_date=r.get("end_date"),
        is_active=bool(r["is_active"]),
        created_at=as_utc(r["created_at"]),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_assignments(self, *, user_id: int, on_date: date, priority: AssignmentPriority) -> Sequence[ScheduleAssignment]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    _ASSIGNMENT_SELECT
                    + """
                    WHERE sa.user_id=%s AND sa.priority=%s AND sa.is_active=1
                      AND sa.start_date <= %s AND (sa.end_date IS NULL OR sa.end_date >= %s)
                    ORDER BY sa.created_at DESC, sa.assignment_id DESC
                    """,
                    (int(user_id), priority.value, on_date, on_date),
                )
                return [_assignment_from_row(r) for r in fetchall(cur)]
        except mysql.connector.Error as e:
            raise ResolutionError(f"Assignment lookup failed for user {user_id}: {e}") from e

    def get_schedule(self, schedule_id: int) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SCHEDULE_COLUMNS}
                FROM work_schedules ws
                LEFT JOIN projects p ON p.project_id = ws.project_id
                WHERE ws.schedule_id=%s
                """,
                (int(schedule_id),),
            )
            r = fetchone(cur)
            return _schedule_from_row(r) if r else None

    def create_schedule(
        self,
        *,
        name: str,
        start_time: CivilTime,
        end_time: CivilTime,
        break_minutes: int,
        standard_hours: float,
        overtime_threshold_hours: float,
        week_start_day: int,
        project_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_schedules(
                    schedule_name, start_time, end_time, break_minutes,
                    standard_hours, overtime_threshold_hours, week_start_day, project_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    name,
                    start_time.to_time(),
                    end_time.to_time(),
                    int(break_minutes),
                    float(standard_hours),
                    float(overtime_threshold_hours),
                    int(week_start_day),
                    project_id,
                ),
            )
            return int(cur.lastrowid)

    def list_open_assignments(
        self,
        *,
        user_id: int,
        priority: AssignmentPriority,
        from_date: date,
        project_id: Optional[int] = None,
    ) -> Sequence[ScheduleAssignment]:
        clauses = [
            "sa.user_id=%s",
            "sa.priority=%s",
            "sa.is_active=1",
            "(sa.end_date IS NULL OR sa.end_date >= %s)",
        ]
        params: list[object] = [int(user_id), priority.value, from_date]
        if project_id is not None:
            clauses.append("ws.project_id=%s")
            params.append(int(project_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_ASSIGNMENT_SELECT + " WHERE " + " AND ".join(clauses), tuple(params))
            return [_assignment_from_row(r) for r in fetchall(cur)]

    def create_assignment(
        self,
        *,
        user_id: int,
        schedule_id: int,
        priority: AssignmentPriority,
        start_date: date,
        end_date: Optional[date],
        created_at: datetime,
        supersede: Sequence[int] = (),
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            for assignment_id in supersede:
                cur.execute(
                    "UPDATE schedule_assignments SET end_date=%s WHERE assignment_id=%s",
                    (start_date - timedelta(days=1), int(assignment_id)),
                )
            cur.execute(
                """
                INSERT INTO schedule_assignments(user_id, schedule_id, priority, start_date, end_date, is_active, created_at)
                VALUES(%s,%s,%s,%s,%s,1,%s)
                """,
                (int(user_id), int(schedule_id), priority.value, start_date, end_date, to_utc_naive(created_at)),
            )
            return int(cur.lastrowid)
