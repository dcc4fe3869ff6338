from __future__ import annotations

from datetime import date

from attendance_engine.attendance.evaluator import LateArrivalEvaluator
from attendance_engine.attendance.service import AttendanceService
from attendance_engine.common.time_codec import CivilTime, to_instant
from attendance_engine.core.enums import AttendanceStatus
from attendance_engine.schedules.resolver import SettingsResolver
from attendance_engine.schedules.weekend import WeekendCalculator
from tests.fakes import InMemoryAttendance, InMemorySchedules, make_schedule


def _service(jst, schedules, attendance):
    resolver = SettingsResolver(schedules)
    return AttendanceService(attendance, resolver, LateArrivalEvaluator(jst), WeekendCalculator(resolver))


def test_scheduled_project_start_drives_lateness(jst):
    schedules = InMemorySchedules()
    schedules.add_assignment(user_id=1, schedule=make_schedule(1, start="08:00", end="17:00"), start_date=date(2026, 1, 1))
    schedules.add_assignment(
        user_id=1,
        schedule=make_schedule(2, start="10:00", end="19:00", project_id=3, project_name="Apollo"),
        start_date=date(2026, 2, 1),
    )
    attendance = InMemoryAttendance()
    attendance.add(1, date(2026, 2, 2), to_instant(date(2026, 2, 2), CivilTime(9, 30), jst))

    result = _service(jst, schedules, attendance).evaluate_day(1, date(2026, 2, 2))

    # 09:30 is late against the personal 08:00 start but on time for the project
    assert result.status == AttendanceStatus.ON_TIME


def test_evaluate_day_without_record_is_unknown(jst):
    result = _service(jst, InMemorySchedules(), InMemoryAttendance()).evaluate_day(1, date(2026, 2, 2))
    assert result.status == AttendanceStatus.UNKNOWN


def test_monthly_summary_counts_late_days(jst):
    attendance = InMemoryAttendance()
    for day, (h, m) in {2: (8, 55), 3: (9, 0), 4: (9, 1), 5: (9, 20)}.items():
        d = date(2026, 2, day)
        attendance.add(1, d, to_instant(d, CivilTime(h, m), jst))
    attendance.add(1, date(2026, 2, 6), None)
    attendance.add(2, date(2026, 2, 2), to_instant(date(2026, 2, 2), CivilTime(11, 0), jst))

    summary = _service(jst, InMemorySchedules(), attendance).monthly_summary(1, 2026, 2)

    assert summary.working_days == 20
    assert summary.attended_days == 4
    assert summary.late_count == 2
    assert summary.total_late_minutes == 21
    assert len(summary.days) == 5
    assert summary.days[-1].result.status == AttendanceStatus.UNKNOWN
    assert summary.attendance_rate == 20.0


def test_monthly_summary_uses_user_week_start(jst):
    schedules = InMemorySchedules()
    schedules.add_assignment(user_id=1, schedule=make_schedule(1, week_start_day=3), start_date=date(2026, 1, 1))
    attendance = InMemoryAttendance()
    attendance.add(1, date(2026, 2, 7), to_instant(date(2026, 2, 7), CivilTime(9, 0), jst))

    summary = _service(jst, schedules, attendance).monthly_summary(1, 2026, 2)

    # Mondays and Tuesdays off: 4 + 4 days in February 2026
    assert summary.working_days == 20
    assert summary.days[0].is_weekend is False
