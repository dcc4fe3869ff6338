from __future__ import annotations

import logging
from datetime import date

from ..common.datetime_utils import iter_dates, month_bounds
from ..schedules.resolver import SettingsResolver
from ..schedules.weekend import WeekendCalculator
from .evaluator import LateArrivalEvaluator
from .model import DailyCompliance, LateArrivalResult, MonthlyAttendanceSummary
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: lateness evaluation and monthly compliance summaries."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        resolver: SettingsResolver,
        evaluator: LateArrivalEvaluator,
        weekends: WeekendCalculator,
    ):
        self._attendance = attendance
        self._resolver = resolver
        self._evaluator = evaluator
        self._weekends = weekends

    def evaluate_day(self, user_id: int, work_date: date) -> LateArrivalResult:
        record = self._attendance.get_for_user_and_date(int(user_id), work_date)
        schedule = self._resolver.resolve(user_id, work_date)
        return self._evaluator.evaluate(record.clock_in if record else None, schedule)

    def monthly_summary(self, user_id: int, year: int, month: int) -> MonthlyAttendanceSummary:
        start, end = month_bounds(year, month)
        records = self._attendance.list_for_user_range(user_id=int(user_id), start_date=start, end_date=end)

        working_days = sum(1 for d in iter_dates(start, end) if not self._weekends.is_weekend_for_user(user_id, d))

        days: list[DailyCompliance] = []
        attended = late_count = late_minutes = 0
        for rec in records:
            schedule = self._resolver.resolve(user_id, rec.work_date)
            result = self._evaluator.evaluate_record(rec, schedule)
            days.append(
                DailyCompliance(
                    work_date=rec.work_date,
                    is_weekend=self._weekends.is_weekend_for_user(user_id, rec.work_date),
                    result=result,
                )
            )
            if rec.clock_in is not None:
                attended += 1
            if result.is_late:
                late_count += 1
                late_minutes += result.late_minutes

        logger.info(
            "monthly summary user=%s %04d-%02d: attended=%d late=%d working_days=%d",
            user_id, year, month, attended, late_count, working_days,
        )
        return MonthlyAttendanceSummary(
            user_id=int(user_id),
            year=year,
            month=month,
            working_days=working_days,
            attended_days=attended,
            late_count=late_count,
            total_late_minutes=late_minutes,
            days=days,
        )
