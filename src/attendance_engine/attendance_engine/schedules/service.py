from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import Clock, utc_now
from ..common.time_codec import parse_civil_time
from ..common.validators import require_non_empty, require_positive_id, require_week_day
from ..core import constants
from ..core.enums import AssignmentPriority
from ..core.exceptions import ValidationError
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewWorkSchedule:
    name: str
    start_time: str
    end_time: str
    break_minutes: int = constants.DEFAULT_BREAK_MINUTES
    overtime_threshold_hours: float = constants.DEFAULT_OVERTIME_THRESHOLD_HOURS
    week_start_day: int = constants.DEFAULT_WEEK_START_DAY
    project_id: Optional[int] = None


class ScheduleService:
    """Use cases: define work schedules and assign them to users."""

    def __init__(self, schedules: ScheduleRepository, *, clock: Clock = utc_now):
        self._schedules = schedules
        self._clock = clock

    def define(self, data: NewWorkSchedule) -> int:
        name = require_non_empty(data.name, "name")
        start = parse_civil_time(data.start_time)
        end = parse_civil_time(data.end_time)

        if end.minutes_of_day <= start.minutes_of_day:
            raise ValidationError(f"End time {data.end_time} must be after start time {data.start_time}")

        window = end.minutes_of_day - start.minutes_of_day
        break_minutes = int(data.break_minutes)
        if break_minutes < 0:
            raise ValidationError("break_minutes must be >= 0")
        if break_minutes >= window:
            raise ValidationError(f"Break of {break_minutes} minutes does not fit the {window} minute window")

        overtime = float(data.overtime_threshold_hours)
        if overtime <= 0:
            raise ValidationError("overtime_threshold_hours must be > 0")

        week_start_day = require_week_day(data.week_start_day)
        project_id = require_positive_id(data.project_id, "project_id") if data.project_id is not None else None

        schedule_id = self._schedules.create_schedule(
            name=name,
            start_time=start,
            end_time=end,
            break_minutes=break_minutes,
            standard_hours=round((window - break_minutes) / 60, 2),
            overtime_threshold_hours=overtime,
            week_start_day=week_start_day,
            project_id=project_id,
        )
        logger.info("defined schedule id=%s name=%r project=%s", schedule_id, name, project_id)
        return schedule_id

    def assign(
        self,
        *,
        user_id: int,
        schedule_id: int,
        start_date: date,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> int:
        """Assign a schedule; the previous assignment of the same scope is superseded.

        A project schedule yields a PROJECT assignment and supersedes the user's
        earlier assignment for that project; a personal schedule supersedes the
        user's earlier personal assignment. Superseded windows are closed the day
        before ``start_date`` (rows are never deleted).
        """

        user_id = require_positive_id(user_id, "user_id")
        schedule = self._schedules.get_schedule(require_positive_id(schedule_id, "schedule_id"))
        if not schedule:
            raise ValidationError(f"Schedule {schedule_id} does not exist")
        if end_date is not None and end_date < start_date:
            raise ValidationError("end_date must not be before start_date")

        priority = AssignmentPriority.PROJECT if schedule.project_id is not None else AssignmentPriority.PERSONAL
        now = now or self._clock()

        superseded = self._schedules.list_open_assignments(
            user_id=user_id,
            priority=priority,
            from_date=start_date,
            project_id=schedule.project_id,
        )
        for prev in superseded:
            if prev.start_date >= start_date:
                raise ValidationError(
                    f"Assignment {prev.assignment_id} already starts on {prev.start_date}; cannot supersede it from {start_date}"
                )

        assignment_id = self._schedules.create_assignment(
            user_id=user_id,
            schedule_id=schedule.schedule_id,
            priority=priority,
            start_date=start_date,
            end_date=end_date,
            created_at=now,
            supersede=[prev.assignment_id for prev in superseded],
        )
        for prev in superseded:
            logger.info("assignment id=%s superseded by id=%s for user=%s", prev.assignment_id, assignment_id, user_id)
        return assignment_id
