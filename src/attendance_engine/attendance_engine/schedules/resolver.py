from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.time_codec import format_civil_time, parse_civil_time
from ..core import constants
from ..core.enums import AssignmentPriority, ScheduleSource
from .model import EffectiveSchedule, ScheduleAssignment
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


def default_schedule(source: ScheduleSource = ScheduleSource.DEFAULT) -> EffectiveSchedule:
    """Company default: 09:00-18:00, 60 minute break, 8h standard, week starts Monday."""

    return EffectiveSchedule(
        start_time=parse_civil_time(constants.DEFAULT_START_TIME),
        end_time=parse_civil_time(constants.DEFAULT_END_TIME),
        break_minutes=constants.DEFAULT_BREAK_MINUTES,
        standard_hours=constants.DEFAULT_STANDARD_HOURS,
        overtime_threshold_hours=constants.DEFAULT_OVERTIME_THRESHOLD_HOURS,
        week_start_day=constants.DEFAULT_WEEK_START_DAY,
        source=source,
        source_label=None,
    )


def _most_recent(assignments: Sequence[ScheduleAssignment]) -> Optional[ScheduleAssignment]:
    if not assignments:
        return None
    return max(assignments, key=lambda a: (a.created_at, a.assignment_id))


def _project_label(assignment: ScheduleAssignment) -> str:
    sc = assignment.schedule
    window = f"{format_civil_time(sc.start_time)}-{format_civil_time(sc.end_time)}"
    return f"{sc.project_name or 'Unknown Project'} - {sc.name} ({window})"


def _from_assignment(assignment: ScheduleAssignment, source: ScheduleSource) -> EffectiveSchedule:
    sc = assignment.schedule
    return EffectiveSchedule(
        start_time=sc.start_time,
        end_time=sc.end_time,
        break_minutes=sc.break_minutes,
        standard_hours=sc.standard_hours,
        overtime_threshold_hours=sc.overtime_threshold_hours,
        week_start_day=sc.week_start_day,
        source=source,
        source_label=_project_label(assignment) if source == ScheduleSource.PROJECT else sc.name,
    )


class SettingsResolver:
    """Resolve the effective schedule for one user on one date.

    Precedence is PROJECT > PERSONAL > DEFAULT. Resolution never raises: a
    storage failure yields the default values tagged ``ScheduleSource.ERROR``
    so audit trails can tell it apart from a genuine default.
    """

    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def resolve(self, user_id: int, on_date: date) -> EffectiveSchedule:
        try:
            return self._resolve(int(user_id), on_date)
        except Exception:
            logger.exception("schedule resolution failed for user=%s date=%s; using default", user_id, on_date)
            return default_schedule(ScheduleSource.ERROR)

    def resolve_many(self, user_ids: Iterable[int], on_date: date) -> dict[int, EffectiveSchedule]:
        return {int(uid): self.resolve(uid, on_date) for uid in user_ids}

    def _resolve(self, user_id: int, on_date: date) -> EffectiveSchedule:
        project = _most_recent(self._valid(user_id, on_date, AssignmentPriority.PROJECT))
        if project:
            logger.debug("user=%s date=%s project assignment=%s", user_id, on_date, project.assignment_id)
            return _from_assignment(project, ScheduleSource.PROJECT)

        personal = _most_recent(self._valid(user_id, on_date, AssignmentPriority.PERSONAL))
        if personal:
            logger.debug("user=%s date=%s personal assignment=%s", user_id, on_date, personal.assignment_id)
            return _from_assignment(personal, ScheduleSource.PERSONAL)

        return default_schedule()

    def _valid(self, user_id: int, on_date: date, priority: AssignmentPriority) -> list[ScheduleAssignment]:
        found = self._schedules.find_assignments(user_id=user_id, on_date=on_date, priority=priority)
        # adapter results are re-filtered against the validity window
        return [a for a in found if a.priority == priority and a.user_id == user_id and a.is_valid_on(on_date)]
