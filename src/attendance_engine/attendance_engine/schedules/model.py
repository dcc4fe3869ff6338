from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.time_codec import CivilTime
from ..core.enums import AssignmentPriority, ScheduleSource


@dataclass(frozen=True)
class WorkSchedule:
    """Domain entity: a named work-time definition (project or personal)."""

    schedule_id: int
    name: str
    start_time: CivilTime
    end_time: CivilTime
    break_minutes: int
    standard_hours: float
    overtime_threshold_hours: float
    week_start_day: int
    project_id: Optional[int] = None
    project_name: Optional[str] = None


@dataclass(frozen=True)
class ScheduleAssignment:
    """Binds a user to a WorkSchedule for the window [start_date, end_date]."""

    assignment_id: int
    user_id: int
    schedule: WorkSchedule
    priority: AssignmentPriority
    start_date: date
    end_date: Optional[date]
    is_active: bool
    created_at: datetime

    def is_valid_on(self, on_date: date) -> bool:
        if not self.is_active or on_date < self.start_date:
            return False
        return self.end_date is None or on_date <= self.end_date


@dataclass(frozen=True)
class EffectiveSchedule:
    """The single work-time configuration that applies to a user on a date."""

    start_time: CivilTime
    end_time: CivilTime
    break_minutes: int
    standard_hours: float
    overtime_threshold_hours: float
    week_start_day: int
    source: ScheduleSource
    source_label: Optional[str] = None
