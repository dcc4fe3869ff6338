from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..common.time_codec import CivilTime
from ..core.enums import AssignmentPriority
from .model import ScheduleAssignment, WorkSchedule


class ScheduleRepository(Protocol):
    """Persistence port for schedule definitions and assignments.

    Adapters raise ``ResolutionError`` when the underlying store fails.
    """

    def find_assignments(
        self,
        *,
        user_id: int,
        on_date: date,
        priority: AssignmentPriority,
    ) -> Sequence[ScheduleAssignment]:
        """Active assignments of ``priority`` whose window contains ``on_date``."""

        raise NotImplementedError

    def get_schedule(self, schedule_id: int) -> Optional[WorkSchedule]:
        raise NotImplementedError

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
        raise NotImplementedError

    def list_open_assignments(
        self,
        *,
        user_id: int,
        priority: AssignmentPriority,
        from_date: date,
        project_id: Optional[int] = None,
    ) -> Sequence[ScheduleAssignment]:
        """Active assignments whose window is still open on or after ``from_date``."""

        raise NotImplementedError

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
        """Insert an assignment, closing each of ``supersede`` the day before
        ``start_date`` in the same transaction."""

        raise NotImplementedError
