from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, ScheduleSource


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance day. Instants are timezone-aware."""

    attendance_id: int
    user_id: int
    work_date: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]


@dataclass(frozen=True)
class LateArrivalResult:
    """Outcome of comparing a clock-in with the effective start time.

    ``evaluable`` is False only when the clock-in or the schedule is missing;
    in that case ``is_late`` is False and ``reason`` says why.
    """

    evaluable: bool
    is_late: bool
    late_minutes: int
    expected_start: Optional[str]
    actual_start: Optional[str]
    source: Optional[ScheduleSource] = None
    source_label: Optional[str] = None
    reason: Optional[str] = None

    @property
    def status(self) -> AttendanceStatus:
        if not self.evaluable:
            return AttendanceStatus.UNKNOWN
        return AttendanceStatus.LATE if self.is_late else AttendanceStatus.ON_TIME


@dataclass(frozen=True)
class DailyCompliance:
    work_date: date
    is_weekend: bool
    result: LateArrivalResult


@dataclass(frozen=True)
class MonthlyAttendanceSummary:
    """Read-model feeding monthly report rendering/export."""

    user_id: int
    year: int
    month: int
    working_days: int
    attended_days: int
    late_count: int
    total_late_minutes: int
    days: list[DailyCompliance] = field(default_factory=list)

    @property
    def attendance_rate(self) -> float:
        if self.working_days <= 0:
            return 0.0
        return round(self.attended_days / self.working_days * 100, 1)
