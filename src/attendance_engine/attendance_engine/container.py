from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .allocations.guard import AllocationGuard
from .allocations.mysql_allocation_repository import MySQLAllocationRepository
from .allocations.service import AllocationService
from .attendance.evaluator import LateArrivalEvaluator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, utc_now
from .common.time_codec import parse_offset
from .core import constants
from .database.connection import DatabaseConnection, DBConfig
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.resolver import SettingsResolver
from .schedules.service import ScheduleService
from .schedules.weekend import WeekendCalculator


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    schedules_repo: MySQLScheduleRepository
    attendance_repo: MySQLAttendanceRepository
    allocations_repo: MySQLAllocationRepository

    resolver: SettingsResolver
    evaluator: LateArrivalEvaluator
    weekends: WeekendCalculator
    schedule_service: ScheduleService
    attendance_service: AttendanceService
    allocation_service: AllocationService


def build_container(
    *,
    db_config: dict,
    business_utc_offset: str = constants.DEFAULT_BUSINESS_UTC_OFFSET,
    allocation_epsilon: float = constants.ALLOCATION_EPSILON,
    clock: Optional[Clock] = None,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    clock = clock or utc_now

    schedules_repo = MySQLScheduleRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    allocations_repo = MySQLAllocationRepository(conn)

    resolver = SettingsResolver(schedules_repo)
    evaluator = LateArrivalEvaluator(parse_offset(business_utc_offset))
    weekends = WeekendCalculator(resolver)

    return Container(
        conn=conn,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        allocations_repo=allocations_repo,
        resolver=resolver,
        evaluator=evaluator,
        weekends=weekends,
        schedule_service=ScheduleService(schedules_repo, clock=clock),
        attendance_service=AttendanceService(attendance_repo, resolver, evaluator, weekends),
        allocation_service=AllocationService(
            allocations_repo,
            guard=AllocationGuard(allocation_epsilon),
            clock=clock,
        ),
    )
