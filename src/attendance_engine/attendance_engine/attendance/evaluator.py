from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.time_codec import Offset, format_civil_time, to_civil_time
from ..schedules.model import EffectiveSchedule
from .model import AttendanceRecord, LateArrivalResult

logger = logging.getLogger(__name__)


class LateArrivalEvaluator:
    """Decide lateness from a clock-in instant and an effective schedule.

    The clock-in is rendered to civil time with the fixed business offset and
    compared as minutes of day. Arriving exactly at the start time is on time.
    """

    def __init__(self, business_offset: Offset):
        self._offset = business_offset

    def evaluate(self, clock_in: Optional[datetime], schedule: Optional[EffectiveSchedule]) -> LateArrivalResult:
        if schedule is None:
            logger.error("lateness not evaluable: no effective schedule (clock_in=%s)", clock_in)
            return LateArrivalResult(
                evaluable=False,
                is_late=False,
                late_minutes=0,
                expected_start=None,
                actual_start=self._render(clock_in),
                reason="missing schedule",
            )

        expected = format_civil_time(schedule.start_time)
        if clock_in is None:
            return LateArrivalResult(
                evaluable=False,
                is_late=False,
                late_minutes=0,
                expected_start=expected,
                actual_start=None,
                source=schedule.source,
                source_label=schedule.source_label,
                reason="missing clock-in",
            )

        actual = to_civil_time(clock_in, self._offset)
        diff = actual.minutes_of_day - schedule.start_time.minutes_of_day

        return LateArrivalResult(
            evaluable=True,
            is_late=diff > 0,
            late_minutes=max(0, diff),
            expected_start=expected,
            actual_start=format_civil_time(actual),
            source=schedule.source,
            source_label=schedule.source_label,
        )

    def evaluate_record(self, record: AttendanceRecord, schedule: Optional[EffectiveSchedule]) -> LateArrivalResult:
        return self.evaluate(record.clock_in, schedule)

    def _render(self, clock_in: Optional[datetime]) -> Optional[str]:
        if clock_in is None or clock_in.tzinfo is None:
            return None
        return format_civil_time(to_civil_time(clock_in, self._offset))
