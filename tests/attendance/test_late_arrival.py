from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest

from attendance_engine.attendance.evaluator import LateArrivalEvaluator
from attendance_engine.common.time_codec import CivilTime, parse_civil_time, to_instant
from attendance_engine.core.enums import AttendanceStatus, ScheduleSource
from attendance_engine.core.exceptions import FormatError
from attendance_engine.schedules.resolver import default_schedule

D = date(2026, 2, 2)


@pytest.fixture
def evaluator(jst):
    return LateArrivalEvaluator(jst)


def _schedule(start: str):
    return replace(default_schedule(), start_time=parse_civil_time(start), source=ScheduleSource.PERSONAL)


def test_clock_in_exactly_at_start_is_on_time(evaluator, jst):
    result = evaluator.evaluate(to_instant(D, CivilTime(10, 0), jst), _schedule("10:00"))

    assert result.evaluable
    assert result.is_late is False
    assert result.late_minutes == 0
    assert result.status == AttendanceStatus.ON_TIME
    assert result.expected_start == "10:00"
    assert result.actual_start == "10:00"


def test_one_minute_after_start_is_one_minute_late(evaluator, jst):
    result = evaluator.evaluate(to_instant(D, CivilTime(10, 1), jst), _schedule("10:00"))

    assert result.is_late is True
    assert result.late_minutes == 1
    assert result.status == AttendanceStatus.LATE


def test_equal_clock_in_is_never_late_for_any_start(evaluator, jst):
    for hour in range(24):
        for minute in (0, 1, 29, 59):
            start = CivilTime(hour, minute)
            schedule = replace(default_schedule(), start_time=start)
            assert evaluator.evaluate(to_instant(D, start, jst), schedule).is_late is False


def test_late_minutes_are_monotonic_in_clock_in(evaluator, jst):
    schedule = _schedule("09:00")
    previous = -1
    for minutes in range(7 * 60, 12 * 60, 7):
        clock_in = to_instant(D, CivilTime(minutes // 60, minutes % 60), jst)
        late = evaluator.evaluate(clock_in, schedule).late_minutes
        assert late >= previous
        previous = late


def test_early_arrival_is_not_late(evaluator, jst):
    result = evaluator.evaluate(to_instant(D, CivilTime(8, 45), jst), _schedule("09:00"))
    assert result.is_late is False
    assert result.late_minutes == 0


def test_non_padded_start_compares_numerically(evaluator, jst):
    # "9:30" > "10:00" lexicographically; a 09:30 start with a 09:45 arrival is late
    result = evaluator.evaluate(to_instant(D, CivilTime(9, 45), jst), _schedule("9:30"))
    assert result.is_late is True
    assert result.late_minutes == 15


def test_utc_stored_instant_is_converted_with_business_offset(evaluator):
    # 01:01Z is 10:01 at +09:00; treating the UTC hour as local would report on time
    clock_in = datetime(2026, 2, 2, 1, 1, tzinfo=timezone.utc)
    result = evaluator.evaluate(clock_in, _schedule("10:00"))

    assert result.actual_start == "10:01"
    assert result.late_minutes == 1


def test_instant_in_other_zone_is_normalised(evaluator):
    clock_in = datetime(2026, 2, 2, 9, 0, tzinfo=timezone(timedelta(hours=8)))
    result = evaluator.evaluate(clock_in, _schedule("10:00"))

    assert result.actual_start == "10:00"
    assert result.is_late is False


def test_seconds_within_start_minute_are_on_time(evaluator):
    clock_in = datetime(2026, 2, 2, 1, 0, 59, tzinfo=timezone.utc)
    assert evaluator.evaluate(clock_in, _schedule("10:00")).is_late is False


def test_missing_clock_in_is_not_evaluable(evaluator):
    result = evaluator.evaluate(None, _schedule("10:00"))

    assert result.evaluable is False
    assert result.is_late is False
    assert result.status == AttendanceStatus.UNKNOWN
    assert result.reason == "missing clock-in"


def test_missing_schedule_is_not_evaluable_and_logged(evaluator, caplog):
    clock_in = datetime(2026, 2, 2, 1, 30, tzinfo=timezone.utc)
    with caplog.at_level("ERROR", logger="attendance_engine.attendance.evaluator"):
        result = evaluator.evaluate(clock_in, None)

    assert result.evaluable is False
    assert result.is_late is False
    assert result.actual_start == "10:30"
    assert "no effective schedule" in caplog.text


def test_result_carries_schedule_source(evaluator, jst):
    schedule = replace(_schedule("10:00"), source=ScheduleSource.PROJECT, source_label="Apollo - Client (10:00-19:00)")
    result = evaluator.evaluate(to_instant(D, CivilTime(10, 5), jst), schedule)

    assert result.source == ScheduleSource.PROJECT
    assert result.source_label == "Apollo - Client (10:00-19:00)"


def test_naive_clock_in_is_rejected(evaluator):
    with pytest.raises(FormatError):
        evaluator.evaluate(datetime(2026, 2, 2, 10, 0), _schedule("10:00"))
