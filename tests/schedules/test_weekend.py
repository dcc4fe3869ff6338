from __future__ import annotations

from datetime import date

import pytest

from attendance_engine.core.exceptions import ResolutionError, ValidationError
from attendance_engine.schedules.resolver import SettingsResolver
from attendance_engine.schedules.weekend import (
    DEFAULT_WEEKEND,
    WeekendCalculator,
    count_working_days,
    is_weekend,
    weekday_sun0,
    weekend_days,
)
from tests.fakes import FailingSchedules, InMemorySchedules, make_schedule

SUNDAY, MONDAY, TUESDAY, SATURDAY = 0, 1, 2, 6


def test_default_week_start_gives_saturday_sunday():
    assert set(weekend_days(1)) == {SATURDAY, SUNDAY}
    assert DEFAULT_WEEKEND == (SATURDAY, SUNDAY)


def test_week_starting_wednesday_gives_monday_tuesday():
    assert set(weekend_days(3)) == {MONDAY, TUESDAY}


def test_weekend_pair_is_consecutive_and_ends_before_week_start():
    for w in range(7):
        a, b = weekend_days(w)
        assert (a + 1) % 7 == b
        assert (b + 1) % 7 == w


@pytest.mark.parametrize("value", [-1, 7, 1.0, None, True])
def test_invalid_week_start_rejected(value):
    with pytest.raises(ValidationError):
        weekend_days(value)


def test_weekday_sun0():
    assert weekday_sun0(date(2026, 2, 1)) == SUNDAY
    assert weekday_sun0(date(2026, 2, 2)) == MONDAY
    assert weekday_sun0(date(2026, 2, 7)) == SATURDAY


def test_is_weekend():
    assert is_weekend(date(2026, 2, 7), 1)
    assert is_weekend(date(2026, 2, 8), 1)
    assert not is_weekend(date(2026, 2, 9), 1)
    assert is_weekend(date(2026, 2, 9), 3)


def test_count_working_days():
    # February 2026: 28 days, 8 weekend days with Sat/Sun
    assert count_working_days(date(2026, 2, 1), date(2026, 2, 28), 1) == 20
    assert count_working_days(date(2026, 2, 3), date(2026, 2, 2), 1) == 0


def test_user_weekend_follows_resolved_week_start():
    repo = InMemorySchedules()
    repo.add_assignment(
        user_id=1,
        schedule=make_schedule(1, week_start_day=3, project_id=5, project_name="Retail"),
        start_date=date(2026, 1, 1),
    )
    calc = WeekendCalculator(SettingsResolver(repo))

    assert calc.is_weekend_for_user(1, date(2026, 2, 2))
    assert not calc.is_weekend_for_user(1, date(2026, 2, 7))
    assert calc.is_weekend_for_user(2, date(2026, 2, 7))


def test_resolution_failure_falls_back_to_default_pair():
    calc = WeekendCalculator(SettingsResolver(FailingSchedules(ResolutionError("down"))))

    assert calc.weekend_for_user(1, date(2026, 2, 2)) == DEFAULT_WEEKEND
    assert calc.is_weekend_for_user(1, date(2026, 2, 8))


class _BrokenResolver:
    def resolve(self, user_id, on_date):
        raise RuntimeError("unexpected")


def test_weekend_lookup_never_propagates():
    calc = WeekendCalculator(_BrokenResolver())
    assert calc.weekend_for_user(1, date(2026, 2, 2)) == DEFAULT_WEEKEND


def test_batch_is_weekend_and_describe():
    repo = InMemorySchedules()
    repo.add_assignment(user_id=2, schedule=make_schedule(1, week_start_day=3), start_date=date(2026, 1, 1))
    calc = WeekendCalculator(SettingsResolver(repo))

    assert calc.batch_is_weekend(date(2026, 2, 2), [1, 2]) == {1: False, 2: True}

    info = calc.describe(2, date(2026, 2, 2))
    assert info["week_start_day_name"] == "Wednesday"
    assert info["weekend_day_names"] == ["Monday", "Tuesday"]
    assert info["source"] == "PERSONAL"


def test_describe_falls_back_when_resolution_breaks():
    info = WeekendCalculator(_BrokenResolver()).describe(1, date(2026, 2, 2))

    assert info["weekend_day_names"] == ["Saturday", "Sunday"]
    assert info["week_start_day_name"] == "Monday"
    assert info["source"] == "ERROR"
