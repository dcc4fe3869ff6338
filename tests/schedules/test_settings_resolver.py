from __future__ import annotations

from datetime import date, datetime, timezone

from attendance_engine.common.time_codec import CivilTime
from attendance_engine.core.enums import ScheduleSource
from attendance_engine.core.exceptions import ResolutionError
from attendance_engine.schedules.resolver import SettingsResolver, default_schedule
from tests.fakes import FailingSchedules, InMemorySchedules, make_schedule

D = date(2026, 2, 2)


def test_no_assignments_resolves_company_default():
    eff = SettingsResolver(InMemorySchedules()).resolve(1, D)

    assert eff.source == ScheduleSource.DEFAULT
    assert eff.start_time == CivilTime(9, 0)
    assert eff.end_time == CivilTime(18, 0)
    assert eff.break_minutes == 60
    assert eff.standard_hours == 8.0
    assert eff.week_start_day == 1
    assert eff.source_label is None


def test_personal_assignment_used_when_no_project():
    repo = InMemorySchedules()
    repo.add_assignment(user_id=1, schedule=make_schedule(1, name="Early", start="08:00", end="17:00"), start_date=date(2026, 1, 1))

    eff = SettingsResolver(repo).resolve(1, D)

    assert eff.source == ScheduleSource.PERSONAL
    assert eff.start_time == CivilTime(8, 0)


def test_project_outranks_personal_on_same_date():
    repo = InMemorySchedules()
    repo.add_assignment(user_id=1, schedule=make_schedule(1, start="08:00", end="17:00"), start_date=date(2026, 1, 1))
    repo.add_assignment(
        user_id=1,
        schedule=make_schedule(2, name="Client hours", start="10:00", end="19:00", project_id=7, project_name="Apollo"),
        start_date=date(2026, 1, 15),
    )

    eff = SettingsResolver(repo).resolve(1, D)

    assert eff.source == ScheduleSource.PROJECT
    assert eff.start_time == CivilTime(10, 0)
    assert eff.source_label == "Apollo - Client hours (10:00-19:00)"


def test_most_recently_created_project_assignment_wins():
    repo = InMemorySchedules()
    repo.add_assignment(
        user_id=1,
        schedule=make_schedule(1, name="A", start="10:00", end="19:00", project_id=7, project_name="Apollo"),
        start_date=date(2026, 1, 1),
        created_at=datetime(2026, 1, 5, tzinfo=timezone.utc),
    )
    repo.add_assignment(
        user_id=1,
        schedule=make_schedule(2, name="B", start="07:30", end="16:30", project_id=8, project_name="Borealis"),
        start_date=date(2026, 1, 1),
        created_at=datetime(2026, 1, 20, tzinfo=timezone.utc),
    )

    eff = SettingsResolver(repo).resolve(1, D)

    assert eff.start_time == CivilTime(7, 30)
    assert eff.source_label.startswith("Borealis - B")


def test_assignments_outside_window_or_inactive_are_ignored():
    repo = InMemorySchedules()
    repo.add_assignment(
        user_id=1,
        schedule=make_schedule(1, start="10:00", end="19:00", project_id=7, project_name="Old"),
        start_date=date(2025, 1, 1),
        end_date=date(2026, 2, 1),
    )
    repo.add_assignment(
        user_id=1,
        schedule=make_schedule(2, start="11:00", end="20:00", project_id=8, project_name="Future"),
        start_date=date(2026, 2, 3),
    )
    repo.add_assignment(
        user_id=1,
        schedule=make_schedule(3, start="06:00", end="15:00"),
        start_date=date(2026, 1, 1),
        is_active=False,
    )

    eff = SettingsResolver(repo).resolve(1, D)

    assert eff.source == ScheduleSource.DEFAULT


def test_window_end_date_is_inclusive():
    repo = InMemorySchedules()
    repo.add_assignment(user_id=1, schedule=make_schedule(1, start="08:00", end="17:00"), start_date=date(2026, 1, 1), end_date=D)

    assert SettingsResolver(repo).resolve(1, D).source == ScheduleSource.PERSONAL


def test_other_users_assignments_do_not_leak():
    repo = InMemorySchedules()
    repo.add_assignment(user_id=2, schedule=make_schedule(1, start="08:00", end="17:00"), start_date=date(2026, 1, 1))

    assert SettingsResolver(repo).resolve(1, D).source == ScheduleSource.DEFAULT


def test_storage_failure_degrades_to_error_tagged_default():
    resolver = SettingsResolver(FailingSchedules(ResolutionError("connection lost")))

    eff = resolver.resolve(1, D)

    assert eff.source == ScheduleSource.ERROR
    assert eff.start_time == default_schedule().start_time
    assert eff.week_start_day == 1


def test_unexpected_failure_also_absorbed():
    eff = SettingsResolver(FailingSchedules(RuntimeError("boom"))).resolve(1, D)
    assert eff.source == ScheduleSource.ERROR


def test_resolve_many_returns_one_schedule_per_user():
    repo = InMemorySchedules()
    repo.add_assignment(user_id=2, schedule=make_schedule(1, start="08:00", end="17:00"), start_date=date(2026, 1, 1))

    result = SettingsResolver(repo).resolve_many([1, 2, 3], D)

    assert set(result) == {1, 2, 3}
    assert result[2].source == ScheduleSource.PERSONAL
    assert result[1].source == ScheduleSource.DEFAULT
