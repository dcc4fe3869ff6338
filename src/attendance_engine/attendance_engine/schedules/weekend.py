from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import iter_dates
from ..common.validators import require_week_day
from ..core import constants
from ..core.enums import ScheduleSource
from .model import EffectiveSchedule
from .resolver import SettingsResolver

logger = logging.getLogger(__name__)

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def weekday_sun0(value: date) -> int:
    """Weekday number with 0=Sunday .. 6=Saturday."""
    return (value.weekday() + 1) % 7


def weekend_days(week_start_day: int) -> tuple[int, int]:
    """The two days before ``week_start_day`` (0=Sunday) form the weekend."""

    w = require_week_day(week_start_day)
    return (w - 2 + 7) % 7, (w - 1 + 7) % 7


DEFAULT_WEEKEND = weekend_days(constants.DEFAULT_WEEK_START_DAY)


def is_weekend(value: date, week_start_day: int) -> bool:
    return weekday_sun0(value) in weekend_days(week_start_day)


def count_working_days(start: date, end: date, week_start_day: int) -> int:
    pair = weekend_days(week_start_day)
    return sum(1 for d in iter_dates(start, end) if weekday_sun0(d) not in pair)


class WeekendCalculator:
    """Per-user weekend lookup on top of the resolved schedule."""

    def __init__(self, resolver: SettingsResolver):
        self._resolver = resolver

    def weekend_for_user(self, user_id: int, on_date: date) -> tuple[int, int]:
        return self._lookup(user_id, on_date)[1]

    def is_weekend_for_user(self, user_id: int, on_date: date) -> bool:
        return weekday_sun0(on_date) in self.weekend_for_user(user_id, on_date)

    def batch_is_weekend(self, on_date: date, user_ids: Iterable[int]) -> dict[int, bool]:
        return {int(uid): self.is_weekend_for_user(uid, on_date) for uid in user_ids}

    def describe(self, user_id: int, on_date: date) -> dict:
        schedule, pair = self._lookup(user_id, on_date)
        if schedule is None:
            week_start_day, source = constants.DEFAULT_WEEK_START_DAY, ScheduleSource.ERROR
        else:
            week_start_day, source = schedule.week_start_day, schedule.source
        return {
            "user_id": int(user_id),
            "week_start_day": week_start_day,
            "week_start_day_name": DAY_NAMES[week_start_day] if week_start_day in range(7) else None,
            "weekend_days": list(pair),
            "weekend_day_names": [DAY_NAMES[d] for d in pair],
            "source": source.value,
        }

    def _lookup(self, user_id: int, on_date: date) -> tuple[Optional[EffectiveSchedule], tuple[int, int]]:
        """Resolved schedule and its weekend pair; ``(None, DEFAULT_WEEKEND)`` on any failure."""

        try:
            schedule = self._resolver.resolve(user_id, on_date)
            return schedule, weekend_days(schedule.week_start_day)
        except Exception:
            logger.warning("weekend lookup failed for user=%s date=%s; using default", user_id, on_date, exc_info=True)
            return None, DEFAULT_WEEKEND
