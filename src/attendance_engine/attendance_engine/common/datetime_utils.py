from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterator

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current UTC instant.

    Note: Only used as the default clock at the wiring layer; services take
    ``now`` or a clock callable so tests can pin time.
    """
    return datetime.now(timezone.utc)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last = monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
