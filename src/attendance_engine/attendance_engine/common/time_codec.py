"""Civil time <-> instant conversions.

Every conversion between wall-clock time and an absolute instant goes through
this module with an explicit fixed UTC offset. Nothing here reads the host's
local timezone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Union

from ..core.exceptions import FormatError

_CIVIL_TIME_RE = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")
_OFFSET_RE = re.compile(r"^([+-])([0-9]{2}):?([0-9]{2})$")

Offset = Union[timezone, timedelta]


@dataclass(frozen=True, order=True)
class CivilTime:
    """Hour:minute wall-clock value with no timezone attached."""

    hour: int
    minute: int

    def __post_init__(self):
        if not (0 <= self.hour <= 23 and 0 <= self.minute <= 59):
            raise FormatError(f"Civil time out of range: {self.hour}:{self.minute}")

    @property
    def minutes_of_day(self) -> int:
        return self.hour * 60 + self.minute

    def to_time(self) -> time:
        return time(self.hour, self.minute)

    @classmethod
    def from_time(cls, value: time) -> "CivilTime":
        return cls(value.hour, value.minute)

    def __str__(self) -> str:
        return format_civil_time(self)


def parse_civil_time(value: str) -> CivilTime:
    """Parse ``HH:MM`` (24-hour) into a CivilTime.

    A single-digit hour (``9:05``) is accepted; minutes must be two digits.
    """

    if not isinstance(value, str):
        raise FormatError(f"Time must be a string in HH:MM format, got {type(value).__name__}")

    m = _CIVIL_TIME_RE.match(value.strip())
    if not m:
        raise FormatError(f"Invalid time {value!r} (expected HH:MM)")

    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        raise FormatError(f"Invalid time {value!r} (expected HH:MM)")
    return CivilTime(hour, minute)


def format_civil_time(value: CivilTime) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def parse_offset(value: str) -> timezone:
    """Parse a fixed UTC offset such as ``+09:00``, ``-0530`` or ``Z``."""

    v = (value or "").strip()
    if v in {"Z", "z"}:
        return timezone.utc

    m = _OFFSET_RE.match(v)
    if not m:
        raise FormatError(f"Invalid UTC offset {value!r} (expected +HH:MM)")

    sign, hours, minutes = m.group(1), int(m.group(2)), int(m.group(3))
    if hours > 23 or minutes > 59:
        raise FormatError(f"Invalid UTC offset {value!r} (expected +HH:MM)")

    delta = timedelta(hours=hours, minutes=minutes)
    return timezone(-delta if sign == "-" else delta)


def _as_timezone(offset: Offset) -> timezone:
    if isinstance(offset, timezone):
        return offset
    if isinstance(offset, timedelta):
        return timezone(offset)
    raise TypeError(f"offset must be a datetime.timezone or timedelta, got {type(offset)!r}")


def to_instant(on_date: date, civil: CivilTime, offset: Offset) -> datetime:
    """Compose a local date and wall time with a fixed offset into a UTC instant."""

    local = datetime.combine(on_date, civil.to_time(), tzinfo=_as_timezone(offset))
    return local.astimezone(timezone.utc)


def _localize(instant: datetime, offset: Offset) -> datetime:
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise FormatError("Instant must be timezone-aware; refusing to guess its zone")
    return instant.astimezone(_as_timezone(offset))


def to_civil_time(instant: datetime, offset: Offset) -> CivilTime:
    """Render an aware instant as local wall time (seconds are truncated)."""

    local = _localize(instant, offset)
    return CivilTime(local.hour, local.minute)


def to_civil_date(instant: datetime, offset: Offset) -> date:
    return _localize(instant, offset).date()
