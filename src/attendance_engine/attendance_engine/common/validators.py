from __future__ import annotations

from datetime import datetime

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_positive_id(value: int, field_name: str) -> int:
    try:
        v = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if v <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return v


def require_week_day(value: int, field_name: str = "week_start_day") -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 6:
        raise ValidationError(f"{field_name} must be an integer in 0..6 (0=Sunday), got {value!r}")
    return value


def require_fraction(value: float, field_name: str = "allocation") -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if v != v or not 0.0 <= v <= 1.0:
        raise ValidationError(f"{field_name} must be within [0.0, 1.0], got {value!r}")
    return v


def require_aware(value: datetime, field_name: str = "now") -> datetime:
    if not isinstance(value, datetime) or value.tzinfo is None or value.utcoffset() is None:
        raise ValidationError(f"{field_name} must be a timezone-aware datetime, got {value!r}")
    return value
