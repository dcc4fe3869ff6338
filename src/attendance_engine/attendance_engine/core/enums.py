from __future__ import annotations

from enum import Enum


class ScheduleSource(str, Enum):
    """Where an effective schedule came from (kept for audit trails)."""

    PROJECT = "PROJECT"
    PERSONAL = "PERSONAL"
    DEFAULT = "DEFAULT"
    ERROR = "ERROR"


class AssignmentPriority(str, Enum):
    """Priority class of a schedule assignment. PROJECT outranks PERSONAL."""

    PROJECT = "PROJECT"
    PERSONAL = "PERSONAL"


class AttendanceStatus(str, Enum):
    """Compliance status of one attendance day."""

    ON_TIME = "ON_TIME"
    LATE = "LATE"
    UNKNOWN = "UNKNOWN"


class ProjectStatus(str, Enum):
    PLANNING = "PLANNING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
