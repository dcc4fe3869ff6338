from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user_range(self, *, user_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """Records with ``start_date <= work_date <= end_date`` ordered by date."""

        raise NotImplementedError
