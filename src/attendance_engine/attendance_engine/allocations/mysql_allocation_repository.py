from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional, Sequence

from ..core.enums import ProjectStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, fetchone, to_utc_naive
from .model import AllocationRecord, PruneResult
from .repository import AllocationRepository, AllocationUnit

_MEMBERSHIP_SELECT = """
    SELECT pm.user_id, pm.project_id, pm.allocation, pm.is_manager,
           pm.start_date, pm.end_date, p.status
    FROM project_memberships pm
    JOIN projects p ON p.project_id = pm.project_id
"""


def _from_row(r: dict) -> AllocationRecord:
    return AllocationRecord(
        user_id=int(r["user_id"]),
        project_id=int(r["project_id"]),
        allocation_fraction=float(r["allocation"]),
        start_date=as_utc(r["start_date"]),
        end_date=as_utc(r.get("end_date")),
        project_status=ProjectStatus(r["status"]),
        is_manager=bool(r.get("is_manager")),
    )


class _MySQLAllocationUnit(AllocationUnit):
    def __init__(self, cur, user_id: int):
        self._cur = cur
        self._user_id = int(user_id)

    def list_records(self) -> Sequence[AllocationRecord]:
        self._cur.execute(_MEMBERSHIP_SELECT + " WHERE pm.user_id=%s FOR UPDATE", (self._user_id,))
        return [_from_row(r) for r in fetchall(self._cur)]

    def get(self, project_id: int) -> Optional[AllocationRecord]:
        self._cur.execute(
            _MEMBERSHIP_SELECT + " WHERE pm.user_id=%s AND pm.project_id=%s FOR UPDATE",
            (self._user_id, int(project_id)),
        )
        r = fetchone(self._cur)
        return _from_row(r) if r else None

    def project_status(self, project_id: int) -> Optional[ProjectStatus]:
        self._cur.execute("SELECT status FROM projects WHERE project_id=%s", (int(project_id),))
        r = fetchone(self._cur)
        return ProjectStatus(r["status"]) if r else None

    def insert(self, record: AllocationRecord) -> None:
        self._cur.execute(
            """
            INSERT INTO project_memberships(user_id, project_id, allocation, is_manager, start_date, end_date)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (
                self._user_id,
                int(record.project_id),
                float(record.allocation_fraction),
                int(record.is_manager),
                to_utc_naive(record.start_date),
                to_utc_naive(record.end_date),
            ),
        )

    def update_fraction(self, project_id: int, allocation_fraction: float) -> bool:
        self._cur.execute(
            "UPDATE project_memberships SET allocation=%s WHERE user_id=%s AND project_id=%s",
            (float(allocation_fraction), self._user_id, int(project_id)),
        )
        return self._cur.rowcount > 0

    def delete(self, project_id: int) -> bool:
        self._cur.execute(
            "DELETE FROM project_memberships WHERE user_id=%s AND project_id=%s",
            (self._user_id, int(project_id)),
        )
        return self._cur.rowcount > 0


class MySQLAllocationRepository(AllocationRepository):
    """Memberships backed by InnoDB.

    Transactions lock the user's row first (``SELECT ... FOR UPDATE``) so all
    allocation writes for one user are serialized.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self, user_id: int) -> Iterator[AllocationUnit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM users WHERE user_id=%s FOR UPDATE", (int(user_id),))
            if not fetchone(cur):
                raise ValidationError(f"User {user_id} does not exist")
            yield _MySQLAllocationUnit(cur, user_id)

    def list_for_user(self, user_id: int) -> Sequence[AllocationRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_MEMBERSHIP_SELECT + " WHERE pm.user_id=%s", (int(user_id),))
            return [_from_row(r) for r in fetchall(cur)]

    def prune_completed(self, *, now: datetime) -> PruneResult:
        cutoff = to_utc_naive(now).date()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE pm FROM project_memberships pm
                JOIN projects p ON p.project_id = pm.project_id
                WHERE p.status=%s AND p.end_date < %s AND pm.is_manager=0
                """,
                (ProjectStatus.COMPLETED.value, cutoff),
            )
            removed = cur.rowcount
            cur.execute(
                """
                UPDATE project_memberships pm
                JOIN projects p ON p.project_id = pm.project_id
                SET pm.allocation=0
                WHERE p.status=%s AND p.end_date < %s AND pm.is_manager=1 AND pm.allocation <> 0
                """,
                (ProjectStatus.COMPLETED.value, cutoff),
            )
            return PruneResult(removed_members=int(removed), zeroed_managers=int(cur.rowcount))
