from __future__ import annotations

from datetime import datetime
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import ProjectStatus
from .model import AllocationRecord, PruneResult


class AllocationUnit(Protocol):
    """Strongly consistent view of one user's memberships inside a transaction.

    Everything done through a unit commits atomically when the transaction
    block exits normally and rolls back when it raises.
    """

    def list_records(self) -> Sequence[AllocationRecord]:
        raise NotImplementedError

    def get(self, project_id: int) -> Optional[AllocationRecord]:
        raise NotImplementedError

    def project_status(self, project_id: int) -> Optional[ProjectStatus]:
        raise NotImplementedError

    def insert(self, record: AllocationRecord) -> None:
        raise NotImplementedError

    def update_fraction(self, project_id: int, allocation_fraction: float) -> bool:
        raise NotImplementedError

    def delete(self, project_id: int) -> bool:
        raise NotImplementedError


class AllocationRepository(Protocol):
    def transaction(self, user_id: int) -> ContextManager[AllocationUnit]:
        """Open a transaction serialized per ``user_id`` (row lock or equivalent)."""

        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[AllocationRecord]:
        raise NotImplementedError

    def prune_completed(self, *, now: datetime) -> PruneResult:
        """Drop non-manager memberships of projects completed before ``now``;
        zero the managers' allocation. Safe to call repeatedly."""

        raise NotImplementedError
