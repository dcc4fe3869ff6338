from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import Clock, utc_now
from ..common.validators import require_aware, require_positive_id
from ..core.exceptions import AllocationConflict, ValidationError
from .guard import AllocationGuard
from .model import AllocationDecision, AllocationRecord, PruneResult
from .repository import AllocationRepository

logger = logging.getLogger(__name__)


class AllocationService:
    """Use cases: project membership allocation under the 100% capacity cap.

    Each write runs the capacity check and the write inside one per-user
    transaction, so two concurrent requests cannot both pass the check.
    """

    def __init__(
        self,
        allocations: AllocationRepository,
        *,
        guard: Optional[AllocationGuard] = None,
        clock: Clock = utc_now,
    ):
        self._allocations = allocations
        self._guard = guard or AllocationGuard()
        self._clock = clock

    def add_member(
        self,
        *,
        user_id: int,
        project_id: int,
        allocation: float,
        is_manager: bool = False,
        now: Optional[datetime] = None,
    ) -> AllocationDecision:
        user_id = require_positive_id(user_id, "user_id")
        project_id = require_positive_id(project_id, "project_id")
        now = require_aware(now or self._clock())

        with self._allocations.transaction(user_id) as unit:
            status = unit.project_status(project_id)
            if status is None:
                raise ValidationError(f"Project {project_id} does not exist")
            if unit.get(project_id) is not None:
                raise ValidationError(f"User {user_id} is already a member of project {project_id}")

            decision = self._ensure(user_id=user_id, proposed=allocation, records=unit.list_records(), now=now)
            unit.insert(
                AllocationRecord(
                    user_id=user_id,
                    project_id=project_id,
                    allocation_fraction=decision.proposed,
                    start_date=now,
                    end_date=None,
                    project_status=status,
                    is_manager=bool(is_manager),
                )
            )

        logger.info("user=%s joined project=%s allocation=%.4f", user_id, project_id, decision.proposed)
        return decision

    def update_allocation(
        self,
        *,
        user_id: int,
        project_id: int,
        allocation: float,
        now: Optional[datetime] = None,
    ) -> AllocationDecision:
        user_id = require_positive_id(user_id, "user_id")
        project_id = require_positive_id(project_id, "project_id")
        now = require_aware(now or self._clock())

        with self._allocations.transaction(user_id) as unit:
            if unit.get(project_id) is None:
                raise ValidationError(f"User {user_id} is not a member of project {project_id}")

            decision = self._ensure(
                user_id=user_id,
                proposed=allocation,
                records=unit.list_records(),
                now=now,
                exclude_project_id=project_id,
            )
            unit.update_fraction(project_id, decision.proposed)

        logger.info("user=%s project=%s reallocated to %.4f", user_id, project_id, decision.proposed)
        return decision

    def remove_member(self, *, user_id: int, project_id: int) -> bool:
        """Remove a membership. Returns False when it was already gone."""

        user_id = require_positive_id(user_id, "user_id")
        project_id = require_positive_id(project_id, "project_id")
        with self._allocations.transaction(user_id) as unit:
            removed = unit.delete(project_id)
        if removed:
            logger.info("user=%s left project=%s", user_id, project_id)
        return removed

    def total_allocation(self, user_id: int, *, now: Optional[datetime] = None) -> float:
        now = require_aware(now or self._clock())
        records = self._allocations.list_for_user(int(user_id))
        return self._guard.current_total(records, user_id=int(user_id), now=now)

    def recommended_allocation(
        self, user_id: int, *, is_manager: bool = False, now: Optional[datetime] = None
    ) -> float:
        now = require_aware(now or self._clock())
        records = self._allocations.list_for_user(int(user_id))
        return self._guard.recommended(records, user_id=int(user_id), now=now, is_manager=bool(is_manager))

    def prune_expired_memberships(self, *, now: Optional[datetime] = None) -> PruneResult:
        result = self._allocations.prune_completed(now=require_aware(now or self._clock()))
        logger.info(
            "pruned completed-project memberships: removed=%d zeroed_managers=%d",
            result.removed_members,
            result.zeroed_managers,
        )
        return result

    def _ensure(self, **kwargs) -> AllocationDecision:
        try:
            return self._guard.ensure(**kwargs)
        except AllocationConflict as e:
            logger.warning("allocation rejected: %s", e.decision.to_dict())
            raise
