from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable, Optional

from ..common.validators import require_fraction
from ..core import constants
from ..core.exceptions import AllocationConflict, ValidationError
from .model import AllocationDecision, AllocationRecord


def active_others(
    records: Iterable[AllocationRecord],
    *,
    user_id: int,
    now: datetime,
    exclude_project_id: Optional[int] = None,
) -> list[AllocationRecord]:
    return [
        r
        for r in records
        if r.user_id == user_id
        and r.is_active_at(now)
        and (exclude_project_id is None or r.project_id != exclude_project_id)
    ]


class AllocationGuard:
    """Accept or reject a proposed allocation against existing active ones.

    ``sum(others) + proposed <= 1.0 + epsilon``; the proposal is never clamped.
    """

    def __init__(self, epsilon: float = constants.ALLOCATION_EPSILON):
        if not 0.0 <= float(epsilon) <= constants.ALLOCATION_EPSILON:
            raise ValidationError(f"epsilon must be within [0, {constants.ALLOCATION_EPSILON}]")
        self._epsilon = float(epsilon)

    def current_total(
        self,
        records: Iterable[AllocationRecord],
        *,
        user_id: int,
        now: datetime,
        exclude_project_id: Optional[int] = None,
    ) -> float:
        others = active_others(records, user_id=user_id, now=now, exclude_project_id=exclude_project_id)
        return math.fsum(r.allocation_fraction for r in others)

    def check(
        self,
        *,
        user_id: int,
        proposed: float,
        records: Iterable[AllocationRecord],
        now: datetime,
        exclude_project_id: Optional[int] = None,
    ) -> AllocationDecision:
        proposed = require_fraction(proposed)
        current = self.current_total(records, user_id=user_id, now=now, exclude_project_id=exclude_project_id)
        total = current + proposed
        return AllocationDecision(
            allowed=total <= constants.FULL_CAPACITY + self._epsilon,
            user_id=int(user_id),
            current_total=current,
            proposed=proposed,
            would_be_total=total,
            exclude_project_id=exclude_project_id,
        )

    def ensure(self, **kwargs) -> AllocationDecision:
        decision = self.check(**kwargs)
        if not decision.allowed:
            raise AllocationConflict(decision)
        return decision

    def recommended(
        self,
        records: Iterable[AllocationRecord],
        *,
        user_id: int,
        now: datetime,
        is_manager: bool = False,
    ) -> float:
        """Default share for a new membership: half, or whatever capacity is left.

        Managers are offered full capacity; the offer is still subject to ``check``.
        """

        if is_manager:
            return constants.FULL_CAPACITY
        available = constants.FULL_CAPACITY - self.current_total(records, user_id=user_id, now=now)
        return min(constants.DEFAULT_RECOMMENDED_ALLOCATION, max(0.0, available))
