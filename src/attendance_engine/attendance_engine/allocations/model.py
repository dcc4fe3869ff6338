from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ProjectStatus


@dataclass(frozen=True)
class AllocationRecord:
    """Domain entity: a user's committed share of capacity on one project."""

    user_id: int
    project_id: int
    allocation_fraction: float
    start_date: datetime
    end_date: Optional[datetime] = None
    project_status: ProjectStatus = ProjectStatus.ACTIVE
    is_manager: bool = False

    def is_active_at(self, now: datetime) -> bool:
        if self.project_status != ProjectStatus.ACTIVE:
            return False
        return self.end_date is None or self.end_date > now


@dataclass(frozen=True)
class AllocationDecision:
    """Result of a capacity check; on rejection it explains the conflict."""

    allowed: bool
    user_id: int
    current_total: float
    proposed: float
    would_be_total: float
    exclude_project_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "allowed": self.allowed,
            "user_id": self.user_id,
            "current_total": round(self.current_total, 4),
            "proposed": round(self.proposed, 4),
            "would_be_total": round(self.would_be_total, 4),
        }


@dataclass(frozen=True)
class PruneResult:
    removed_members: int
    zeroed_managers: int
