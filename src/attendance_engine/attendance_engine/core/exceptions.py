from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class FormatError(ValidationError):
    """Raised when a time or offset string is malformed."""


class ResolutionError(DomainError):
    """Raised by storage adapters when a schedule lookup fails."""


class AllocationConflict(DomainError):
    """Raised when a proposed allocation would exceed the user's capacity.

    Carries the full decision so callers can explain the conflict.
    """

    def __init__(self, decision):
        self.decision = decision
        super().__init__(
            f"Allocation exceeds capacity for user {decision.user_id}: "
            f"current={decision.current_total:.2f} proposed={decision.proposed:.2f} "
            f"total={decision.would_be_total:.2f}"
        )
