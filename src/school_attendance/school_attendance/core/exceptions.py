from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, *, errors: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.errors = list(errors) if errors else [message]


class NotFoundError(DomainError):
    """Raised when a referenced schedule, application or assignment does not exist."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class InvalidStateTransition(DomainError):
    """Raised when approving/declining an application that is no longer pending."""


class ScheduleConflict(DomainError):
    """Raised when a schedule write would double-book a teacher or a section.

    Carries the per-day conflict report and one readable line per conflicting day/type.
    """

    def __init__(self, conflicts: Sequence, errors: Sequence[str]):
        super().__init__("Schedule conflicts detected")
        self.conflicts = list(conflicts)
        self.errors = list(errors)
