from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EnrollmentStatus
from .model import EnrollmentApplication


class EnrollmentRepository(Protocol):
    def get(self, *, application_id: int, for_update: bool = False) -> Optional[EnrollmentApplication]:
        raise NotImplementedError

    def list(
        self,
        *,
        status: Optional[EnrollmentStatus] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[Sequence[EnrollmentApplication], int]:
        """Return one page of applications (newest first) and the total count."""

        raise NotImplementedError

    def count_by_status(self) -> dict[str, int]:
        raise NotImplementedError

    def mark_approved(
        self,
        *,
        application_id: int,
        student_id: int,
        section_id: int,
        reviewed_by: int,
        reviewed_at: datetime,
        notes: Optional[str] = None,
    ) -> bool:
        """Flip a pending application to approved. False if it was not pending."""

        raise NotImplementedError

    def mark_declined(
        self,
        *,
        application_id: int,
        reason: str,
        reviewed_by: int,
        reviewed_at: datetime,
        notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError
