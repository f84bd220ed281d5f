from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import StudentScheduleAssignment


class AssignmentRepository(Protocol):
    def exists(self, *, student_id: int, schedule_id: int) -> bool:
        raise NotImplementedError

    def get(self, *, assignment_id: int) -> Optional[StudentScheduleAssignment]:
        raise NotImplementedError

    def create(self, *, student_id: int, schedule_id: int, created_by: Optional[int] = None) -> int:
        raise NotImplementedError

    def delete(self, *, assignment_id: int) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        student_id: Optional[int] = None,
        schedule_id: Optional[int] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[Sequence[dict], int]:
        """Return UI rows (joined with student/schedule/subject/teacher) and the total count."""

        raise NotImplementedError
