from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class StudentScheduleAssignment:
    assignment_id: int
    student_id: int
    schedule_id: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class BulkAssignmentResult:
    created: tuple[dict, ...]
    errors: tuple[str, ...]
    total: int

    def to_dict(self) -> dict:
        return {
            "created": list(self.created),
            "errors": list(self.errors),
            "total": self.total,
            "successful": len(self.created),
            "failed": len(self.errors),
        }
