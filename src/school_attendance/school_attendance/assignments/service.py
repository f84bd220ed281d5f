from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..core.constants import DEFAULT_ASSIGNMENT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.enums import StudentStatus
from ..core.exceptions import ValidationError
from ..database.unit_of_work import UnitOfWork
from .model import BulkAssignmentResult

logger = logging.getLogger(__name__)


def _parse_items(payload: Any) -> list[tuple[int, int]]:
    if isinstance(payload, dict):
        payload = payload.get("assignments")
    if not isinstance(payload, list) or not payload:
        raise ValidationError("assignments must be a non-empty list")

    items: list[tuple[int, int]] = []
    for i, item in enumerate(payload, start=1):
        if not isinstance(item, dict) or not item.get("studentId") or not item.get("scheduleId"):
            raise ValidationError(f"Assignment #{i}: studentId and scheduleId are required")
        try:
            items.append((int(item["studentId"]), int(item["scheduleId"])))
        except (TypeError, ValueError):
            raise ValidationError(f"Assignment #{i}: studentId and scheduleId must be integers")
    return items


class AssignmentService:
    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    def bulk_assign(self, payload: Any, *, actor_id: Optional[int] = None) -> BulkAssignmentResult:
        """Create every valid (student, schedule) pair; invalid ones are reported, not fatal."""

        items = _parse_items(payload)
        created: list[dict] = []
        errors: list[str] = []
        seen: set[tuple[int, int]] = set()

        with self._uow_factory() as uow:
            for student_id, schedule_id in items:
                if (student_id, schedule_id) in seen or uow.assignments.exists(
                    student_id=student_id, schedule_id=schedule_id
                ):
                    errors.append(f"Student {student_id} is already assigned to schedule {schedule_id}")
                    continue
                seen.add((student_id, schedule_id))

                student = uow.students.get(student_id=student_id)
                if not student or student.status != StudentStatus.ACTIVE:
                    errors.append(f"Student {student_id} not found or inactive")
                    continue
                if not uow.schedules.get(schedule_id=schedule_id):
                    errors.append(f"Schedule {schedule_id} not found")
                    continue

                assignment_id = uow.assignments.create(
                    student_id=student_id, schedule_id=schedule_id, created_by=actor_id
                )
                uow.audit.record(
                    user_id=actor_id,
                    action="Assign schedule to student",
                    table_affected="student_schedules",
                    record_id=assignment_id,
                )
                created.append({"id": assignment_id, "studentId": student_id, "scheduleId": schedule_id})

        logger.info("Bulk assignment by %s: %d created, %d failed", actor_id, len(created), len(errors))
        return BulkAssignmentResult(created=tuple(created), errors=tuple(errors), total=len(items))

    def remove(self, assignment_id: int, *, actor_id: Optional[int] = None) -> bool:
        with self._uow_factory() as uow:
            assignment = uow.assignments.get(assignment_id=int(assignment_id))
            removed = assignment is not None and uow.assignments.delete(assignment_id=assignment.assignment_id)
            if removed:
                uow.audit.record(
                    user_id=actor_id,
                    action="Remove schedule assignment",
                    table_affected="student_schedules",
                    record_id=assignment.assignment_id,
                    details=f"Student {assignment.student_id} removed from schedule {assignment.schedule_id}",
                )

        if removed:
            logger.info("Assignment %s removed by %s", assignment_id, actor_id)
        return removed

    def list(
        self,
        *,
        student_id: Optional[int] = None,
        schedule_id: Optional[int] = None,
        page: int = 1,
        limit: int = DEFAULT_ASSIGNMENT_PAGE_LIMIT,
    ) -> dict:
        page = max(int(page or 1), 1)
        limit = min(max(int(limit or DEFAULT_ASSIGNMENT_PAGE_LIMIT), 1), MAX_PAGE_LIMIT)
        with self._uow_factory() as uow:
            rows, total = uow.assignments.list(
                student_id=student_id, schedule_id=schedule_id, offset=(page - 1) * limit, limit=limit
            )
        return {
            "items": list(rows),
            "pagination": {"page": page, "limit": limit, "total": total, "pages": (total + limit - 1) // limit},
        }
