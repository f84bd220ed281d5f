from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.enums import EnrollmentStatus
from ..core.exceptions import InvalidStateTransition, NotFoundError, ValidationError
from ..database.unit_of_work import UnitOfWork
from .model import EnrollmentApplication
from .schemas import ApproveRequest, DeclineRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnrollmentPage:
    items: Sequence[EnrollmentApplication]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit

    def to_dict(self) -> dict:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}


def parse_status_filter(value: Optional[str]) -> Optional[EnrollmentStatus]:
    value = (value or "all").strip().lower()
    if value == "all":
        return None
    try:
        return EnrollmentStatus(value)
    except ValueError:
        raise ValidationError("status must be one of: all, pending, approved, declined")


class EnrollmentService:
    """Admission decisions: pending -> approved | declined, each exactly once.

    Approval creates the student, places them in a section and assigns the
    requested schedules in one unit of work; any failure leaves the
    application pending and nothing written.
    """

    def __init__(self, uow_factory: Callable[[], UnitOfWork], *, clock: Callable = now_local):
        self._uow_factory = uow_factory
        self._clock = clock

    def get(self, application_id: int) -> EnrollmentApplication:
        with self._uow_factory() as uow:
            return self._require(uow, application_id)

    def list(self, *, status: Optional[str] = None, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT) -> EnrollmentPage:
        status_filter = parse_status_filter(status)
        page = max(int(page or 1), 1)
        limit = min(max(int(limit or DEFAULT_PAGE_LIMIT), 1), MAX_PAGE_LIMIT)

        with self._uow_factory() as uow:
            items, total = uow.enrollments.list(status=status_filter, offset=(page - 1) * limit, limit=limit)
        return EnrollmentPage(items=items, page=page, limit=limit, total=total)

    def stats(self) -> dict[str, int]:
        with self._uow_factory() as uow:
            counts = uow.enrollments.count_by_status()
        return {"total": sum(counts.values()), **counts}

    def approve(self, application_id: int, request: ApproveRequest, *, reviewer_id: int) -> EnrollmentApplication:
        with self._uow_factory() as uow:
            application = self._require(uow, application_id, for_update=True)
            self._ensure_pending(application, "approve")

            if request.section_id is None:
                raise ValidationError("sectionId is required to approve an enrollment")
            # Locked so concurrent approvals into the same section count seats one at a time.
            section = uow.sections.get(section_id=request.section_id, for_update=True)
            if not section or not section.is_active:
                raise ValidationError("Selected section not found")
            if not section.accepts_grade(application.grade_level):
                raise ValidationError(
                    f"Section {section.section_name} is for {section.grade_level}, "
                    f"not {application.grade_level}"
                )
            if section.capacity is not None and uow.students.count_in_section(section_id=section.section_id) >= section.capacity:
                raise ValidationError(f"Section {section.section_name} is full")

            if len(set(request.schedule_ids)) != len(request.schedule_ids):
                raise ValidationError("scheduleAssignments contains the same schedule more than once")

            student_id = uow.students.create_from_application(application, section_id=section.section_id)
            uow.audit.record(
                user_id=reviewer_id, action="Create student", table_affected="students", record_id=student_id
            )

            for schedule_id in request.schedule_ids:
                schedule = uow.schedules.get(schedule_id=schedule_id)
                if not schedule:
                    raise ValidationError(f"Schedule with ID {schedule_id} not found")
                if schedule.section_id is not None and schedule.section_id != section.section_id:
                    raise ValidationError(f"Schedule {schedule_id} does not belong to the chosen section")
                if not schedule.teacher_active:
                    raise ValidationError(f"Teacher {schedule.teacher_name or schedule.teacher_id} is not active")
                if uow.assignments.exists(student_id=student_id, schedule_id=schedule_id):
                    continue

                assignment_id = uow.assignments.create(
                    student_id=student_id, schedule_id=schedule_id, created_by=reviewer_id
                )
                uow.audit.record(
                    user_id=reviewer_id,
                    action="Assign schedule to student",
                    table_affected="student_schedules",
                    record_id=assignment_id,
                    details=f"Assigned schedule {schedule_id} during enrollment approval",
                )

            approved = uow.enrollments.mark_approved(
                application_id=application.application_id,
                student_id=student_id,
                section_id=section.section_id,
                reviewed_by=int(reviewer_id),
                reviewed_at=self._clock(),
                notes=request.notes,
            )
            if not approved:
                raise InvalidStateTransition("Enrollment has already been reviewed")
            uow.audit.record(
                user_id=reviewer_id,
                action="Approve enrollment",
                table_affected="enrollment_applications",
                record_id=application.application_id,
            )
            result = self._require(uow, application_id)

        logger.info(
            "Enrollment %s approved by %s (student=%s, section=%s, schedules=%d)",
            application_id,
            reviewer_id,
            student_id,
            section.section_id,
            len(request.schedule_ids),
        )
        return result

    def decline(self, application_id: int, request: DeclineRequest, *, reviewer_id: int) -> EnrollmentApplication:
        with self._uow_factory() as uow:
            application = self._require(uow, application_id, for_update=True)
            self._ensure_pending(application, "decline")
            reason = require_non_empty(request.reason, "Decline reason")

            declined = uow.enrollments.mark_declined(
                application_id=application.application_id,
                reason=reason,
                reviewed_by=int(reviewer_id),
                reviewed_at=self._clock(),
                notes=request.notes,
            )
            if not declined:
                raise InvalidStateTransition("Enrollment has already been reviewed")
            uow.audit.record(
                user_id=reviewer_id,
                action="Decline enrollment",
                table_affected="enrollment_applications",
                record_id=application.application_id,
            )
            result = self._require(uow, application_id)

        logger.info("Enrollment %s declined by %s", application_id, reviewer_id)
        return result

    @staticmethod
    def _require(uow: UnitOfWork, application_id: int, *, for_update: bool = False) -> EnrollmentApplication:
        application = uow.enrollments.get(application_id=int(application_id), for_update=for_update)
        if not application:
            raise NotFoundError("Enrollment not found")
        return application

    @staticmethod
    def _ensure_pending(application: EnrollmentApplication, action: str) -> None:
        if not application.is_pending:
            logger.warning(
                "Refused to %s enrollment %s: already %s",
                action,
                application.application_id,
                application.status.value,
            )
            raise InvalidStateTransition(f"Enrollment is already {application.status.value}")
