from __future__ import annotations

import logging
from datetime import time
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from ..common.validators import parse_weekdays
from ..core.enums import Weekday
from ..core.exceptions import NotFoundError, ScheduleConflict, ValidationError
from ..database.unit_of_work import UnitOfWork
from .conflicts import ConflictDetector
from .interval import validate_range
from .model import DayConflict, Schedule, ScheduleDraft
from .schemas import ScheduleRequest

logger = logging.getLogger(__name__)


class ScheduleService:
    """Validated schedule writes that never double-book a teacher or a section."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    def list(
        self,
        *,
        teacher_id: Optional[int] = None,
        section_id: Optional[int] = None,
        day: Optional[Weekday] = None,
    ) -> Sequence[Schedule]:
        with self._uow_factory() as uow:
            return uow.schedules.list(teacher_id=teacher_id, section_id=section_id, day=day)

    def get(self, schedule_id: int) -> Schedule:
        with self._uow_factory() as uow:
            return self._require(uow, schedule_id)

    def check_conflicts(self, request: ScheduleRequest, *, exclude_schedule_id: Optional[int] = None) -> list[DayConflict]:
        with self._uow_factory() as uow:
            current = self._require(uow, exclude_schedule_id) if exclude_schedule_id else None
            draft = self._build_draft(uow, request, current)
            return ConflictDetector(uow.schedules).detect(draft, exclude_schedule_id=exclude_schedule_id)

    def create(self, request: ScheduleRequest, *, actor_id: Optional[int] = None) -> Schedule:
        with self._uow_factory() as uow:
            draft = self._build_draft(uow, request, None)
            self._ensure_no_conflict(uow, draft, action="create", actor_id=actor_id)

            schedule_id = uow.schedules.create(draft)
            uow.audit.record(
                user_id=actor_id, action="Create schedule", table_affected="schedules", record_id=schedule_id
            )
            saved = self._require(uow, schedule_id)

        logger.info("Schedule %s created (teacher=%s, section=%s)", schedule_id, draft.teacher_id, draft.section_id)
        return saved

    def update(self, schedule_id: int, request: ScheduleRequest, *, actor_id: Optional[int] = None) -> Schedule:
        with self._uow_factory() as uow:
            current = self._require(uow, schedule_id)
            draft = self._build_draft(uow, request, current)
            self._ensure_no_conflict(uow, draft, action="update", actor_id=actor_id, exclude_schedule_id=schedule_id)

            if not uow.schedules.update(schedule_id=int(schedule_id), draft=draft):
                raise NotFoundError("Schedule not found")
            uow.audit.record(
                user_id=actor_id, action="Update schedule", table_affected="schedules", record_id=int(schedule_id)
            )
            saved = self._require(uow, schedule_id)

        logger.info("Schedule %s updated", schedule_id)
        return saved

    def delete(self, schedule_id: int, *, actor_id: Optional[int] = None) -> None:
        with self._uow_factory() as uow:
            if not uow.schedules.delete(schedule_id=int(schedule_id)):
                raise NotFoundError("Schedule not found")
            uow.audit.record(
                user_id=actor_id, action="Delete schedule", table_affected="schedules", record_id=int(schedule_id)
            )

        logger.info("Schedule %s deleted", schedule_id)

    @staticmethod
    def _require(uow: UnitOfWork, schedule_id: int) -> Schedule:
        schedule = uow.schedules.get(schedule_id=int(schedule_id))
        if not schedule:
            raise NotFoundError("Schedule not found")
        return schedule

    def _ensure_no_conflict(
        self,
        uow: UnitOfWork,
        draft: ScheduleDraft,
        *,
        action: str,
        actor_id: Optional[int],
        exclude_schedule_id: Optional[int] = None,
    ) -> None:
        # Row locks are held until commit, so the scan below cannot race another writer
        # for the same teacher or section.
        uow.schedules.lock_owners(teacher_id=draft.teacher_id, section_id=draft.section_id)

        conflicts = ConflictDetector(uow.schedules).detect(draft, exclude_schedule_id=exclude_schedule_id)
        if not conflicts:
            return

        errors = [line for entry in conflicts for line in entry.messages()]
        logger.warning(
            "SCHEDULE_CONFLICT action=%s user=%s teacher=%s section=%s days=%s conflicts=%s",
            action,
            actor_id,
            draft.teacher_id,
            draft.section_id,
            ",".join(d.value for d in draft.days),
            [c.to_dict() for c in conflicts],
        )
        raise ScheduleConflict(conflicts, errors)

    def _build_draft(self, uow: UnitOfWork, request: ScheduleRequest, current: Optional[Schedule]) -> ScheduleDraft:
        errors: list[str] = []

        subject_id = current.subject_id if current else None
        if request.subject is not None:
            subject_id = uow.schedules.resolve_subject_id(request.subject)
            if subject_id is None:
                errors.append("Subject not found")
        elif subject_id is None:
            errors.append("subject is required")

        teacher_id = current.teacher_id if current else None
        if request.teacher is not None:
            teacher_id = uow.schedules.resolve_teacher_id(request.teacher)
            if teacher_id is None:
                errors.append("Teacher not found")
        elif teacher_id is None:
            errors.append("teacher is required")

        section_id = request.section_id if request.section_given or not current else current.section_id
        grade_level = request.grade_level or (current.grade_level if current and not request.section_given else None)
        if section_id is not None:
            section = uow.sections.get(section_id=section_id)
            if not section:
                errors.append("Section not found")
            elif grade_level and not section.accepts_grade(grade_level):
                errors.append(f"Grade level {grade_level} does not match section {section.section_name}")
            else:
                grade_level = section.grade_level

        start_time = _resolve_time(request.start_time, current.start_time if current else None, "startTime", errors)
        end_time = _resolve_time(request.end_time, current.end_time if current else None, "endTime", errors)
        if start_time is not None and end_time is not None:
            try:
                validate_range(start_time, end_time)
            except ValidationError as e:
                errors.append(str(e))

        days: tuple[Weekday, ...] = current.days if current else ()
        if request.days is not None or not current:
            try:
                days = parse_weekdays(request.days)
            except ValidationError as e:
                errors.append(str(e))

        if errors:
            raise ValidationError(errors[0], errors=errors)

        return ScheduleDraft(
            subject_id=int(subject_id),
            teacher_id=int(teacher_id),
            section_id=section_id,
            grade_level=grade_level,
            days=days,
            start_time=start_time,
            end_time=end_time,
        )


def _resolve_time(raw: Optional[str], fallback: Optional[time], label: str, errors: list[str]) -> Optional[time]:
    if raw is None:
        if fallback is None:
            errors.append(f"{label} is required")
        return fallback
    try:
        return parse_hhmm(raw, label)
    except ValidationError as e:
        errors.append(str(e))
        return None
