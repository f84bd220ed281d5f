from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Optional

import pytest

from src.school_attendance.school_attendance.assignments.model import StudentScheduleAssignment
from src.school_attendance.school_attendance.core.enums import EnrollmentStatus, StudentStatus, Weekday
from src.school_attendance.school_attendance.enrollments.model import EnrollmentApplication
from src.school_attendance.school_attendance.schedules.model import Schedule, ScheduleDraft
from src.school_attendance.school_attendance.sections.model import Section, normalize_grade
from src.school_attendance.school_attendance.students.model import Student


@dataclass
class InMemoryState:
    subjects: dict[int, str] = field(default_factory=dict)
    teachers: dict[int, str] = field(default_factory=dict)
    inactive_teachers: set[int] = field(default_factory=set)
    sections: dict[int, Section] = field(default_factory=dict)
    schedules: dict[int, Schedule] = field(default_factory=dict)
    applications: dict[int, EnrollmentApplication] = field(default_factory=dict)
    students: dict[int, Student] = field(default_factory=dict)
    assignments: dict[int, StudentScheduleAssignment] = field(default_factory=dict)
    audit: list[dict] = field(default_factory=list)
    locks: list[tuple[str, int]] = field(default_factory=list)
    next_id: int = 100

    def new_id(self) -> int:
        self.next_id += 1
        return self.next_id


class InMemorySchedules:
    def __init__(self, state: InMemoryState):
        self._s = state

    def _build(self, schedule_id: int, draft: ScheduleDraft) -> Schedule:
        section = self._s.sections.get(draft.section_id) if draft.section_id else None
        return Schedule(
            schedule_id=schedule_id,
            subject_id=draft.subject_id,
            teacher_id=draft.teacher_id,
            section_id=draft.section_id,
            grade_level=draft.grade_level,
            days=draft.days,
            start_time=draft.start_time,
            end_time=draft.end_time,
            subject_name=self._s.subjects.get(draft.subject_id),
            teacher_name=self._s.teachers.get(draft.teacher_id),
            section_name=section.section_name if section else None,
            teacher_active=draft.teacher_id in self._s.teachers and draft.teacher_id not in self._s.inactive_teachers,
        )

    def get(self, *, schedule_id):
        return self._s.schedules.get(int(schedule_id))

    def list(self, *, teacher_id=None, section_id=None, day=None):
        out = [
            s
            for s in self._s.schedules.values()
            if (teacher_id is None or s.teacher_id == teacher_id)
            and (section_id is None or s.section_id == section_id)
            and (day is None or day in s.days)
        ]
        return sorted(out, key=lambda s: (s.start_time, s.schedule_id))

    def find_on_day(self, *, day, teacher_id=None, section_id=None, exclude_schedule_id=None):
        return [
            s
            for s in self.list(teacher_id=teacher_id, section_id=section_id, day=day)
            if s.schedule_id != exclude_schedule_id
        ]

    def lock_owners(self, *, teacher_id, section_id):
        self._s.locks.append(("teacher", teacher_id))
        if section_id is not None:
            self._s.locks.append(("section", section_id))

    def create(self, draft):
        schedule_id = self._s.new_id()
        self._s.schedules[schedule_id] = self._build(schedule_id, draft)
        return schedule_id

    def update(self, *, schedule_id, draft):
        if schedule_id not in self._s.schedules:
            return False
        self._s.schedules[schedule_id] = self._build(schedule_id, draft)
        return True

    def delete(self, *, schedule_id):
        return self._s.schedules.pop(int(schedule_id), None) is not None

    def resolve_subject_id(self, value):
        value = str(value).strip()
        if value.isdigit():
            return int(value) if int(value) in self._s.subjects else None
        return next((i for i, name in self._s.subjects.items() if name == value), None)

    def resolve_teacher_id(self, value):
        value = str(value).strip()
        if value.isdigit():
            return int(value) if int(value) in self._s.teachers else None
        return next((i for i, name in self._s.teachers.items() if name == value), None)


class InMemorySections:
    def __init__(self, state: InMemoryState):
        self._s = state

    def get(self, *, section_id, for_update=False):
        if for_update:
            self._s.locks.append(("section", int(section_id)))
        return self._s.sections.get(int(section_id))

    def list(self, *, grade_level=None, is_active=True):
        return [
            s
            for s in self._s.sections.values()
            if (grade_level is None or normalize_grade(s.grade_level) == normalize_grade(grade_level))
            and (is_active is None or s.is_active == is_active)
        ]


class InMemoryStudents:
    def __init__(self, state: InMemoryState):
        self._s = state

    def get(self, *, student_id):
        return self._s.students.get(int(student_id))

    def create_from_application(self, application, *, section_id):
        student_id = self._s.new_id()
        self._s.students[student_id] = Student(
            student_id=student_id,
            application_id=application.application_id,
            full_name=application.full_name,
            date_of_birth=application.date_of_birth,
            gender=application.gender,
            grade_level=application.grade_level,
            section_id=section_id,
            status=StudentStatus.ACTIVE,
        )
        return student_id

    def count_in_section(self, *, section_id):
        return sum(
            1 for s in self._s.students.values() if s.section_id == section_id and s.status == StudentStatus.ACTIVE
        )


class InMemoryEnrollments:
    def __init__(self, state: InMemoryState):
        self._s = state

    def get(self, *, application_id, for_update=False):
        return self._s.applications.get(int(application_id))

    def list(self, *, status=None, offset=0, limit=10):
        items = [a for a in self._s.applications.values() if status is None or a.status == status]
        items.sort(key=lambda a: a.application_id, reverse=True)
        return items[offset : offset + limit], len(items)

    def count_by_status(self):
        counts = {s.value: 0 for s in EnrollmentStatus}
        for a in self._s.applications.values():
            counts[a.status.value] += 1
        return counts

    def _flip(self, application_id, **changes):
        app = self._s.applications.get(int(application_id))
        if not app or app.status != EnrollmentStatus.PENDING:
            return False
        self._s.applications[app.application_id] = replace(app, **changes)
        return True

    def mark_approved(self, *, application_id, student_id, section_id, reviewed_by, reviewed_at, notes=None):
        return self._flip(
            application_id,
            status=EnrollmentStatus.APPROVED,
            student_id=student_id,
            section_id=section_id,
            reviewed_by=reviewed_by,
            reviewed_at=reviewed_at,
            review_notes=notes,
        )

    def mark_declined(self, *, application_id, reason, reviewed_by, reviewed_at, notes=None):
        return self._flip(
            application_id,
            status=EnrollmentStatus.DECLINED,
            decline_reason=reason,
            reviewed_by=reviewed_by,
            reviewed_at=reviewed_at,
            review_notes=notes,
        )


class InMemoryAssignments:
    def __init__(self, state: InMemoryState):
        self._s = state

    def exists(self, *, student_id, schedule_id):
        return any(a.student_id == student_id and a.schedule_id == schedule_id for a in self._s.assignments.values())

    def get(self, *, assignment_id):
        return self._s.assignments.get(int(assignment_id))

    def create(self, *, student_id, schedule_id, created_by=None):
        if self.exists(student_id=student_id, schedule_id=schedule_id):
            raise AssertionError("duplicate (student, schedule) pair")
        assignment_id = self._s.new_id()
        self._s.assignments[assignment_id] = StudentScheduleAssignment(
            assignment_id=assignment_id, student_id=student_id, schedule_id=schedule_id, created_by=created_by
        )
        return assignment_id

    def delete(self, *, assignment_id):
        return self._s.assignments.pop(int(assignment_id), None) is not None

    def list(self, *, student_id=None, schedule_id=None, offset=0, limit=50):
        rows = [
            {"id": a.assignment_id, "studentId": a.student_id, "scheduleId": a.schedule_id}
            for a in self._s.assignments.values()
            if (student_id is None or a.student_id == student_id) and (schedule_id is None or a.schedule_id == schedule_id)
        ]
        return rows[offset : offset + limit], len(rows)


class InMemoryAudit:
    def __init__(self, state: InMemoryState):
        self._s = state

    def record(self, *, user_id, action, table_affected=None, record_id=None, details=None):
        self._s.audit.append({"user_id": user_id, "action": action, "table": table_affected, "record_id": record_id})
        return len(self._s.audit)


class InMemoryUnitOfWork:
    """Commits by keeping changes; on an exception restores the snapshot taken on enter."""

    def __init__(self, state: InMemoryState):
        self._state = state
        self._snapshot: Optional[dict] = None

    def __enter__(self):
        self._snapshot = copy.deepcopy(self._state.__dict__)
        self.schedules = InMemorySchedules(self._state)
        self.sections = InMemorySections(self._state)
        self.students = InMemoryStudents(self._state)
        self.enrollments = InMemoryEnrollments(self._state)
        self.assignments = InMemoryAssignments(self._state)
        self.audit = InMemoryAudit(self._state)
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self._state.__dict__.update(self._snapshot)
        self._snapshot = None
        return None


def make_application(application_id: int, *, grade_level: str = "Grade 1", status=EnrollmentStatus.PENDING):
    return EnrollmentApplication(
        application_id=application_id,
        full_name=f"Applicant {application_id}",
        date_of_birth=date(2019, 5, 1),
        gender="Female",
        place_of_birth="Quezon City",
        nationality="Filipino",
        address="12 Mabini St.",
        grade_level=grade_level,
        parent_name="Parent",
        parent_contact="09170000000",
        parent_email="parent@example.com",
        status=status,
        submitted_at=datetime(2026, 6, 1, 8, 0),
    )


def make_schedule(
    schedule_id: int,
    *,
    teacher_id: int,
    section_id: Optional[int],
    days=(Weekday.MON,),
    start=time(9, 0),
    end=time(10, 0),
    subject_id: int = 1,
    state: Optional[InMemoryState] = None,
) -> Schedule:
    section = state.sections.get(section_id) if state and section_id else None
    return Schedule(
        schedule_id=schedule_id,
        subject_id=subject_id,
        teacher_id=teacher_id,
        section_id=section_id,
        grade_level=section.grade_level if section else None,
        days=tuple(days),
        start_time=start,
        end_time=end,
        subject_name=state.subjects.get(subject_id) if state else None,
        teacher_name=state.teachers.get(teacher_id) if state else None,
        section_name=section.section_name if section else None,
        teacher_active=teacher_id not in state.inactive_teachers if state else True,
    )


@pytest.fixture
def fixed_now():
    return datetime(2026, 6, 15, 9, 30, 0)


@pytest.fixture
def state() -> InMemoryState:
    s = InMemoryState()
    s.subjects.update({1: "Math", 2: "Science", 3: "English"})
    s.teachers.update({7: "Maria Reyes", 8: "Jose Cruz"})
    s.sections.update(
        {
            3: Section(section_id=3, section_name="Sampaguita", grade_level="Grade 1", capacity=30),
            5: Section(section_id=5, section_name="Rosal", grade_level="Grade 1", capacity=30),
            9: Section(section_id=9, section_name="Narra", grade_level="Grade 2", capacity=30),
            11: Section(section_id=11, section_name="Old", grade_level="Grade 1", is_active=False),
        }
    )
    return s


@pytest.fixture
def uow_factory(state):
    return lambda: InMemoryUnitOfWork(state)


@pytest.fixture
def add_schedule(state):
    def _add(schedule_id: int, **kwargs) -> Schedule:
        schedule = make_schedule(schedule_id, state=state, **kwargs)
        state.schedules[schedule_id] = schedule
        return schedule

    return _add


@pytest.fixture
def add_application(state):
    def _add(application_id: int, **kwargs) -> EnrollmentApplication:
        application = make_application(application_id, **kwargs)
        state.applications[application_id] = application
        return application

    return _add
