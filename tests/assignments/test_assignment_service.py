from __future__ import annotations

import pytest

from src.school_attendance.school_attendance.core.enums import StudentStatus
from src.school_attendance.school_attendance.core.exceptions import ValidationError
from src.school_attendance.school_attendance.assignments.service import AssignmentService
from src.school_attendance.school_attendance.students.model import Student


@pytest.fixture
def service(uow_factory):
    return AssignmentService(uow_factory)


@pytest.fixture
def students(state):
    for student_id, status in ((501, StudentStatus.ACTIVE), (502, StudentStatus.ACTIVE), (503, StudentStatus.INACTIVE)):
        state.students[student_id] = Student(
            student_id=student_id,
            application_id=None,
            full_name=f"Student {student_id}",
            date_of_birth=None,
            gender=None,
            grade_level="Grade 1",
            section_id=5,
            status=status,
        )
    return state.students


def test_bulk_assign_reports_per_item_failures(service, state, students, add_schedule):
    add_schedule(10, teacher_id=7, section_id=5)

    result = service.bulk_assign(
        {
            "assignments": [
                {"studentId": 501, "scheduleId": 10},
                {"studentId": 501, "scheduleId": 10},
                {"studentId": 502, "scheduleId": 10},
                {"studentId": 503, "scheduleId": 10},
                {"studentId": 502, "scheduleId": 77},
            ]
        },
        actor_id=1,
    )

    body = result.to_dict()
    assert (body["total"], body["successful"], body["failed"]) == (5, 2, 3)
    assert [c["studentId"] for c in body["created"]] == [501, 502]
    assert body["errors"] == [
        "Student 501 is already assigned to schedule 10",
        "Student 503 not found or inactive",
        "Schedule 77 not found",
    ]
    assert len(state.assignments) == 2


def test_bulk_assign_skips_existing_pairs(service, state, students, add_schedule):
    add_schedule(10, teacher_id=7, section_id=5)
    service.bulk_assign([{"studentId": 501, "scheduleId": 10}], actor_id=1)

    result = service.bulk_assign([{"studentId": 501, "scheduleId": 10}], actor_id=1)

    assert result.created == ()
    assert len(state.assignments) == 1


@pytest.mark.parametrize("payload", [[], {}, {"assignments": []}, [{"studentId": 1}], "nope"])
def test_bulk_assign_rejects_malformed_payload(service, payload):
    with pytest.raises(ValidationError):
        service.bulk_assign(payload, actor_id=1)


def test_remove_is_idempotent(service, state, students, add_schedule):
    add_schedule(10, teacher_id=7, section_id=5)
    created = service.bulk_assign([{"studentId": 501, "scheduleId": 10}], actor_id=1).created[0]

    assert service.remove(created["id"], actor_id=1) is True
    assert service.remove(created["id"], actor_id=1) is False
    assert service.remove(12345, actor_id=1) is False
    assert state.assignments == {}


def test_list_clamps_limit(service, students, add_schedule):
    add_schedule(10, teacher_id=7, section_id=5)
    service.bulk_assign([{"studentId": 501, "scheduleId": 10}, {"studentId": 502, "scheduleId": 10}], actor_id=1)

    result = service.list(schedule_id=10, page=1, limit=1000)

    assert result["pagination"] == {"page": 1, "limit": 100, "total": 2, "pages": 1}
    assert len(result["items"]) == 2
