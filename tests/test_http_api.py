from __future__ import annotations

import pytest

from src.school_attendance.school_attendance.container import build_services
from src.school_attendance.school_attendance.core.enums import EnrollmentStatus, Weekday
from src.school_attendance.school_attendance.main import create_app
from src.school_attendance.school_attendance.schedules.service import ScheduleService


@pytest.fixture
def app(monkeypatch, uow_factory):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=build_services(uow_factory))


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, *, user_id=1, role="admin"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


SCHEDULE_A = {"subject": "Math", "teacher": 7, "sectionId": 3, "days": ["Mon", "Wed"], "startTime": "09:00", "endTime": "10:00"}


def test_requests_without_session_are_unauthorized(client):
    resp = client.get("/schedules")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_registrar_cannot_manage_schedules(client):
    _login(client, role="registrar")

    assert client.post("/schedules", json=SCHEDULE_A).status_code == 403
    assert client.get("/enrollments").status_code == 200


def test_create_then_conflicting_schedule_returns_409(client):
    _login(client)

    created = client.post("/schedules", json=SCHEDULE_A)
    assert created.status_code == 201
    assert created.get_json()["data"]["days"] == ["Mon", "Wed"]

    resp = client.post(
        "/schedules",
        json={**SCHEDULE_A, "sectionId": 9, "days": ["Mon"], "startTime": "09:30", "endTime": "10:30"},
    )

    assert resp.status_code == 409
    body = resp.get_json()
    assert body["success"] is False
    assert body["conflicts"][0]["day"] == "Mon"
    assert body["conflicts"][0]["conflicts"]["teacher"]["hasOverlap"] is True
    assert body["conflicts"][0]["conflicts"]["section"]["hasOverlap"] is False
    assert body["errors"] == ["Mon: Teacher is already scheduled for Math (09:00-10:00)"]


def test_invalid_schedule_body_returns_400_with_errors(client):
    _login(client)

    resp = client.post("/schedules", json={**SCHEDULE_A, "startTime": "10:00", "endTime": "09:00"})

    assert resp.status_code == 400
    assert resp.get_json()["errors"] == ["Start time must be before end time (10:00-09:00)"]


def test_missing_schedule_returns_404(client):
    _login(client)

    assert client.get("/schedules/999").status_code == 404
    assert client.put("/schedules/999", json=SCHEDULE_A).status_code == 404
    assert client.delete("/schedules/999").status_code == 404


def test_conflict_dry_run(client):
    _login(client)
    schedule_id = client.post("/schedules", json=SCHEDULE_A).get_json()["data"]["id"]

    clash = client.post("/schedules/conflicts", json={**SCHEDULE_A, "days": ["Wed"]}).get_json()["data"]
    own = client.post(
        "/schedules/conflicts", json={**SCHEDULE_A, "excludeScheduleId": schedule_id}
    ).get_json()["data"]

    assert clash["hasConflicts"] is True
    assert own == {"hasConflicts": False, "conflicts": [], "errors": []}


def test_approve_duplicate_schedule_returns_400(client, state, add_application, add_schedule):
    _login(client, role="registrar")
    add_application(42)
    add_schedule(10, teacher_id=7, section_id=5)

    resp = client.post(
        "/enrollments/42/approve",
        json={"sectionId": 5, "scheduleAssignments": [{"scheduleId": 10}, {"scheduleId": 10}]},
    )

    assert resp.status_code == 400
    assert state.applications[42].status == EnrollmentStatus.PENDING


def test_approve_with_one_unknown_schedule_changes_nothing(client, state, add_application, add_schedule):
    _login(client, role="registrar")
    add_application(42)
    add_schedule(10, teacher_id=7, section_id=5)
    add_schedule(11, teacher_id=8, section_id=5, days=(Weekday.TUE,))
    add_schedule(12, teacher_id=7, section_id=5, days=(Weekday.WED,))

    resp = client.post(
        "/enrollments/42/approve",
        json={"sectionId": 5, "scheduleAssignments": [{"scheduleId": s} for s in (10, 11, 999, 12)]},
    )

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Schedule with ID 999 not found"
    assert client.get("/enrollments/42").get_json()["data"]["enrollmentStatus"] == "pending"
    assert state.students == {}
    assert state.assignments == {}


def test_approve_then_decline_returns_409(client, add_application):
    _login(client, user_id=4, role="registrar")
    add_application(42)

    approved = client.post("/enrollments/42/approve", json={"sectionId": 5})
    assert approved.status_code == 200
    assert approved.get_json()["data"]["enrollmentStatus"] == "approved"
    assert approved.get_json()["data"]["reviewedBy"] == 4

    assert client.post("/enrollments/42/decline", json={"reason": "late"}).status_code == 409


def test_decline_without_reason_returns_400(client, add_application):
    _login(client)
    add_application(42)

    assert client.post("/enrollments/42/decline", json={}).status_code == 400
    assert client.post("/enrollments/404/decline", json={"reason": "x"}).status_code == 404


def test_enrollment_list_includes_pagination(client, add_application):
    _login(client)
    for i in range(1, 4):
        add_application(i)

    body = client.get("/enrollments?status=pending&limit=2").get_json()

    assert [a["id"] for a in body["data"]] == [3, 2]
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}


def test_assignment_removal_always_succeeds(client):
    _login(client)

    first = client.delete("/schedule-assignments/77")
    second = client.delete("/schedule-assignments/77")

    assert first.status_code == second.status_code == 200
    assert second.get_json()["data"] == {"removed": False}


def test_sections_visible_to_any_signed_in_user(client):
    _login(client, user_id=9, role="teacher")

    body = client.get("/sections?gradeLevel=grade 1").get_json()

    assert sorted(s["id"] for s in body["data"]) == [3, 5]


def test_unexpected_errors_become_json_500(client, monkeypatch):
    _login(client)

    def boom(self, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(ScheduleService, "list", boom)

    resp = client.get("/schedules")

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Internal server error"}
