from __future__ import annotations

from flask import Flask

from ..common.auth import current_user_id, role_required
from ..common.http import json_body, ok, query_int
from ..core.constants import DEFAULT_ASSIGNMENT_PAGE_LIMIT
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/schedule-assignments", methods=["GET"], endpoint="list_assignments")
    @role_required(Role.ADMIN)
    def list_assignments():
        result = container.assignment_service.list(
            student_id=query_int("studentId"),
            schedule_id=query_int("scheduleId"),
            page=query_int("page", 1),
            limit=query_int("limit", DEFAULT_ASSIGNMENT_PAGE_LIMIT),
        )
        return ok(result["items"], pagination=result["pagination"])

    @app.route("/schedule-assignments/bulk", methods=["POST"], endpoint="bulk_assign")
    @role_required(Role.ADMIN)
    def bulk_assign():
        result = container.assignment_service.bulk_assign(json_body(), actor_id=current_user_id())
        return ok(result.to_dict(), 201, message=f"{len(result.created)} of {result.total} assignments created")

    @app.route("/schedule-assignments/<int:assignment_id>", methods=["DELETE"], endpoint="remove_assignment")
    @role_required(Role.ADMIN)
    def remove_assignment(assignment_id: int):
        removed = container.assignment_service.remove(assignment_id, actor_id=current_user_id())
        return ok({"removed": removed}, message="Assignment removed" if removed else "Assignment already removed")
