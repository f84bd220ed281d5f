from __future__ import annotations

from flask import Flask, request

from ..common.auth import current_user_id, role_required
from ..common.http import json_body, ok, query_int
from ..core.enums import Role
from ..container import Container
from .schemas import ApproveRequest, DeclineRequest


def register(app: Flask, container: Container) -> None:
    reviewers = (Role.ADMIN, Role.REGISTRAR)

    @app.route("/enrollments", methods=["GET"], endpoint="list_enrollments")
    @role_required(*reviewers)
    def list_enrollments():
        page = container.enrollment_service.list(
            status=request.args.get("status"),
            page=query_int("page", 1),
            limit=query_int("limit", container.default_page_limit),
        )
        return ok([a.to_dict() for a in page.items], pagination=page.to_dict())

    @app.route("/enrollments/stats", methods=["GET"], endpoint="enrollment_stats")
    @role_required(*reviewers)
    def enrollment_stats():
        return ok(container.enrollment_service.stats())

    @app.route("/enrollments/<int:application_id>", methods=["GET"], endpoint="get_enrollment")
    @role_required(*reviewers)
    def get_enrollment(application_id: int):
        return ok(container.enrollment_service.get(application_id).to_dict())

    @app.route("/enrollments/<int:application_id>/approve", methods=["POST"], endpoint="approve_enrollment")
    @role_required(*reviewers)
    def approve_enrollment(application_id: int):
        application = container.enrollment_service.approve(
            application_id, ApproveRequest.from_json(json_body()), reviewer_id=current_user_id()
        )
        return ok(application.to_dict(), message="Enrollment approved successfully")

    @app.route("/enrollments/<int:application_id>/decline", methods=["POST"], endpoint="decline_enrollment")
    @role_required(*reviewers)
    def decline_enrollment(application_id: int):
        application = container.enrollment_service.decline(
            application_id, DeclineRequest.from_json(json_body()), reviewer_id=current_user_id()
        )
        return ok(application.to_dict(), message="Enrollment declined")
