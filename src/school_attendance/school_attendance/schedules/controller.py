from __future__ import annotations

from flask import Flask, request

from ..common.auth import current_user_id, role_required
from ..common.http import json_body, ok, query_int
from ..common.validators import optional_positive_int, parse_weekday
from ..core.enums import Role
from ..container import Container
from .schemas import ScheduleRequest


def register(app: Flask, container: Container) -> None:
    @app.route("/schedules", methods=["GET"], endpoint="list_schedules")
    @role_required(Role.ADMIN)
    def list_schedules():
        day = request.args.get("day")
        schedules = container.schedule_service.list(
            teacher_id=query_int("teacherId"),
            section_id=query_int("sectionId"),
            day=parse_weekday(day) if day else None,
        )
        return ok([s.to_dict() for s in schedules])

    @app.route("/schedules/<int:schedule_id>", methods=["GET"], endpoint="get_schedule")
    @role_required(Role.ADMIN)
    def get_schedule(schedule_id: int):
        return ok(container.schedule_service.get(schedule_id).to_dict())

    @app.route("/schedules", methods=["POST"], endpoint="create_schedule")
    @role_required(Role.ADMIN)
    def create_schedule():
        schedule = container.schedule_service.create(
            ScheduleRequest.from_json(json_body()), actor_id=current_user_id()
        )
        return ok(schedule.to_dict(), 201, message="Schedule created successfully")

    @app.route("/schedules/<int:schedule_id>", methods=["PUT"], endpoint="update_schedule")
    @role_required(Role.ADMIN)
    def update_schedule(schedule_id: int):
        schedule = container.schedule_service.update(
            schedule_id, ScheduleRequest.from_json(json_body()), actor_id=current_user_id()
        )
        return ok(schedule.to_dict(), message="Schedule updated successfully")

    @app.route("/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="delete_schedule")
    @role_required(Role.ADMIN)
    def delete_schedule(schedule_id: int):
        container.schedule_service.delete(schedule_id, actor_id=current_user_id())
        return ok(None, message="Schedule deleted successfully")

    @app.route("/schedules/conflicts", methods=["POST"], endpoint="check_schedule_conflicts")
    @role_required(Role.ADMIN)
    def check_schedule_conflicts():
        body = json_body()
        exclude_id = optional_positive_int(
            body.get("excludeScheduleId") if isinstance(body, dict) else None, "excludeScheduleId"
        )
        conflicts = container.schedule_service.check_conflicts(
            ScheduleRequest.from_json(body), exclude_schedule_id=exclude_id
        )
        return ok(
            {
                "hasConflicts": bool(conflicts),
                "conflicts": [c.to_dict() for c in conflicts],
                "errors": [line for c in conflicts for line in c.messages()],
            }
        )
