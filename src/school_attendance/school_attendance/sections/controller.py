from __future__ import annotations

from flask import Flask, request

from ..common.auth import role_required
from ..common.http import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/sections", methods=["GET"], endpoint="list_sections")
    @role_required()
    def list_sections():
        active = (request.args.get("active") or "true").strip().lower()
        sections = container.section_service.list(
            grade_level=request.args.get("gradeLevel"),
            is_active=None if active == "all" else active not in {"0", "false", "no"},
        )
        return ok([s.to_dict() for s in sections])
