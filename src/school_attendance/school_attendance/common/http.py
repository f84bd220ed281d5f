from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InvalidStateTransition,
    NotFoundError,
    ScheduleConflict,
    ValidationError,
)

logger = logging.getLogger(__name__)


def ok(data: Any = None, status: int = 200, **extra):
    body = {"success": True, "data": data}
    body.update(extra)
    return jsonify(body), status


def fail(message: str, status: int, **extra):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def json_body() -> Any:
    body = request.get_json(silent=True)
    if body is None:
        raise ValidationError("Request body must be JSON")
    return body


def query_int(name: str, default: Optional[int] = None) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ScheduleConflict)
    def _schedule_conflict(e: ScheduleConflict):
        return fail(str(e), 409, errors=e.errors, conflicts=[c.to_dict() for c in e.conflicts])

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(str(e), 400, errors=e.errors)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return fail(str(e), 404)

    @app.errorhandler(InvalidStateTransition)
    def _invalid_state(e: InvalidStateTransition):
        return fail(str(e), 409)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return fail(str(e), 403)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return fail(str(e), 400)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", 500)
