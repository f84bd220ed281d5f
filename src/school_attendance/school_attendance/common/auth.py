from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


def role_required(*roles: Role):
    """Gate a JSON view on the session set by the login service.

    No session -> 401, signed in with another role -> AuthorizationError
    (403). With no roles given any signed-in user passes.
    """

    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Authentication required"}), 401
            if allowed and session.get("role") not in allowed:
                raise AuthorizationError("You do not have permission to perform this action")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_user_id() -> int:
    return int(session["user_id"])
