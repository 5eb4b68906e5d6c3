"""Request helpers shared by the JSON controllers."""

from __future__ import annotations

from functools import wraps
from typing import Any, Mapping

from flask import current_app, g, jsonify, request, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from ..core.permissions import Capability, require_capability
from ..users.model import User
from ..users.repository import UserRepository

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 500


def ok(data: Any = None, *, message: str | None = None, status: int = 200, **extra: Any):
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def error_response(error: DomainError, **extra: Any):
    status = status_for(error)
    # storage details stay in the log
    message = "Internal server error" if isinstance(error, StorageError) else str(error)
    body: dict[str, Any] = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def internal_error(action: str):
    current_app.logger.exception("Failed to %s", action)
    return jsonify({"success": False, "message": "Internal server error"}), 500


def json_body() -> Mapping[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def load_current_user(users: UserRepository) -> User:
    """The acting user from the session, re-read from storage on every request."""
    user_id = session.get("user_id")
    if user_id is None:
        raise AuthenticationError("Authentication required")
    try:
        user = users.get_by_id(int(user_id))
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid session")
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    return user


def login_required(users: UserRepository):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.current_user = load_current_user(users)
            except DomainError as e:
                return error_response(e)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def capability_required(capability: Capability):
    """Must be stacked under ``login_required``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = getattr(g, "current_user", None)
            if user is None:
                return error_response(AuthenticationError("Authentication required"))
            try:
                require_capability(user.role, capability)
            except AuthorizationError as e:
                return error_response(e)
            return view(*args, **kwargs)

        return wrapper

    return decorator
