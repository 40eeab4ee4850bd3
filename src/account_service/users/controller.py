from __future__ import annotations

from typing import Any, Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..core.constants import USER_NOT_FOUND
from ..core.exceptions import NotFoundError, NotificationError, ValidationError
from ..container import Container
from .model import User, UserPatch

_PATCH_FIELDS = ("full_name", "username", "email", "password", "phone_number", "profile_picture_url")


def user_to_dict(user: User) -> dict:
    """Public representation; the password hash never leaves the service."""
    return {
        "id": user.user_id,
        "email": user.email,
        "username": user.username,
        "full_name": user.full_name,
        "role": user.role,
        "status": user.status,
        "phone_number": user.phone_number,
        "birth_date": format_iso_date(user.birth_date),
        "profile_picture_url": user.profile_picture_url,
    }


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _optional_str(payload: dict, key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def _optional_date(payload: dict, key: str):
    value = _optional_str(payload, key)
    if value is None:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{key} must be a date in YYYY-MM-DD format") from None


def parse_candidate(payload: dict) -> User:
    return User(
        email=_optional_str(payload, "email"),
        username=_optional_str(payload, "username"),
        full_name=_optional_str(payload, "full_name"),
        password_hash=_optional_str(payload, "password"),
        phone_number=_optional_str(payload, "phone_number"),
        birth_date=_optional_date(payload, "birth_date"),
        profile_picture_url=_optional_str(payload, "profile_picture_url"),
    )


def parse_patch(payload: dict) -> UserPatch:
    fields: dict[str, Any] = {key: _optional_str(payload, key) for key in _PATCH_FIELDS}
    return UserPatch(birth_date=_optional_date(payload, "birth_date"), **fields)


def _reset_email() -> str:
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        email = payload.get("email")
    elif isinstance(payload, str):
        email = payload
    else:
        email = request.get_data(as_text=True)
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("Email is required")
    return email.strip()


def register(app: Flask, container: Container) -> None:
    service = container.user_service

    @app.route("/users/register", methods=["POST"], endpoint="users_register")
    def users_register():
        try:
            user = service.register(parse_candidate(_json_body()))
        except ValidationError as e:
            return _error(str(e), 400)
        return jsonify(user_to_dict(user)), 201

    @app.route("/users/email/<email>", methods=["GET"], endpoint="users_by_email")
    def users_by_email(email: str):
        user = service.find_by_email(email)
        if not user:
            return _error(USER_NOT_FOUND, 404)
        return jsonify(user_to_dict(user))

    @app.route("/users/username/<username>", methods=["GET"], endpoint="users_by_username")
    def users_by_username(username: str):
        user = service.find_by_username(username)
        if not user:
            return _error(USER_NOT_FOUND, 404)
        return jsonify(user_to_dict(user))

    @app.route("/users/all", methods=["GET"], endpoint="users_all")
    def users_all():
        return jsonify([user_to_dict(u) for u in service.list_all()])

    @app.route("/users/update/<int:user_id>", methods=["PUT"], endpoint="users_update")
    def users_update(user_id: int):
        try:
            user = service.update(user_id, parse_patch(_json_body()))
        except NotFoundError as e:
            return _error(str(e), 404)
        except ValidationError as e:
            return _error(str(e), 400)
        return jsonify(user_to_dict(user))

    @app.route("/users/delete/<int:user_id>", methods=["DELETE"], endpoint="users_delete")
    def users_delete(user_id: int):
        try:
            service.delete(user_id)
        except NotFoundError as e:
            return _error(str(e), 404)
        return jsonify({"message": "User deleted"})

    @app.route("/users/request-password-reset", methods=["POST"], endpoint="users_request_password_reset")
    def users_request_password_reset():
        try:
            service.request_password_reset(_reset_email())
        except ValidationError as e:
            return _error(str(e), 400)
        except NotFoundError as e:
            return _error(str(e), 404)
        except NotificationError as e:
            return _error(str(e), 502)
        return jsonify({"message": "Password reset email sent"})
