from __future__ import annotations

from typing import Any

from flask import Blueprint, current_app

from errors import StorageError
from models import User
from services import credentials, user_store
from views.common import error_response, extract_payload, json_response


auth_bp = Blueprint("auth", __name__)


def _serialize_user(user: User) -> dict[str, Any]:
    return {"id": user.id, "email": user.email}


def _read_credentials() -> tuple[str, str] | None:
    data = extract_payload()
    email = data.get("email")
    password = data.get("password")
    if not isinstance(email, str) or not isinstance(password, str):
        return None
    if not email or not password:
        return None
    return email, password


@auth_bp.post("/register")
def register():
    parsed = _read_credentials()
    if parsed is None:
        return error_response("Email and password required", 400)
    email, password = parsed

    try:
        if user_store.find_user_by_email(email) is not None:
            return error_response("Email already exists", 400)

        hashed = credentials.hash_password(password, current_app.config.get("PASSWORD_HASH_METHOD"))
        user_store.insert_user(email, hashed)
    except StorageError as exc:
        current_app.logger.exception("Registration failed: %s", exc)
        return error_response("Registration error", 500)

    current_app.logger.info("Registered user %s", email)
    return json_response({"message": "Registered successfully"})


@auth_bp.post("/login")
def login():
    parsed = _read_credentials()
    if parsed is None:
        return error_response("Email and password required", 400)
    email, password = parsed

    try:
        user = user_store.find_user_by_email(email)
    except StorageError as exc:
        current_app.logger.exception("Login failed: %s", exc)
        return error_response("Login error", 500)

    if user is None:
        return error_response("User not found", 400, key="message")
    if not credentials.verify_password(password, user.password_hash):
        return error_response("Wrong password", 401, key="message")

    return json_response({"message": "Login success", "user": _serialize_user(user)})
