from __future__ import annotations

from pathlib import Path
from typing import Any

from flask import current_app, jsonify, request


def json_response(payload: dict[str, Any], status: int = 200):
    return jsonify(payload), status


def error_response(message: str, status: int = 400, *, key: str = "error", **extra: Any):
    return json_response({key: message, **extra}, status)


def extract_payload() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return {}


def upload_dir() -> Path:
    return Path(current_app.config["UPLOAD_FOLDER"])
