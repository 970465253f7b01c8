from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, current_app
from sqlalchemy import text

from errors import ExternalServiceError, ValidationError
from extensions import db, get_ai_gateway, get_preview_provider
from services.ai_gateway import parse_turns
from services.prompt_builder import CHAT_FALLBACK_REPLY
from views.common import error_response, extract_payload, json_response


api_bp = Blueprint("api", __name__, url_prefix="/api")


@api_bp.get("/health")
def health():
    db_ok = True
    try:
        db.session.execute(text("SELECT 1"))
    except Exception as exc:  # noqa: BLE001
        db_ok = False
        db.session.rollback()
        current_app.logger.error("Database health check failed: %s", exc)
    status = "ok" if db_ok else "error"
    return json_response(
        {"status": status, "timestamp": datetime.now(timezone.utc).isoformat(), "db_ok": db_ok}
    )


@api_bp.post("/chat")
def chat():
    data = extract_payload()
    try:
        turns = parse_turns(data.get("messages"))
    except ValidationError as exc:
        return error_response(exc.message, 400)

    system = data.get("system")
    if not isinstance(system, str):
        system = None

    user_id = data.get("userId")
    if user_id is not None:
        current_app.logger.debug("Chat request from user %s with %d turns", user_id, len(turns))

    try:
        reply = get_ai_gateway().chat(turns, system)
    except ValidationError as exc:
        return error_response(exc.message, 400)
    except ExternalServiceError as exc:
        current_app.logger.exception("Chat AI error: %s", exc)
        return error_response("Chat failed", 500, reply=CHAT_FALLBACK_REPLY)

    return json_response({"reply": reply})


@api_bp.post("/ai-preview")
def ai_preview():
    data = extract_payload()
    try:
        final_image = get_preview_provider().replace_floor(
            data.get("roomImageUrl"),
            data.get("tileImageUrl"),
        )
    except ExternalServiceError as exc:
        current_app.logger.exception("AI preview error: %s", exc)
        return error_response("AI Preview failed", 500)

    return json_response({"finalImage": final_image})
