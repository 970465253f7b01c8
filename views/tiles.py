from __future__ import annotations

from flask import Blueprint, current_app, request

from errors import ExternalServiceError, InvalidArgument, UploadError
from extensions import get_ai_gateway
from services import uploads
from services.factory_config import factory_config_payload
from views.common import error_response, extract_payload, json_response, upload_dir


tiles_bp = Blueprint("tiles", __name__)

ROOM_IMAGE_FIELD = "roomImage"


@tiles_bp.post("/upload-room")
def upload_room():
    try:
        stored = uploads.save_upload(
            request.files.get(ROOM_IMAGE_FIELD),
            upload_dir(),
            max_bytes=current_app.config.get("MAX_UPLOAD_BYTES", uploads.MAX_UPLOAD_BYTES),
        )
    except UploadError as exc:
        return error_response(exc.message, exc.status_code)
    except OSError as exc:
        current_app.logger.exception("Could not write room image: %s", exc)
        return error_response("Upload failed", 500)

    return json_response({"imageUrl": stored.url})


@tiles_bp.post("/generate-tile")
def generate_tile():
    prompt = extract_payload().get("prompt")
    gateway = get_ai_gateway()

    try:
        generated = gateway.generate_tile(prompt)
        stored = uploads.store_generated_image(generated.raw_bytes, upload_dir())
    except InvalidArgument as exc:
        return error_response(exc.message, 400)
    except (ExternalServiceError, OSError) as exc:
        current_app.logger.exception("AI image error: %s", exc)
        return error_response("AI generation failed", 500)

    return json_response({"tileUrl": stored.url})


@tiles_bp.get("/factory-config")
def factory_config():
    return json_response(factory_config_payload())
