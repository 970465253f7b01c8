from __future__ import annotations

from flask import Blueprint, send_from_directory

from services.uploads import PUBLIC_URL_PREFIX
from views.common import upload_dir


assets_bp = Blueprint("assets", __name__)


@assets_bp.get(f"{PUBLIC_URL_PREFIX}/<path:filename>")
def uploaded_file(filename: str):
    # send_from_directory はフォルダ外へのパスを拒否し、存在しないファイルは404にする
    return send_from_directory(upload_dir(), filename)
