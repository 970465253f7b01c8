from __future__ import annotations

from typing import TYPE_CHECKING

from flask import current_app
from flask_cors import CORS
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

if TYPE_CHECKING:
    from services.ai_gateway import AIGateway
    from services.preview import FloorPreviewProvider

# アプリ全体で共有する拡張機能のインスタンスをここで定義する
# 実際の初期化は create_app 内で行う

db = SQLAlchemy()
migrate = Migrate()
cors = CORS()

AI_GATEWAY_KEY = "ai_gateway"
PREVIEW_PROVIDER_KEY = "floor_preview_provider"


def get_ai_gateway() -> "AIGateway":
    """create_app で一度だけ生成したAIゲートウェイを返す。"""

    return current_app.extensions[AI_GATEWAY_KEY]


def get_preview_provider() -> "FloorPreviewProvider":
    """create_app で一度だけ生成した床プレビューの連携先を返す。"""

    return current_app.extensions[PREVIEW_PROVIDER_KEY]
