from __future__ import annotations

import os

from dotenv import load_dotenv

# 設定を読む前に .env を読み込んで環境変数を初期化する
load_dotenv()


def _normalize_database_url(url: str | None) -> str | None:
    """ホスティング側が渡す ``postgres://`` 形式のURLをSQLAlchemyが受け付ける形に直す。"""

    if not url:
        return None
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://") :]
    return url


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """環境変数から読み込むアプリの設定値をまとめたクラス。"""

    APP_ENV = os.environ.get("APP_ENV", "development")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    SQLALCHEMY_DATABASE_URI = _normalize_database_url(os.environ.get("DATABASE_URL"))
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}
    DATABASE_SSLMODE = os.environ.get("DATABASE_SSLMODE")
    APP_AUTO_MIGRATE = _env_flag("APP_AUTO_MIGRATE")

    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "uploads")
    MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", str(15 * 1024 * 1024)))
    # リクエスト全体の上限。ファイル単位の上限は MAX_UPLOAD_BYTES で判定する
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", str(64 * 1024 * 1024)))

    PASSWORD_HASH_METHOD = os.environ.get("PASSWORD_HASH_METHOD", "scrypt")

    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
    GEMINI_IMAGE_MODEL = os.environ.get("GEMINI_IMAGE_MODEL", "gemini-3-pro-image-preview")
    GEMINI_CHAT_MODEL = os.environ.get("GEMINI_CHAT_MODEL", "gemini-2.5-flash")
    AI_TIMEOUT_SECONDS = int(os.environ.get("AI_TIMEOUT_SECONDS", "120"))

    AI_PREVIEW_URL = os.environ.get("AI_PREVIEW_URL", "https://api.ai-provider.com/v1/replace-floor")
    AI_PREVIEW_API_KEY = os.environ.get("AI_PREVIEW_API_KEY") or os.environ.get("SOME_AI_API_KEY")
    AI_PREVIEW_TIMEOUT_SECONDS = int(os.environ.get("AI_PREVIEW_TIMEOUT_SECONDS", "60"))

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    PORT = int(os.environ.get("PORT", "3000"))
