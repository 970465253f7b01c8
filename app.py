from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import click
from flask import Flask, jsonify
from flask.cli import with_appcontext
from flask_migrate import upgrade
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from config import Config
from errors import PayloadTooLarge, ServiceError
from extensions import AI_GATEWAY_KEY, PREVIEW_PROVIDER_KEY, cors, db, migrate
from services.ai_gateway import AIGateway
from services.preview import FloorPreviewProvider, HttpFloorPreviewProvider
from services.uploads import ensure_upload_dir
from views.api import api_bp
from views.assets import assets_bp
from views.auth import auth_bp
from views.tiles import tiles_bp

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def create_app(
    config_object: object | None = None,
    *,
    ai_gateway: Optional[AIGateway] = None,
    preview_provider: Optional[FloorPreviewProvider] = None,
) -> Flask:
    """Flaskアプリと、プロセス中使い回すサービスを組み立てる。"""

    app = Flask(__name__)
    app.config.from_object(Config)
    if config_object:
        if isinstance(config_object, dict):
            app.config.update(config_object)
        else:
            app.config.from_object(config_object)

    configure_logging(app)
    ensure_required_settings(app)
    apply_database_options(app)
    prepare_upload_folder(app)

    db.init_app(app)
    migrate.init_app(app, db, directory=str(MIGRATIONS_DIR))
    cors.init_app(app, origins=app.config.get("CORS_ORIGINS", "*"))

    app.extensions[AI_GATEWAY_KEY] = ai_gateway or AIGateway.from_config(app.config)
    app.extensions[PREVIEW_PROVIDER_KEY] = preview_provider or HttpFloorPreviewProvider.from_config(app.config)

    register_error_handlers(app)
    register_cli(app)
    register_blueprints(app)
    maybe_auto_migrate(app)
    return app


def configure_logging(app: Flask) -> None:
    level = str(app.config.get("LOG_LEVEL") or "INFO").upper()
    app.logger.setLevel(getattr(logging, level, logging.INFO))


def ensure_required_settings(app: Flask) -> None:
    """DB接続先とAIプロバイダのキーが無ければ起動を中止する。"""

    if app.config.get("TESTING"):
        return

    missing = []
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        missing.append("DATABASE_URL")
    if not app.config.get("GEMINI_API_KEY"):
        missing.append("GEMINI_API_KEY")
    if missing:
        message = f"Missing required settings: {', '.join(missing)}. Set them in .env before starting."
        app.logger.critical(message)
        raise RuntimeError(message)


def apply_database_options(app: Flask) -> None:
    database_url = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    options: dict[str, Any] = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS") or {})
    sslmode = app.config.get("DATABASE_SSLMODE")
    if sslmode and database_url.startswith("postgresql"):
        connect_args = dict(options.get("connect_args") or {})
        connect_args.setdefault("sslmode", sslmode)
        options["connect_args"] = connect_args
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = options
    app.logger.info("Database dialect: %s", database_url.split(":", 1)[0] or "unset")


def prepare_upload_folder(app: Flask) -> None:
    folder = Path(app.config.get("UPLOAD_FOLDER") or "uploads")
    if not folder.is_absolute():
        folder = Path(app.root_path) / folder
    app.config["UPLOAD_FOLDER"] = str(ensure_upload_dir(folder))
    app.logger.info("Serving uploads from %s", app.config["UPLOAD_FOLDER"])


def maybe_auto_migrate(app: Flask) -> None:
    """必要に応じて起動時にマイグレーションを実行する。"""

    if not app.config.get("APP_AUTO_MIGRATE"):
        return
    with app.app_context():
        upgrade(directory=str(MIGRATIONS_DIR))
        app.logger.info("Auto migration completed.")


def register_blueprints(app: Flask) -> None:
    app.register_blueprint(auth_bp)
    app.register_blueprint(tiles_bp)
    app.register_blueprint(api_bp)
    app.register_blueprint(assets_bp)


def register_error_handlers(app: Flask) -> None:
    """すべての失敗をJSONで返すようにする。"""

    @app.errorhandler(ServiceError)
    def handle_service_error(error: ServiceError):
        if error.status_code >= 500:
            app.logger.error("Service failure: %s", error.message)
        return jsonify({"error": error.message}), error.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_request_too_large(error: RequestEntityTooLarge):
        return jsonify({"error": PayloadTooLarge.default_message}), PayloadTooLarge.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        return jsonify({"error": error.description or error.name}), error.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        app.logger.exception("Unhandled error: %s", error)
        return jsonify({"error": "Internal server error"}), 500


def register_cli(app: Flask) -> None:
    @app.cli.command("init-db")
    @with_appcontext
    def init_db_command() -> None:
        """設定済みのDBへ全マイグレーションを適用する。"""

        upgrade(directory=str(MIGRATIONS_DIR))
        click.echo("Database initialized.")
