from __future__ import annotations

from pathlib import Path

import pytest

from app import create_app
from extensions import db
from fakes import FakeGenaiClient, FakePreviewProvider
from services.ai_gateway import AIGateway


@pytest.fixture
def genai_client():
    return FakeGenaiClient()


@pytest.fixture
def preview_provider():
    return FakePreviewProvider()


@pytest.fixture
def app(tmp_path, genai_client, preview_provider):
    db_path = tmp_path / "test.db"
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path}",
            "UPLOAD_FOLDER": str(tmp_path / "uploads"),
            "GEMINI_API_KEY": "test-key",
            "PASSWORD_HASH_METHOD": "pbkdf2:sha256:1000",
            "APP_AUTO_MIGRATE": False,
        },
        ai_gateway=AIGateway(genai_client, image_model="test-image-model", chat_model="test-chat-model"),
        preview_provider=preview_provider,
    )
    with app.app_context():
        db.create_all()
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upload_folder(app) -> Path:
    return Path(app.config["UPLOAD_FOLDER"])
