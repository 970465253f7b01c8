from __future__ import annotations

from logging.config import fileConfig
from pathlib import Path

from alembic import context
from flask import current_app

alembic_config = context.config
ini_path = Path(alembic_config.config_file_name or Path(__file__).with_name("alembic.ini"))
if ini_path.exists():
    # 起動時にマイグレーションを実行してもFlaskのロガーを無効化しない
    fileConfig(str(ini_path), disable_existing_loggers=False)

flask_db = current_app.extensions["migrate"].db
target_metadata = flask_db.metadata
alembic_config.set_main_option(
    "sqlalchemy.url", flask_db.engine.url.render_as_string(hide_password=False).replace("%", "%%")
)


def _configure_kwargs(dialect_name: str) -> dict:
    # SQLite は多くの制約をその場でALTERできない
    return {"compare_type": True, "render_as_batch": dialect_name == "sqlite"}


def run_migrations_offline() -> None:
    url = alembic_config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        **_configure_kwargs(url.split(":", 1)[0]),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    with flask_db.engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            **_configure_kwargs(connection.dialect.name),
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
