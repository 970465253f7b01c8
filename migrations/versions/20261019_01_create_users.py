"""users テーブルを作成する。

Revision ID: 20261019_01_create_users
Revises: none
Create Date: 2026-10-19 10:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "20261019_01_create_users"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # 既存サーバーが作成済みのテーブルがあればそのまま使う
    bind = op.get_bind()
    if "users" in sa.inspect(bind).get_table_names():
        return

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )


def downgrade() -> None:
    op.drop_table("users")
