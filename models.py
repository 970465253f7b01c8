from __future__ import annotations

from extensions import db


class User(db.Model):
    """登録済みのアカウントを表すモデル。行は追加のみ行う。"""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    # 既存テーブルのカラム名に合わせる
    password_hash = db.Column("password", db.String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
