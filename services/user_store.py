from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from errors import StorageError
from extensions import db
from models import User

logger = logging.getLogger(__name__)


def find_user_by_email(email: str) -> Optional[User]:
    """メールアドレスの完全一致（大文字小文字を区別）でユーザーを探す。"""

    try:
        return User.query.filter_by(email=email).first()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("User lookup failed: %s", exc)
        raise StorageError("User lookup failed") from exc


def insert_user(email: str, password_hash: str) -> User:
    """ユーザー行を新規追加する。

    呼び出し側で既存メールを確認済みだが、同時登録が両方その確認を通った場合は
    一意制約が後の方を弾き、ここで StorageError になる。
    """

    user = User(email=email, password_hash=password_hash)
    db.session.add(user)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("User insert failed: %s", exc)
        raise StorageError("User insert failed") from exc
    return user
