from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

logger = logging.getLogger(__name__)

DEFAULT_HASH_METHOD = "scrypt"


def hash_password(plaintext: str, method: Optional[str] = None) -> str:
    """平文パスワードをソルト付きハッシュ文字列に変換する。

    ``method`` は werkzeug の書式（``"scrypt"`` や ``"pbkdf2:sha256:600000"``）で、
    設定からコストを上げられる。
    """

    return generate_password_hash(plaintext, method=method or DEFAULT_HASH_METHOD)


def verify_password(plaintext: str, hashed: str) -> bool:
    """保存済みハッシュとパスワードを照合する。壊れたハッシュは常に不一致とする。"""

    if not isinstance(plaintext, str) or not isinstance(hashed, str) or not hashed:
        return False
    try:
        return check_password_hash(hashed, plaintext)
    except (ValueError, TypeError) as exc:
        logger.warning("Unreadable password hash rejected: %s", exc)
        return False
