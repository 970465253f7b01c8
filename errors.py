"""サービス層で共有し、ビュー側でJSONに変換する例外。

各例外は返すべきHTTPステータスを持つので、サービスはFlaskを知らずに失敗を伝えられる。
"""

from __future__ import annotations

from typing import Optional


class ServiceError(Exception):
    """JSONのエラーレスポンスになる失敗の基底クラス。"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Invalid request"


class InvalidArgument(ValidationError):
    """使えない引数（空のプロンプトなど）で呼ばれたことを表す。"""


class AuthError(ServiceError):
    status_code = 401
    default_message = "Wrong password"


class UserNotFound(ServiceError):
    # 未登録メールのログインは従来どおり400で返す（クライアントがこれに依存している）
    status_code = 400
    default_message = "User not found"


class UploadError(ServiceError):
    status_code = 400
    default_message = "Upload rejected"


class MissingFile(UploadError):
    default_message = "No file uploaded"


class UnsupportedMediaType(UploadError):
    default_message = "Only JPG and PNG allowed"


class PayloadTooLarge(UploadError):
    default_message = "File too large"


class StorageError(ServiceError):
    default_message = "Storage error"


class ExternalServiceError(ServiceError):
    default_message = "External service failed"
