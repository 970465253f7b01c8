from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional, Union
from uuid import uuid4

from PIL import Image, UnidentifiedImageError
from werkzeug.datastructures import FileStorage

from errors import ExternalServiceError, MissingFile, PayloadTooLarge, UnsupportedMediaType, UploadError

logger = logging.getLogger(__name__)

PUBLIC_URL_PREFIX = "/uploads"
MAX_UPLOAD_BYTES = 15 * 1024 * 1024
ALLOWED_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
}

# 種別ごとに受け付けるクライアント側の拡張子。それ以外は種別から決めた拡張子に置き換える
EXTENSIONS_BY_TYPE: dict[str, frozenset[str]] = {
    "image/jpeg": frozenset({".jpg", ".jpeg"}),
    "image/png": frozenset({".png"}),
}


@dataclass(frozen=True)
class StoredAsset:
    """アップロード用ディレクトリへ保存した画像の情報。"""

    filename: str
    path: Path
    url: str
    byte_size: int


@dataclass(frozen=True)
class UploadCheck:
    """ディスクに書く前に行うアップロード検証の結果。"""

    accepted: bool
    reason: str = ""
    error: Optional[type[UploadError]] = None

    def raise_if_rejected(self) -> None:
        if not self.accepted and self.error is not None:
            raise self.error(self.reason)


ACCEPTED = UploadCheck(accepted=True)


def check_upload(content_type: Optional[str], size: int, *, max_bytes: int = MAX_UPLOAD_BYTES) -> UploadCheck:
    """アップロードの申告された種別とバイト数を検証する。"""

    if (content_type or "").lower() not in ALLOWED_CONTENT_TYPES:
        return UploadCheck(False, UnsupportedMediaType.default_message, UnsupportedMediaType)
    if size > max_bytes:
        return UploadCheck(False, PayloadTooLarge.default_message, PayloadTooLarge)
    return ACCEPTED


def ensure_upload_dir(path: Union[str, Path]) -> Path:
    base = Path(path)
    base.mkdir(parents=True, exist_ok=True)
    return base


def public_url(filename: str) -> str:
    return f"{PUBLIC_URL_PREFIX}/{filename}"


def extension_for(original_name: Optional[str], content_type: Optional[str]) -> str:
    """クライアントの拡張子は種別と一致する場合のみ使う。"""

    normalized_type = (content_type or "").lower()
    suffix = Path(original_name or "").suffix
    if suffix.lower() in EXTENSIONS_BY_TYPE.get(normalized_type, frozenset()):
        return suffix
    return ALLOWED_CONTENT_TYPES.get(normalized_type, "")


def _build_filename(extension: str) -> str:
    return f"{uuid4().hex}{extension}"


def _write(upload_dir: Path, extension: str, raw_bytes: bytes) -> StoredAsset:
    filename = _build_filename(extension)
    path = upload_dir / filename
    path.write_bytes(raw_bytes)
    logger.info("Stored asset %s (%d bytes)", filename, len(raw_bytes))
    return StoredAsset(filename=filename, path=path, url=public_url(filename), byte_size=len(raw_bytes))


def _read_limited(file: FileStorage, max_bytes: int) -> bytes:
    # 上限より1バイト多く読めば超過かどうか判定できる
    return file.stream.read(max_bytes + 1)


def save_upload(
    file: Optional[FileStorage],
    upload_dir: Union[str, Path],
    *,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> StoredAsset:
    """multipartのファイルを検証し、ランダムな名前で保存する。"""

    if file is None or not file.filename:
        raise MissingFile()

    content_type = file.mimetype
    # 本文を読む前に種別を確認する
    check_upload(content_type, 0, max_bytes=max_bytes).raise_if_rejected()

    raw_bytes = _read_limited(file, max_bytes)
    check_upload(content_type, len(raw_bytes), max_bytes=max_bytes).raise_if_rejected()
    if not raw_bytes:
        raise MissingFile()

    return _write(Path(upload_dir), extension_for(file.filename, content_type), raw_bytes)


def _as_png(raw_bytes: bytes) -> bytes:
    try:
        image = Image.open(BytesIO(raw_bytes))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise ExternalServiceError("Generated data is not an image") from exc

    if image.format == "PNG":
        return raw_bytes

    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def store_generated_image(payload: Union[bytes, str], upload_dir: Union[str, Path]) -> StoredAsset:
    """AIが生成した画像を ``<token>.png`` として保存する。

    バイト列と、提供元によって返されるbase64文字列のどちらも受け付ける。
    """

    if isinstance(payload, str):
        try:
            payload = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ExternalServiceError("Generated image is not valid base64") from exc

    return _write(Path(upload_dir), ".png", _as_png(payload))
