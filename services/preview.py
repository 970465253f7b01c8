from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol

import requests

from errors import ExternalServiceError
from services.prompt_builder import FLOOR_PREVIEW_INSTRUCTION

logger = logging.getLogger(__name__)


class FloorPreviewProvider(Protocol):
    """部屋写真の床にタイルのテクスチャを合成できるもの。"""

    def replace_floor(self, room_image_url: Optional[str], tile_image_url: Optional[str]) -> Optional[str]:
        ...


class HttpFloorPreviewProvider:
    """Bearerキー付きのHTTPで呼び出す合成API。"""

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str],
        *,
        timeout: float = 60,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "HttpFloorPreviewProvider":
        return cls(
            config.get("AI_PREVIEW_URL"),
            config.get("AI_PREVIEW_API_KEY"),
            timeout=config.get("AI_PREVIEW_TIMEOUT_SECONDS") or 60,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def replace_floor(self, room_image_url: Optional[str], tile_image_url: Optional[str]) -> Optional[str]:
        payload = {
            "image": room_image_url,
            "texture": tile_image_url,
            "prompt": FLOOR_PREVIEW_INSTRUCTION,
        }
        try:
            response = self._session.post(self.endpoint, json=payload, headers=self._headers(), timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Floor preview request to %s failed: %s", self.endpoint, exc)
            raise ExternalServiceError("AI Preview failed") from exc

        if not isinstance(data, dict):
            raise ExternalServiceError("AI Preview failed")
        # URLの形式は提供元が決めるのでそのまま返す
        return data.get("output_url")
