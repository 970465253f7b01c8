from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from google import genai
from google.genai import types

from errors import ExternalServiceError, InvalidArgument, ValidationError
from services.prompt_builder import CHAT_EMPTY_REPLY, build_system_instruction, build_tile_prompt

logger = logging.getLogger(__name__)

CHAT_HISTORY_LIMIT = 20
CHAT_MAX_OUTPUT_TOKENS = 600
CHAT_TEMPERATURE = 0.7
CHAT_ROLES = frozenset({"system", "user", "assistant"})

# Gemini ではアシスタント側のロールを "model" と呼ぶ
_PROVIDER_ROLES = {"user": "user", "assistant": "model"}


@dataclass(frozen=True)
class ChatTurn:
    """ロール付きの会話メッセージ1件。"""

    role: str
    content: str


@dataclass
class GeneratedTile:
    raw_bytes: bytes
    mime_type: str
    prompt: str


def parse_turns(raw: Any) -> list[ChatTurn]:
    """チャットリクエストの ``messages`` 配列を検証する。"""

    if not isinstance(raw, list) or not raw:
        raise ValidationError("messages array required")

    turns: list[ChatTurn] = []
    for item in raw:
        if not isinstance(item, Mapping):
            raise ValidationError("messages array required")
        role = item.get("role")
        content = item.get("content")
        if not isinstance(role, str) or role not in CHAT_ROLES or not isinstance(content, str):
            raise ValidationError("messages array required")
        turns.append(ChatTurn(role=role, content=content))
    return turns


def recent_turns(history: Sequence[ChatTurn], limit: int = CHAT_HISTORY_LIMIT) -> list[ChatTurn]:
    return list(history[-limit:]) if limit > 0 else []


class AIGateway:
    """Gemini の画像・テキストモデルへの呼び出しをまとめたクラス。

    ``genai.Client`` はプロセス中1つだけ保持する。
    """

    def __init__(self, client: Any, *, image_model: str, chat_model: str) -> None:
        self._client = client
        self.image_model = image_model
        self.chat_model = chat_model

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "AIGateway":
        timeout_ms = int(config.get("AI_TIMEOUT_SECONDS") or 0) * 1000
        http_options = types.HttpOptions(timeout=timeout_ms) if timeout_ms else None
        client = genai.Client(api_key=config.get("GEMINI_API_KEY"), http_options=http_options)
        return cls(
            client,
            image_model=config.get("GEMINI_IMAGE_MODEL"),
            chat_model=config.get("GEMINI_CHAT_MODEL"),
        )

    def generate_tile(self, prompt: Optional[str]) -> GeneratedTile:
        """ユーザーの説明からシームレスなタイルのテクスチャを生成する。"""

        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidArgument("Prompt is required")

        full_prompt = build_tile_prompt(prompt)
        try:
            response = self._client.models.generate_content(
                model=self.image_model,
                contents=[full_prompt],
                config=types.GenerateContentConfig(
                    response_modalities=["TEXT", "IMAGE"],
                    image_config=types.ImageConfig(aspect_ratio="1:1"),
                ),
            )
        except Exception as exc:  # noqa: BLE001
            logger.error("Tile generation request failed: %s", exc)
            raise ExternalServiceError("AI generation failed") from exc

        for part in response.parts or []:
            # 画像と一緒に説明文が返ることがある
            if getattr(part, "text", None):
                logger.debug("Gemini response text: %s", part.text)

            inline_data = getattr(part, "inline_data", None)
            if inline_data and getattr(inline_data, "data", None):
                mime_type = getattr(inline_data, "mime_type", None) or "image/png"
                return GeneratedTile(raw_bytes=inline_data.data, mime_type=mime_type, prompt=full_prompt)

        raise ExternalServiceError("AI response did not contain image data")

    def build_chat_request(
        self, history: Sequence[ChatTurn], system: Optional[str] = None
    ) -> tuple[list[types.Content], types.GenerateContentConfig]:
        recent = recent_turns(history)
        system_notes = [turn.content for turn in recent if turn.role == "system"]
        contents = [
            types.Content(role=_PROVIDER_ROLES[turn.role], parts=[types.Part(text=turn.content)])
            for turn in recent
            if turn.role != "system"
        ]
        if not contents:
            raise InvalidArgument("messages array required")

        config = types.GenerateContentConfig(
            system_instruction=build_system_instruction(system, system_notes),
            max_output_tokens=CHAT_MAX_OUTPUT_TOKENS,
            temperature=CHAT_TEMPERATURE,
        )
        return contents, config

    def chat(self, history: Iterable[ChatTurn], system: Optional[str] = None) -> str:
        """会話の直近のターンを送り、アシスタントの返答を返す。"""

        contents, config = self.build_chat_request(list(history), system)
        try:
            response = self._client.models.generate_content(
                model=self.chat_model,
                contents=contents,
                config=config,
            )
            reply = response.text
        except Exception as exc:  # noqa: BLE001
            logger.error("Chat completion request failed: %s", exc)
            raise ExternalServiceError("Chat failed") from exc

        return reply.strip() if reply and reply.strip() else CHAT_EMPTY_REPLY
