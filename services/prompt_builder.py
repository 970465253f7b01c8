from __future__ import annotations

TILE_PROMPT_TEMPLATE = (
    "Seamless ceramic tile texture, {prompt}, tileable pattern, top view, 4K resolution, photorealistic"
)

# 「あなたはタイルと部屋のデザインの専門家です。タイ語で答えてください。」
DEFAULT_CHAT_SYSTEM_PROMPT = "คุณคือผู้เชี่ยวชาญด้านกระเบื้องและการออกแบบห้อง ตอบเป็นภาษาไทย"

# 「申し訳ありません、今は回答できません。」
CHAT_EMPTY_REPLY = "ขออภัย ไม่สามารถตอบได้ในขณะนี้"

# 「エラーが発生しました。もう一度お試しください。」
CHAT_FALLBACK_REPLY = "เกิดข้อผิดพลาด กรุณาลองใหม่"

FLOOR_PREVIEW_INSTRUCTION = "Replace the floor with this tile texture, realistic interior photography"


def build_tile_prompt(prompt: str) -> str:
    """ユーザーの説明をタイルテクスチャ用の固定文言で包む。"""

    return TILE_PROMPT_TEMPLATE.format(prompt=prompt.strip())


def build_system_instruction(system: str | None, extra: list[str] | None = None) -> str:
    """指定があればそれを、無ければ既定のペルソナを使い、履歴中のsystemターンを足す。"""

    parts = [system.strip() if system and system.strip() else DEFAULT_CHAT_SYSTEM_PROMPT]
    for text in extra or []:
        if text.strip():
            parts.append(text.strip())
    return "\n\n".join(parts)
