from __future__ import annotations

import json

import pytest

from fakes import text_response
from services.ai_gateway import CHAT_HISTORY_LIMIT, ChatTurn, parse_turns
from services.prompt_builder import CHAT_EMPTY_REPLY, CHAT_FALLBACK_REPLY, DEFAULT_CHAT_SYSTEM_PROMPT


def conversation(count: int) -> list[dict[str, str]]:
    return [
        {"role": "user" if index % 2 == 0 else "assistant", "content": f"turn {index}"}
        for index in range(count)
    ]


def test_chat_returns_reply(client, genai_client):
    genai_client.models.response = text_response("  ลองกระเบื้องโทนเทาอ่อนดูครับ  ")

    response = client.post("/api/chat", json={"messages": conversation(1), "userId": 12})

    assert response.status_code == 200
    assert json.loads(response.data) == {"reply": "ลองกระเบื้องโทนเทาอ่อนดูครับ"}

    call = genai_client.models.calls[0]
    assert call["model"] == "test-chat-model"
    assert call["config"].system_instruction == DEFAULT_CHAT_SYSTEM_PROMPT
    assert call["config"].max_output_tokens == 600
    assert call["config"].temperature == 0.7


def test_chat_forwards_only_recent_turns(client, genai_client):
    genai_client.models.response = text_response("ok")

    response = client.post("/api/chat", json={"messages": conversation(25)})

    assert response.status_code == 200
    contents = genai_client.models.calls[0]["contents"]
    assert len(contents) == CHAT_HISTORY_LIMIT == 20
    assert contents[0].parts[0].text == "turn 5"
    assert contents[-1].parts[0].text == "turn 24"
    assert [content.role for content in contents[:2]] == ["model", "user"]
    assert genai_client.models.calls[0]["config"].system_instruction == DEFAULT_CHAT_SYSTEM_PROMPT


def test_chat_uses_system_override(client, genai_client):
    genai_client.models.response = text_response("ok")

    client.post("/api/chat", json={"messages": conversation(2), "system": "Answer in English."})

    assert genai_client.models.calls[0]["config"].system_instruction == "Answer in English."


def test_chat_folds_system_turns_into_instruction(client, genai_client):
    genai_client.models.response = text_response("ok")
    messages = [{"role": "system", "content": "The room is 4x5 m."}] + conversation(1)

    client.post("/api/chat", json={"messages": messages})

    call = genai_client.models.calls[0]
    assert call["config"].system_instruction == f"{DEFAULT_CHAT_SYSTEM_PROMPT}\n\nThe room is 4x5 m."
    assert len(call["contents"]) == 1


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"messages": []},
        {"messages": "hello"},
        {"messages": [{"role": "robot", "content": "hi"}]},
        {"messages": [{"role": "user"}]},
        {"messages": ["hi"]},
    ],
)
def test_chat_rejects_bad_messages(client, genai_client, payload):
    response = client.post("/api/chat", json=payload)

    assert response.status_code == 400
    assert json.loads(response.data)["error"] == "messages array required"
    assert genai_client.models.calls == []


def test_chat_failure_still_returns_reply(client, genai_client):
    genai_client.models.error = RuntimeError("upstream timeout")

    response = client.post("/api/chat", json={"messages": conversation(3)})

    assert response.status_code == 500
    payload = json.loads(response.data)
    assert payload["error"] == "Chat failed"
    assert payload["reply"] == CHAT_FALLBACK_REPLY


def test_chat_empty_completion_gets_apology(client, genai_client):
    genai_client.models.response = text_response(None)

    response = client.post("/api/chat", json={"messages": conversation(1)})

    assert response.status_code == 200
    assert json.loads(response.data)["reply"] == CHAT_EMPTY_REPLY


def test_parse_turns_builds_chat_turns():
    assert parse_turns([{"role": "user", "content": "hi", "extra": 1}]) == [ChatTurn(role="user", content="hi")]
