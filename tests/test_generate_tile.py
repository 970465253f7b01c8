from __future__ import annotations

import json

import pytest

from fakes import image_response, make_image_bytes


def test_generate_tile_wraps_prompt_and_stores_png(client, genai_client, upload_folder):
    raw_bytes = make_image_bytes()
    genai_client.models.response = image_response(raw_bytes)

    response = client.post("/generate-tile", json={"prompt": "white marble with gold veins"})

    assert response.status_code == 200
    tile_url = json.loads(response.data)["tileUrl"]
    assert tile_url.startswith("/uploads/") and tile_url.endswith(".png")

    call = genai_client.models.calls[0]
    assert call["model"] == "test-image-model"
    assert call["contents"] == [
        "Seamless ceramic tile texture, white marble with gold veins, tileable pattern, "
        "top view, 4K resolution, photorealistic"
    ]
    assert (upload_folder / tile_url.rsplit("/", 1)[1]).read_bytes() == raw_bytes


def test_same_prompt_twice_gives_distinct_assets(client, genai_client):
    genai_client.models.response = image_response(make_image_bytes())

    first = json.loads(client.post("/generate-tile", json={"prompt": "terrazzo"}).data)["tileUrl"]
    second = json.loads(client.post("/generate-tile", json={"prompt": "terrazzo"}).data)["tileUrl"]

    assert first != second
    assert client.get(first).status_code == 200
    assert client.get(second).status_code == 200


@pytest.mark.parametrize("payload", [{}, {"prompt": ""}, {"prompt": "   "}, {"prompt": 7}])
def test_generate_tile_requires_prompt(client, genai_client, payload):
    response = client.post("/generate-tile", json=payload)

    assert response.status_code == 400
    assert json.loads(response.data)["error"] == "Prompt is required"
    assert genai_client.models.calls == []


def test_generate_tile_provider_failure_returns_500(client, genai_client, upload_folder):
    genai_client.models.error = RuntimeError("quota exceeded")

    response = client.post("/generate-tile", json={"prompt": "slate"})

    assert response.status_code == 500
    assert json.loads(response.data)["error"] == "AI generation failed"
    assert list(upload_folder.iterdir()) == []


def test_generate_tile_without_image_part_returns_500(client, genai_client):
    genai_client.models.response = image_response(b"")

    response = client.post("/generate-tile", json={"prompt": "slate"})

    assert response.status_code == 500
