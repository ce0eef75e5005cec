"""
Tests for the chat SSE relay.
"""

import gzip
from unittest.mock import MagicMock

import httpx
import pytest

from renoplan.ai.chat import router as chat_router
from renoplan.ai.gateway.exceptions import (
    GatewayBadRequestError,
    GatewayError,
    GatewayPaymentRequiredError,
    GatewayRateLimitError,
)
from renoplan.conftest import auth_headers

STREAM = (
    b'data: {"choices":[{"delta":{"content":"Hel"}}]}\n\n'
    b'data: {"choices":[{"delta":{"content":"lo"}}]}\n\n'
    b"data: [DONE]\n\n"
)

HELLO = {"messages": [{"role": "user", "content": "Hi"}]}


class BrokenStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        yield b'data: {"choices":[{"delta":{"content":"Hel"}}]}\n\n'
        raise httpx.ReadError("connection reset")


@pytest.fixture
def scheduled(monkeypatch):
    schedule = MagicMock()
    monkeypatch.setattr(chat_router, "schedule_project_sync", schedule)
    return schedule


def system_prompt(gateway) -> str:
    model, messages = gateway.open_chat_stream.call_args.args
    assert messages[0]["role"] == "system"
    return messages[0]["content"]


@pytest.mark.asyncio
async def test_anonymous_stream_is_relayed_untouched(client, gateway, scheduled):
    gateway.open_chat_stream.return_value = httpx.Response(200, stream=httpx.ByteStream(STREAM))

    response = await client.post("/api/ai/chat", json={**HELLO, "isAnonymous": True})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"
    assert response.content == STREAM
    assert "create a free account" in system_prompt(gateway)
    scheduled.assert_not_called()


@pytest.mark.asyncio
async def test_compressed_gateway_stream_is_decoded(client, gateway, scheduled, monkeypatch):
    log = MagicMock()
    monkeypatch.setattr(chat_router, "logger", log)
    gateway.open_chat_stream.return_value = httpx.Response(
        200,
        headers={"Content-Encoding": "gzip"},
        stream=httpx.ByteStream(gzip.compress(STREAM)),
    )

    response = await client.post("/api/ai/chat", json=HELLO)

    assert response.status_code == 200
    assert "content-encoding" not in response.headers
    assert response.content == STREAM
    log.info.assert_any_call("[AGENT_OUTPUT]", user_id=None, output="Hello")


@pytest.mark.asyncio
async def test_photo_selects_vision_model(client, gateway, scheduled):
    gateway.open_chat_stream.return_value = httpx.Response(200, stream=httpx.ByteStream(STREAM))
    body = {
        "messages": [
            {"role": "user", "content": "What about this?", "imageUrl": "https://img/1.jpg"}
        ]
    }

    await client.post("/api/ai/chat", json=body, headers=auth_headers())

    model, messages = gateway.open_chat_stream.call_args.args
    assert model == gateway.settings.vision_model
    assert messages[1]["content"][1] == {
        "type": "image_url",
        "image_url": {"url": "https://img/1.jpg"},
    }


@pytest.mark.asyncio
async def test_owner_gets_project_context_and_sync(client, gateway, scheduled):
    project = (
        await client.post(
            "/api/projects", json={"name": "Attic loft", "budget": 25000}, headers=auth_headers()
        )
    ).json()
    conversation = (
        await client.post(
            "/api/conversations", json={"project_id": project["id"]}, headers=auth_headers()
        )
    ).json()
    gateway.open_chat_stream.return_value = httpx.Response(200, stream=httpx.ByteStream(STREAM))

    response = await client.post(
        "/api/ai/chat",
        json={**HELLO, "projectId": project["id"], "conversationId": conversation["id"]},
        headers=auth_headers(),
    )

    assert response.status_code == 200
    prompt = system_prompt(gateway)
    assert "- Project Name: Attic loft" in prompt
    assert "- Budget: $25000" in prompt
    scheduled.assert_called_once_with(gateway, project["id"], conversation["id"])


@pytest.mark.asyncio
async def test_other_users_project_adds_no_context(client, gateway, scheduled):
    project = (
        await client.post(
            "/api/projects", json={"name": "Garage"}, headers=auth_headers("other-token")
        )
    ).json()
    gateway.open_chat_stream.return_value = httpx.Response(200, stream=httpx.ByteStream(STREAM))

    await client.post(
        "/api/ai/chat", json={**HELLO, "projectId": project["id"]}, headers=auth_headers()
    )

    assert "CURRENT PROJECT CONTEXT" not in system_prompt(gateway)
    scheduled.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, status, message",
    [
        (GatewayRateLimitError(), 429, "Rate limits exceeded, please try again later."),
        (
            GatewayPaymentRequiredError(),
            402,
            "Payment required, please add funds to your AI workspace.",
        ),
        (GatewayBadRequestError("Image too large"), 400, "Image too large"),
        (GatewayError("boom", status_code=503), 500, "AI gateway error"),
    ],
)
async def test_gateway_errors(client, gateway, scheduled, error, status, message):
    gateway.open_chat_stream.side_effect = error

    response = await client.post("/api/ai/chat", json=HELLO)

    assert response.status_code == status
    assert response.json() == {"error": message}


@pytest.mark.asyncio
async def test_stream_failure_emits_error_event(client, gateway, scheduled):
    gateway.open_chat_stream.return_value = httpx.Response(200, stream=BrokenStream())

    response = await client.post("/api/ai/chat", json=HELLO)

    assert response.content.startswith(b'data: {"choices":[{"delta":{"content":"Hel"}}]}')
    assert response.content.endswith(b'event: error\ndata: {"error": "AI gateway error"}\n\n')


@pytest.mark.asyncio
async def test_empty_messages_rejected(client, gateway):
    response = await client.post("/api/ai/chat", json={"messages": []})

    assert response.status_code == 422
    gateway.open_chat_stream.assert_not_called()
