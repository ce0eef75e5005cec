"""
Tests for the platform auth provider and the /auth/me route.
"""

import httpx
import pytest

from renoplan.auth import config
from renoplan.auth.config import AuthSettings
from renoplan.auth.service import PlatformAuthProvider
from renoplan.conftest import auth_headers


@pytest.fixture
def auth_settings(monkeypatch):
    settings = AuthSettings(url="https://auth.test/v1/", api_key="public-key")
    monkeypatch.setattr(config, "_auth_settings", settings)
    return settings


class TestPlatformAuthProvider:
    @pytest.mark.asyncio
    async def test_valid_token(self, auth_settings):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            return httpx.Response(
                200,
                json={
                    "id": "user-1",
                    "email": "pat@example.com",
                    "user_metadata": {"full_name": "Pat Doe"},
                },
            )

        provider = PlatformAuthProvider(transport=httpx.MockTransport(handler))
        session = await provider.get_session("token-abc")

        assert session.user.id == "user-1"
        assert session.user.name == "Pat Doe"
        assert session.access_token == "token-abc"
        assert seen["url"] == "https://auth.test/v1/user"
        assert seen["headers"]["Authorization"] == "Bearer token-abc"
        assert seen["headers"]["apikey"] == "public-key"

    @pytest.mark.asyncio
    async def test_rejected_token(self, auth_settings):
        provider = PlatformAuthProvider(
            transport=httpx.MockTransport(lambda request: httpx.Response(401, json={}))
        )

        assert await provider.get_session("expired") is None

    @pytest.mark.asyncio
    async def test_response_without_id(self, auth_settings):
        provider = PlatformAuthProvider(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={}))
        )

        assert await provider.get_session("token") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>maintenance</html>"),
            httpx.Response(200, json=["not", "a", "user"]),
        ],
    )
    async def test_unreadable_user_payload(self, auth_settings, response):
        provider = PlatformAuthProvider(
            transport=httpx.MockTransport(lambda request: response)
        )

        assert await provider.get_session("token") is None

    @pytest.mark.asyncio
    async def test_unreachable_service(self, auth_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        provider = PlatformAuthProvider(transport=httpx.MockTransport(handler))

        assert await provider.get_session("token") is None


class TestMeRoute:
    @pytest.mark.asyncio
    async def test_me(self, client):
        response = await client.get("/api/auth/me", headers=auth_headers())

        assert response.status_code == 200
        assert response.json()["user"]["id"] == "user-123"
        assert response.json()["is_admin"] is False

    @pytest.mark.asyncio
    async def test_admin_flag(self, client):
        response = await client.get("/api/auth/me", headers=auth_headers("admin-token"))

        assert response.json()["is_admin"] is True

    @pytest.mark.asyncio
    async def test_invalid_token(self, client):
        response = await client.get("/api/auth/me", headers=auth_headers("bogus"))

        assert response.status_code == 401
