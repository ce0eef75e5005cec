import pytest

from renoplan.main import app, get_version


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/", "/healthcheck"])
async def test_health(client, path):
    response = await client.get(path)

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Renoplan API is running"}


def test_version_comes_from_pyproject():
    assert app.version == get_version() == "0.4.0"


def test_chat_relay_route_is_mounted():
    routes = {
        (route.path, method)
        for route in app.routes
        for method in getattr(route, "methods", ())
    }

    assert ("/api/ai/chat", "POST") in routes
