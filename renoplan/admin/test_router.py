"""
Tests for the admin dashboard and role management routes.
"""

import pytest

from renoplan.conftest import auth_headers


async def seed_activity(client):
    """user-123: one project, one conversation with two messages. user-456: one project."""
    project = (
        await client.post("/api/projects", json={"name": "Kitchen"}, headers=auth_headers())
    ).json()
    conversation = (
        await client.post(
            "/api/conversations", json={"project_id": project["id"]}, headers=auth_headers()
        )
    ).json()
    for role, content in (("user", "Hi"), ("assistant", "Hello!")):
        await client.post(
            f"/api/conversations/{conversation['id']}/messages",
            json={"role": role, "content": content},
            headers=auth_headers(),
        )
    await client.post("/api/projects", json={"name": "Deck"}, headers=auth_headers("other-token"))


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/admin/stats", "/api/admin/users"])
async def test_requires_admin(client, path):
    response = await client.get(path, headers=auth_headers())

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_stats(client):
    await seed_activity(client)

    response = await client.get("/api/admin/stats", headers=auth_headers("admin-token"))

    assert response.json() == {
        "total_users": 2,
        "active_users": 1,
        "total_projects": 2,
        "total_conversations": 1,
        "total_messages": 2,
    }


@pytest.mark.asyncio
async def test_users_most_active_first(client):
    await seed_activity(client)

    response = await client.get("/api/admin/users", headers=auth_headers("admin-token"))

    users = response.json()["users"]
    assert [u["user_id"] for u in users] == ["user-123", "user-456", "admin-789"]
    assert users[0] == {
        "user_id": "user-123",
        "is_admin": False,
        "project_count": 1,
        "conversation_count": 1,
        "message_count": 2,
    }
    assert users[2]["is_admin"] is True


@pytest.mark.asyncio
async def test_grant_and_revoke(client):
    granted = await client.post(
        "/api/admin/users/user-123/admin", headers=auth_headers("admin-token")
    )
    again = await client.post("/api/admin/users/user-123/admin", headers=auth_headers("admin-token"))

    assert granted.json() == {"user_id": "user-123", "is_admin": True, "changed": True}
    assert again.json()["changed"] is False
    me = await client.get("/api/auth/me", headers=auth_headers())
    assert me.json()["is_admin"] is True

    revoked = await client.delete(
        "/api/admin/users/user-123/admin", headers=auth_headers("admin-token")
    )

    assert revoked.json() == {"user_id": "user-123", "is_admin": False, "changed": True}
    assert (await client.get("/api/admin/stats", headers=auth_headers())).status_code == 403


@pytest.mark.asyncio
async def test_cannot_revoke_own_role(client):
    response = await client.delete(
        "/api/admin/users/admin-789/admin", headers=auth_headers("admin-token")
    )

    assert response.status_code == 400
    me = await client.get("/api/auth/me", headers=auth_headers("admin-token"))
    assert me.json()["is_admin"] is True
